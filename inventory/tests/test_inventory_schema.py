import pytest
from drf_spectacular.generators import SchemaGenerator

BASE = "/api/v1/inventory"


@pytest.fixture(scope="module")
def schema():
    return SchemaGenerator().get_schema(request=None, public=True)


def _json_schema(section):
    return section["content"]["application/json"]["schema"]


@pytest.mark.parametrize(
    "prefix,create_component,read_component",
    [
        ("in", "StockInCreate", "StockIn"),
        ("out", "StockOutCreate", "StockOut"),
        ("mutation", "StockMutationCreate", "StockMutation"),
    ],
)
def test_each_kind_documents_its_own_shapes(schema, prefix, create_component, read_component):
    operations = schema["paths"][f"{BASE}/{prefix}/"]

    request = _json_schema(operations["post"]["requestBody"])
    listing = _json_schema(operations["get"]["responses"]["200"])

    assert request["$ref"] == f"#/components/schemas/{create_component}"
    assert listing["items"]["$ref"] == f"#/components/schemas/{read_component}"


def test_routing_fields_belong_to_their_kind(schema):
    components = schema["components"]["schemas"]

    assert "to_warehouse" in components["StockInCreate"]["properties"]
    assert "to_warehouse" not in components["StockOutCreate"]["properties"]
    assert "to_store_id" in components["StockMutationCreate"]["properties"]


# EOF
