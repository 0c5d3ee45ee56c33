import pytest
from catalog.tests.factories import ProductFactory
from common.choices import MovementStatus, StockStatus
from inventory.models import StockIn
from inventory.tests.factories import (
    StockBalanceFactory,
    StockInFactory,
    StockInLineFactory,
    StockOutFactory,
    StoreFactory,
    UserFactory,
)
from rest_framework.test import APIClient

BASE = "/api/v1/inventory"


@pytest.fixture
def api():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    return client


@pytest.mark.django_db
def test_movement_endpoints_require_authentication():
    client = APIClient()
    assert client.get(f"{BASE}/in/").status_code in (401, 403)
    assert client.post(f"{BASE}/out/", {}, format="json").status_code in (401, 403)
    assert client.get(f"{BASE}/notifications/").status_code in (401, 403)


@pytest.mark.django_db
def test_create_inbound_and_read_it_back(api):
    product = ProductFactory()
    resp = api.post(
        f"{BASE}/in/",
        {
            "transaction_code": "IN-000001",
            "date": "2025-01-15",
            "to_warehouse": True,
            "lines": [{"product_id": product.id, "quantity": 20}],
        },
        format="json",
    )
    assert resp.status_code == 201
    movement_id = resp.json()["id"]

    detail = api.get(f"{BASE}/in/{movement_id}/")
    assert detail.status_code == 200
    body = detail.json()
    assert body["transaction_code"] == "IN-000001"
    assert body["status"] == MovementStatus.PENDING
    assert body["to_warehouse"] is True
    assert body["store"] is None
    assert body["lines"] == [{"id": body["lines"][0]["id"], "product_id": product.id, "quantity": 20}]

    listing = api.get(f"{BASE}/in/")
    assert listing.status_code == 200
    assert [row["id"] for row in listing.json()] == [movement_id]


@pytest.mark.django_db
def test_create_outbound_without_store_is_missing_routing_field(api):
    product = ProductFactory()
    resp = api.post(
        f"{BASE}/out/",
        {"transaction_code": "OUT-1", "date": "2025-01-15", "lines": [{"product_id": product.id, "quantity": 1}]},
        format="json",
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "missing_routing_field"
    assert resp.json()["field"] == "store_id"


@pytest.mark.django_db
def test_create_mutation_between_same_store_is_rejected(api):
    store = StoreFactory()
    product = ProductFactory()
    resp = api.post(
        f"{BASE}/mutation/",
        {
            "transaction_code": "MUT-1",
            "date": "2025-01-15",
            "from_warehouse": False,
            "from_store_id": store.id,
            "to_store_id": store.id,
            "lines": [{"product_id": product.id, "quantity": 1}],
        },
        format="json",
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid"
    assert resp.json()["field"] == "to_store_id"


@pytest.mark.django_db
def test_create_rejections_carry_codes(api):
    product = ProductFactory()
    StockInFactory(transaction_code="IN-TAKEN")

    def post(**overrides):
        data = {
            "transaction_code": "IN-NEW",
            "date": "2025-01-15",
            "lines": [{"product_id": product.id, "quantity": 1}],
        }
        data.update(overrides)
        return api.post(f"{BASE}/in/", data, format="json")

    dup = post(transaction_code="IN-TAKEN")
    assert (dup.status_code, dup.json()["code"]) == (409, "duplicate_transaction_code")

    blank = post(transaction_code="")
    assert (blank.status_code, blank.json()["code"], blank.json()["field"]) == (400, "invalid", "transaction_code")

    empty = post(lines=[])
    assert (empty.status_code, empty.json()["field"]) == (400, "lines")

    zero = post(lines=[{"product_id": product.id, "quantity": 0}])
    assert (zero.status_code, zero.json()["code"], zero.json()["product_id"]) == (400, "invalid_line", product.id)

    missing_product = post(lines=[{"product_id": 999999, "quantity": 1}])
    assert (missing_product.status_code, missing_product.json()["code"]) == (400, "invalid_line")

    missing_store = post(to_warehouse=False, store_id=999999)
    assert (missing_store.status_code, missing_store.json()["code"]) == (404, "store_not_found")

    bad_date = post(date="not-a-date")
    assert bad_date.status_code == 400
    assert "date" in bad_date.json()

    assert not StockIn.objects.filter(transaction_code="IN-NEW").exists()


@pytest.mark.django_db
def test_verify_endpoint_commits_and_rejects_repeat(api):
    product = ProductFactory(threshold=10)
    line = StockInLineFactory(product=product, quantity=25)

    resp = api.post(f"{BASE}/in/{line.movement_id}/verify/")
    assert resp.status_code == 200
    assert resp.json()["status"] == MovementStatus.COMPLETED
    assert resp.json()["verified_by"] is not None

    again = api.post(f"{BASE}/in/{line.movement_id}/verify/")
    assert again.status_code == 409
    assert again.json()["code"] == "already_verified"

    balances = api.get(f"{BASE}/balances/warehouse/").json()
    assert [(b["product"], b["quantity"], b["status"], b["location"]) for b in balances] == [
        (product.id, 25, StockStatus.AVAILABLE, "Gudang")
    ]


@pytest.mark.django_db
def test_verify_outbound_insufficient_stock(api):
    store = StoreFactory(name="Store A")
    product = ProductFactory()
    StockBalanceFactory(store=store, product=product, quantity=10)
    movement = StockOutFactory(store=store)
    movement.lines.create(product=product, quantity=30)

    resp = api.post(f"{BASE}/out/{movement.id}/verify/")

    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "insufficient_stock"
    assert (body["product_id"], body["store_id"]) == (product.id, store.id)
    assert (body["available"], body["requested"]) == (10, 30)
    store_balances = api.get(f"{BASE}/balances/stores/{store.id}/").json()
    assert [b["quantity"] for b in store_balances] == [10]
    assert store_balances[0]["location"] == "Store A"


@pytest.mark.django_db
def test_update_and_delete_follow_status(api):
    product = ProductFactory()
    pending = StockInLineFactory(quantity=1).movement
    completed = StockInFactory(status=MovementStatus.COMPLETED)
    body = {"date": "2025-03-01", "lines": [{"product_id": product.id, "quantity": 6}]}

    updated = api.put(f"{BASE}/in/{pending.id}/", body, format="json")
    assert updated.status_code == 200
    assert updated.json()["date"] == "2025-03-01"
    assert [(ln["product_id"], ln["quantity"]) for ln in updated.json()["lines"]] == [(product.id, 6)]

    blocked_edit = api.put(f"{BASE}/in/{completed.id}/", body, format="json")
    assert (blocked_edit.status_code, blocked_edit.json()["code"]) == (409, "cannot_edit_completed")

    blocked_delete = api.delete(f"{BASE}/in/{completed.id}/")
    assert (blocked_delete.status_code, blocked_delete.json()["code"]) == (409, "cannot_delete_completed")

    assert api.delete(f"{BASE}/in/{pending.id}/").status_code == 204
    missing = api.get(f"{BASE}/in/{pending.id}/")
    assert (missing.status_code, missing.json()["code"]) == (404, "not_found")


@pytest.mark.django_db
def test_verify_unknown_movement_is_not_found(api):
    resp = api.post(f"{BASE}/mutation/999999/verify/")
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


@pytest.mark.django_db
def test_next_code_endpoint(api):
    resp = api.get(f"{BASE}/out/next-code/")
    assert resp.status_code == 200
    assert resp.json() == {"next_code": "OUT-000001"}


@pytest.mark.django_db
def test_store_balances_for_unknown_store(api):
    resp = api.get(f"{BASE}/balances/stores/999999/")
    assert resp.status_code == 404
    assert resp.json()["code"] == "store_not_found"


@pytest.mark.django_db
def test_notifications_endpoint_returns_snapshot(api):
    store = StoreFactory(name="Store A")
    StockBalanceFactory(store=store, product=ProductFactory(name="Teh", threshold=5), quantity=0)
    StockBalanceFactory(store=None, product=ProductFactory(name="Kopi", threshold=5), quantity=4)

    resp = api.get(f"{BASE}/notifications/")

    assert resp.status_code == 200
    assert resp.json() == {
        "length": 2,
        "lowStock": [{"productName": "Kopi", "quantity": 4, "location": "Gudang"}],
        "outOfStock": [{"productName": "Teh", "location": "Store A"}],
    }


# EOF
