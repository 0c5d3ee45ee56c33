import pytest
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_inventory_health_is_public():
    client = APIClient()
    resp = client.get("/api/v1/inventory/health/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "app": "inventory"}


@pytest.mark.django_db
def test_root_health_reports_database():
    client = APIClient()
    resp = client.get("/health/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "ok"}


# EOF
