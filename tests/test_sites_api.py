"""
HTTP API for sites, run against the in-memory store through dependency overrides.
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routes.sites import get_today
from app.stores import get_store
from conftest import make_site

PAYLOAD = {
    "site_url": "https://a.com",
    "status": "active",
    "purchase_date": "2024-01-01",
    "order_code": "ORD1",
    "activation_date": "2024-01-10",
    "migration_date": None,
    "renewed": False,
}


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_today] = lambda: date(2025, 1, 5)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_healthz(client):
    assert client.get("/healthz").json()["ok"] is True


def test_create_and_list(client):
    r = client.post("/sites", json=PAYLOAD)
    assert r.status_code == 201
    site_id = r.json()["id"]

    sites = client.get("/sites").json()["sites"]
    assert len(sites) == 1
    assert sites[0]["id"] == site_id
    assert sites[0]["expiration_date"] == "2025-01-10"
    assert sites[0]["alert"] == "expiring_soon"


def test_create_ignores_supplied_expiration(client, store):
    client.post("/sites", json={**PAYLOAD, "expiration_date": "2030-01-01"})
    assert list(store.rows.values())[0].expiration_date == date(2025, 1, 10)


@pytest.mark.parametrize("field,value", [
    ("site_url", "not-a-url"),
    ("status", "bogus"),
    ("activation_date", "10/01/2024"),
    ("order_code", "   "),
])
def test_create_rejects_invalid_fields(client, store, field, value):
    r = client.post("/sites", json={**PAYLOAD, field: value})
    assert r.status_code == 422
    assert store.rows == {}


def test_list_filters(client, store):
    store.create_site(make_site(site_url="https://a.com"))
    store.create_site(make_site(site_url="https://b.com", status="inactive"))

    r = client.get("/sites", params={"search": "A.COM"})
    assert [s["site_url"] for s in r.json()["sites"]] == ["https://a.com"]

    r = client.get("/sites", params={"status": "inactive"})
    assert [s["site_url"] for s in r.json()["sites"]] == ["https://b.com"]

    assert client.get("/sites", params={"status": "archived"}).status_code == 400


def test_update_and_delete(client, store):
    site_id = store.create_site(make_site())

    r = client.put(f"/sites/{site_id}", json={**PAYLOAD, "activation_date": "2024-05-01"})
    assert r.json() == {"ok": True}
    assert store.rows[site_id].expiration_date == date(2025, 5, 1)

    assert client.delete(f"/sites/{site_id}").json() == {"ok": True}
    assert store.rows == {}


def test_missing_site_is_404(client):
    assert client.put("/sites/99", json=PAYLOAD).status_code == 404
    assert client.delete("/sites/99").status_code == 404


def test_store_failure_is_502(client, store):
    store.fail_list = True
    assert client.get("/sites").status_code == 502
    store.fail_writes = True
    assert client.post("/sites", json=PAYLOAD).status_code == 502


def test_import(client, store, csv_header):
    body = csv_header + "https://a.com,ativo,2024-01-01,ORD1,2024-01-10,,sim\n"
    r = client.post("/sites/import", files={"file": ("sites.csv", body.encode(), "text/csv")})
    assert r.status_code == 200
    assert r.json() == {"imported": 1}
    [record] = store.rows.values()
    assert record.status == "active"
    assert record.renewed is True


def test_import_validation_errors(client, store):
    body = b"siteUrl,purchaseDate,orderCode,activationDate\nhttps://a.com,2024-01-01,ORD1,2024-01-10\n"
    r = client.post("/sites/import", files={"file": ("sites.csv", body, "text/csv")})
    assert r.status_code == 422
    assert r.json()["detail"]["errors"] == ["Missing required columns: status"]
    assert store.rows == {}


def test_import_parse_error(client):
    r = client.post("/sites/import", files={"file": ("sites.csv", b'siteUrl\n"oops\n', "text/csv")})
    assert r.status_code == 400


def test_export(client, store):
    store.create_site(make_site(site_url="https://a.com"))
    store.create_site(make_site(site_url="https://b.com", status="inactive"))

    r = client.get("/sites/export", params={"status": "active"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="site-licenses-2025-01-05.csv"' in r.headers["content-disposition"]
    lines = r.text.splitlines()
    assert lines[0].startswith("siteUrl,status,")
    assert lines[1:] == ["https://a.com,active,2024-01-01,ORD-1,2024-01-10,2025-01-10,,false"]
