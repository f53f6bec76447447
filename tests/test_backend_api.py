"""Tests for the FastAPI submission boundary."""

import json

import pytest
from fastapi.testclient import TestClient

import backend.main as backend_main
from backend.main import app
from backend.routes.timelines import get_store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _payload(rules):
    return {"rules": json.dumps(rules)}


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_load_empty_store_returns_one_blank_rule(client):
    resp = client.get("/timelines")

    assert resp.status_code == 200
    (rule,) = resp.json()["initialRules"]
    assert rule["values"] == {
        "collections": [],
        "shippingFrom": "",
        "shippingTo": "",
        "deliveryFrom": "",
        "deliveryTo": "",
    }
    assert rule["errors"] == {}


def test_submit_creates_then_updates(client, store, sample_rule_dicts):
    first = client.post("/timelines", json=_payload(sample_rule_dicts)).json()
    second = client.post("/timelines", json=_payload(sample_rule_dicts[:1])).json()

    assert first["ok"] is True and first["action"] == "created"
    assert second["action"] == "updated" and second["id"] == first["id"]
    assert store.definitions == ["delivery_timeline_rule"]
    assert store.operation_count("metaobjectDefinitionCreate") == 1


def test_submit_without_data(client, store):
    resp = client.post("/timelines", json={})
    assert resp.json() == {"ok": False, "action": None, "id": None, "error": "No data"}
    assert store.calls == []


def test_submit_malformed_json_is_400(client, store):
    resp = client.post("/timelines", json={"rules": "[{not json"})
    assert resp.status_code == 400
    assert resp.json()["ok"] is False
    assert store.calls == []


def test_submit_rule_breaking_invariant_is_400(client):
    bad = [{"collections": [], "shippingFrom": 5, "shippingTo": 3, "deliveryFrom": 0, "deliveryTo": 0}]
    resp = client.post("/timelines", json=_payload(bad))
    assert resp.status_code == 400


def test_load_shows_inverted_stored_range(client, store):
    store.add_record('[{"collections": [], "shippingFrom": 5, "shippingTo": 3, "deliveryFrom": 0, "deliveryTo": 0}]')

    resp = client.get("/timelines")

    assert resp.status_code == 200
    (rule,) = resp.json()["initialRules"]
    assert (rule["values"]["shippingFrom"], rule["values"]["shippingTo"]) == ("5", "3")


def test_schema_provision_error_is_500(client, store, sample_rule_dicts):
    store.user_errors["metaobjectDefinitionCreate"] = [{"field": ["definition"], "message": "Type is reserved"}]

    resp = client.post("/timelines", json=_payload(sample_rule_dicts))

    assert resp.status_code == 500
    assert resp.json()["ok"] is False
    assert "Type is reserved" in resp.json()["error"]
    assert store.records == []


def test_mutation_error_is_500(client, store, sample_rule_dicts):
    store.definitions = ["delivery_timeline_rule"]
    store.user_errors["metaobjectCreate"] = [{"field": ["fields"], "message": "Value is required"}]

    resp = client.post("/timelines", json=_payload(sample_rule_dicts))

    assert resp.status_code == 500
    assert "Value is required" in resp.json()["error"]


def test_store_failure_is_500(client, store, sample_rule_dicts):
    store.definitions = ["delivery_timeline_rule"]
    store.fail_on = "metaobjects"

    resp = client.post("/timelines", json=_payload(sample_rule_dicts))

    assert resp.status_code == 500
    assert "connection reset" in resp.json()["error"]


def test_null_create_payload_is_500(client, store, sample_rule_dicts):
    store.definitions = ["delivery_timeline_rule"]
    store.responses["metaobjectCreate"] = {"metaobjectCreate": None}

    resp = client.post("/timelines", json=_payload(sample_rule_dicts))

    assert resp.status_code == 500
    assert resp.json()["ok"] is False


def test_null_delete_payload_is_500(client, store):
    store.add_record("[]")
    store.responses["metaobjectDelete"] = {"metaobjectDelete": None}

    resp = client.delete("/timelines")

    assert resp.status_code == 500
    assert resp.json()["ok"] is False
    assert len(store.records) == 1


def test_load_with_null_collection_nodes(client, store):
    store.add_record('[{"collections": ["gid://shopify/Collection/9"], "shippingFrom": 1, "shippingTo": 2, "deliveryFrom": 3, "deliveryTo": 4}]')
    store.responses["nodes"] = {"nodes": None}

    resp = client.get("/timelines")

    assert resp.status_code == 200
    (rule,) = resp.json()["initialRules"]
    assert rule["values"]["collections"] == [{"id": "gid://shopify/Collection/9", "title": "Collection 9"}]


def test_load_store_failure_is_500(client, store):
    store.fail_on = "metaobjects"
    assert client.get("/timelines").status_code == 500


def test_delete(client, store, sample_rule_dicts):
    assert client.delete("/timelines").json() == {"ok": True, "action": "nothing_to_delete"}

    created = client.post("/timelines", json=_payload(sample_rule_dicts)).json()
    resp = client.delete("/timelines").json()

    assert resp == {"ok": True, "action": "deleted", "deletedId": created["id"]}


def test_collections_listing(client, store):
    store.collections = {"gid://x/2": "Red Hats", "gid://x/1": "Blue Shirts"}
    resp = client.get("/collections", params={"first": 10})
    assert resp.json() == [{"id": "gid://x/1", "title": "Blue Shirts"}, {"id": "gid://x/2", "title": "Red Hats"}]


def test_missing_credentials_is_503(monkeypatch):
    monkeypatch.delenv("SHOP_DOMAIN", raising=False)
    monkeypatch.delenv("SHOP_ADMIN_TOKEN", raising=False)
    resp = TestClient(app).get("/timelines")
    assert resp.status_code == 503


def test_health_reports_store(monkeypatch, store):
    monkeypatch.setattr(backend_main, "get_store_client", lambda: store)
    body = TestClient(app).get("/health").json()
    assert body["status"] == "ok"
    assert body["store_connected"] is True
    assert body["shop_name"] == "Test Shop"


def test_health_degraded_without_store(monkeypatch):
    def unavailable():
        raise RuntimeError("no credentials")

    monkeypatch.setattr(backend_main, "get_store_client", unavailable)
    body = TestClient(app).get("/health").json()
    assert body["status"] == "degraded"
    assert body["store_connected"] is False
