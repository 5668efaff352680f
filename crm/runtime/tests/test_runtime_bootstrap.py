from fastapi.testclient import TestClient

from crm.bootstrap import configure_services
from crm.server import create_app


class _Unused:
    def generate(self, contents):
        raise AssertionError("generator not expected")

    def generate_image(self, prompt):
        raise AssertionError("image generator not expected")

    def search(self, query):
        raise AssertionError("search not expected")


def _setup():
    stub = _Unused()
    services = configure_services(generator=stub, image_generator=stub, video_search=stub)
    return TestClient(create_app()), services


def test_bootstrap_lists_active_meta_with_etag():
    client, services = _setup()
    client.post("/design/models", json={"name": "Deal", "collection": "deal_records", "fields": []})
    meta = services.runtime.repo
    meta.add("forms", {"id": "deal_form", "tenantId": "tenant-A", "active": True})
    meta.add("forms", {"id": "old_form", "tenantId": "tenant-A", "active": False})
    meta.add("forms", {"id": "other_form", "tenantId": "tenant-B", "active": True})
    meta.add("components", {"id": "deal_card", "tenantId": "tenant-A", "active": True})

    resp = client.get("/runtime/bootstrap")
    assert resp.status_code == 200
    body = resp.json()
    assert resp.headers["etag"] == body["versionHash"]
    assert [m["name"] for m in body["models"]] == ["Deal"]
    assert [f["id"] for f in body["forms"]] == ["deal_form"]
    assert body["actions"] == []
    assert [c["id"] for c in body["components"]] == ["deal_card"]


def test_version_hash_is_stable_until_metadata_changes():
    client, _ = _setup()
    first = client.get("/runtime/bootstrap").json()["versionHash"]
    assert client.get("/runtime/bootstrap").json()["versionHash"] == first

    client.post("/design/models", json={"name": "Deal", "collection": "deal_records", "fields": []})
    assert client.get("/runtime/bootstrap").json()["versionHash"] != first
