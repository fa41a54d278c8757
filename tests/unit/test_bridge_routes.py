from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from bridge import app as bridge_app
from bridge.dependencies import get_sync_service
from bridge.errors import BridgeError, NotFoundError, UpstreamQueryError
from bridge.routes import media, webhook
from bridge.sync import ItemSyncResult, PageSyncResult


class DummySyncService:
    def __init__(self, item_result=None, page_result=None, error=None):
        self.item_result = item_result or ItemSyncResult(page_id="p1", added=0)
        self.page_result = page_result or PageSyncResult(status="nothing_new")
        self.error = error
        self.calls = []

    async def sync_item_to_page(self, item_id, page_id=None):
        self.calls.append(("item", item_id, page_id))
        if self.error:
            raise self.error
        return self.item_result

    async def sync_page_to_item(self, page_id):
        self.calls.append(("page", page_id))
        if self.error:
            raise self.error
        return self.page_result


def build_app(service: DummySyncService) -> TestClient:
    app = FastAPI()
    app.include_router(media.router)
    app.include_router(webhook.router)
    app.add_exception_handler(BridgeError, bridge_app.bridge_error_handler)
    app.dependency_overrides[get_sync_service] = lambda: service
    return TestClient(app)


def test_add_media_attaches_to_given_page():
    service = DummySyncService(item_result=ItemSyncResult(page_id="p1", added=2))
    client = build_app(service)

    resp = client.post("/api/add-media", json={"itemId": 123, "pageId": "p1"})

    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "added": 2}
    assert service.calls == [("item", 123, "p1")]


def test_add_media_returns_url_of_created_page():
    service = DummySyncService(
        item_result=ItemSyncResult(page_id="new", added=1, url="https://www.notion.so/new")
    )
    resp = build_app(service).post("/api/add-media", json={"itemId": 5})

    assert resp.json() == {"ok": True, "added": 1, "url": "https://www.notion.so/new"}
    assert service.calls == [("item", 5, None)]


def test_add_media_rejects_other_methods():
    resp = build_app(DummySyncService()).get("/api/add-media")
    assert resp.status_code == 405


def test_add_media_requires_item_id():
    client = build_app(DummySyncService())

    for body in ({}, {"itemId": "abc"}, {"itemId": 0}):
        resp = client.post("/api/add-media", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "itemId missing or invalid"}


def test_add_media_rejects_non_json_body():
    resp = build_app(DummySyncService()).post(
        "/api/add-media", content=b"not json", headers={"content-type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["ok"] is False


def test_add_media_missing_item_is_a_pipeline_failure():
    service = DummySyncService(error=NotFoundError("item 9 not found"))
    resp = build_app(service).post("/api/add-media", json={"itemId": 9})

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "item 9 not found"}


def test_add_media_upstream_failure_is_500():
    service = DummySyncService(error=UpstreamQueryError("Column not found"))
    resp = build_app(service).post("/api/add-media", json={"itemId": 9})

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "Column not found"}


def test_add_media_unexpected_failure_is_500():
    service = DummySyncService(error=RuntimeError("boom"))
    resp = build_app(service).post("/api/add-media", json={"itemId": 9})

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "boom"}


def test_webhook_head_probe():
    resp = build_app(DummySyncService()).head("/api/notion-webhook")
    assert resp.status_code == 200


def test_webhook_echoes_challenge():
    service = DummySyncService()
    resp = build_app(service).post("/api/notion-webhook", json={"challenge": "abc123"})

    assert resp.status_code == 200
    assert resp.json() == {"challenge": "abc123"}
    assert service.calls == []


def test_webhook_echoes_verification_token():
    resp = build_app(DummySyncService()).post(
        "/api/notion-webhook", json={"type": "url_verification", "verification_token": "tok"}
    )
    assert resp.json() == {"challenge": "tok"}


def test_webhook_ignores_other_events():
    service = DummySyncService()
    resp = build_app(service).post(
        "/api/notion-webhook", json={"type": "page.created", "entity": {"id": "p1"}}
    )

    assert resp.status_code == 200
    assert resp.text == "ignored"
    assert service.calls == []


def test_webhook_requires_entity_id():
    resp = build_app(DummySyncService()).post(
        "/api/notion-webhook", json={"type": "page.content_updated", "entity": {}}
    )
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "entity.id missing"}


def test_webhook_reports_unmatched_page():
    service = DummySyncService(page_result=PageSyncResult(status="no_match"))
    resp = build_app(service).post(
        "/api/notion-webhook", json={"type": "page.content_updated", "entity": {"id": "p1"}}
    )

    assert resp.text == "no monday row"
    assert service.calls == [("page", "p1")]


def test_webhook_reports_nothing_new():
    resp = build_app(DummySyncService()).post(
        "/api/notion-webhook", json={"type": "page.content_updated", "entity": {"id": "p1"}}
    )
    assert resp.status_code == 200
    assert resp.text == "nothing new"


def test_webhook_reports_added_count():
    service = DummySyncService(page_result=PageSyncResult(status="added", added=3, item_id="77"))
    resp = build_app(service).post(
        "/api/notion-webhook", json={"type": "page.content_updated", "entity": {"id": "p1"}}
    )
    assert resp.json() == {"ok": True, "added": 3}


def test_webhook_failure_is_500():
    service = DummySyncService(error=RuntimeError("monday down"))
    resp = build_app(service).post(
        "/api/notion-webhook", json={"type": "page.content_updated", "entity": {"id": "p1"}}
    )
    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "monday down"}


def test_healthz():
    client = TestClient(bridge_app.app)
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_webhook_verification_without_token_is_rejected():
    service = DummySyncService()
    resp = build_app(service).post("/api/notion-webhook", json={"type": "verification"})

    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "challenge missing"}
    assert service.calls == []


def test_webhook_missing_page_is_500():
    service = DummySyncService(error=NotFoundError("Could not find page"))
    resp = build_app(service).post(
        "/api/notion-webhook", json={"type": "page.content_updated", "entity": {"id": "p1"}}
    )
    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "Could not find page"}
