"""Application shell: health, request ids and the error envelope."""


class TestApplication:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "environment": "test"}

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client):
        assert len(client.get("/health").headers["X-Request-ID"]) == 32

    def test_not_found_envelope(self, client):
        response = client.get("/api/blogs/missing")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Blog post not found"}

    def test_validation_envelope(self, client):
        response = client.post("/api/contact", json={"name": "Kim"})

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Validation failed"
        assert {"email", "subject", "message"} <= set(body["errors"])

    def test_unexpected_errors_become_500(self, app, monkeypatch):
        from fastapi.testclient import TestClient

        from storefront.content.faq.management import FAQHandler

        def explode(self, actor):
            raise RuntimeError("boom")

        monkeypatch.setattr(FAQHandler, "list_faqs", explode)
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/faqs")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server Error"}


class TestApplicationLifespan:
    def test_nothing_connects_until_startup(self, settings, store, storage, emails, monkeypatch):
        from fastapi.testclient import TestClient

        from storefront.app import create_app
        from storefront.shared.db import Store

        opened = []

        def from_settings(cls, given):
            opened.append(given)
            return store

        monkeypatch.setattr(Store, "from_settings", classmethod(from_settings))
        application = create_app(settings=settings)
        assert opened == []

        with TestClient(application) as client:
            assert opened == [settings]
            assert client.get("/api/faqs").status_code == 200

    def test_module_exposes_no_prebuilt_app(self):
        import storefront.app

        assert not hasattr(storefront.app, "app")
