"""
HTTP-level tests for the /api/v1 routers.

Requests go through the real application (middleware, exception handlers,
bearer-token resolution) with only the database session overridden.
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from main import app
from tenantcms.auth import create_access_token
from tenantcms.database import get_db


@pytest.fixture
async def client(session_factory, secret_key, strict_tenancy):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "X-Request-ID" in response.headers

    async def test_request_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


class TestAuthentication:
    async def test_missing_token_is_denied(self, client):
        response = await client.get("/api/v1/pages")
        assert response.status_code == 403
        body = response.json()["error"]
        assert body["error_code"] == "AUTH_PERMISSION_DENIED"
        assert body["path"] == "/api/v1/pages"

    async def test_invalid_token_rejected(self, client):
        response = await client.get("/api/v1/pages", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["error"]["error_code"] == "AUTH_FAILED"

    async def test_me(self, client, acme_editor, acme):
        response = await client.get("/api/v1/users/me", headers=auth(acme_editor))
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == acme_editor.email
        assert body["role"] == "editor"
        assert body["websites"] == [acme.id]
        assert body["default_website"] == acme.id

    async def test_me_requires_token(self, client):
        response = await client.get("/api/v1/users/me")
        assert response.status_code == 401


class TestWebsiteRoutes:
    async def test_super_admin_crud(self, client, super_admin):
        headers = auth(super_admin)
        response = await client.post(
            "/api/v1/websites",
            json={"name": "Acme", "domain": "acme.com", "slug": "acme", "settings": {"primary_color": "#123456"}},
            headers=headers,
        )
        assert response.status_code == 201
        website = response.json()
        assert website["settings"]["primary_color"] == "#123456"

        response = await client.get("/api/v1/websites", headers=headers)
        assert response.json()["total"] == 1

        response = await client.patch(f"/api/v1/websites/{website['id']}", json={"name": "Acme Inc"}, headers=headers)
        assert response.json()["name"] == "Acme Inc"

        response = await client.delete(f"/api/v1/websites/{website['id']}", headers=headers)
        assert response.status_code == 204
        response = await client.get(f"/api/v1/websites/{website['id']}", headers=headers)
        assert response.status_code == 404

    async def test_duplicate_slug_conflict(self, client, super_admin, acme):
        response = await client.post(
            "/api/v1/websites", json={"name": "Dup", "domain": "dup.com", "slug": "acme"}, headers=auth(super_admin)
        )
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["error_code"] == "VALIDATION_DUPLICATE_RESOURCE"
        assert error["details"]["field"] == "slug"

    async def test_website_admin_forbidden(self, client, acme_admin):
        response = await client.get("/api/v1/websites", headers=auth(acme_admin))
        assert response.status_code == 403

    async def test_invalid_slug_is_validation_error(self, client, super_admin):
        response = await client.post(
            "/api/v1/websites", json={"name": "Bad", "domain": "bad.com", "slug": "Bad Slug"}, headers=auth(super_admin)
        )
        assert response.status_code == 422
        assert response.json()["error"]["error_code"] == "VALIDATION_FAILED"


class TestUserRoutes:
    async def test_create_with_foreign_default_rejected(self, client, super_admin, acme, globex):
        response = await client.post(
            "/api/v1/users",
            json={
                "email": "new@example.com",
                "password": "long-enough-password",
                "websites": [acme.id],
                "default_website": globex.id,
            },
            headers=auth(super_admin),
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Default website must be one of the assigned websites"

    async def test_website_admin_lists_own_tenant(self, client, acme_admin, acme_editor, globex_admin):
        response = await client.get("/api/v1/users", headers=auth(acme_admin))
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert {u["email"] for u in body["items"]} == {acme_admin.email, acme_editor.email}


class TestPageRoutes:
    async def test_scenario(self, client, acme, globex, acme_editor, globex_admin, super_admin):
        response = await client.post(
            "/api/v1/pages",
            json={"title": "About", "website": globex.id, "layout": [{"block_type": "hero", "heading": "Hi"}]},
            headers=auth(acme_editor),
        )
        assert response.status_code == 201
        page = response.json()
        assert page["website_id"] == acme.id

        response = await client.get(f"/api/v1/pages/{page['id']}", headers=auth(globex_admin))
        assert response.status_code == 404

        response = await client.patch(f"/api/v1/pages/{page['id']}", json={"title": "x"}, headers=auth(globex_admin))
        assert response.status_code == 403

        response = await client.patch(
            f"/api/v1/pages/{page['id']}", json={"website": {"id": globex.id}}, headers=auth(super_admin)
        )
        assert response.json()["website_id"] == globex.id

        response = await client.get(f"/api/v1/pages/{page['id']}/versions", headers=auth(super_admin))
        assert [v["version"] for v in response.json()] == [1]

    async def test_list_filters(self, client, acme, super_admin):
        headers = auth(super_admin)
        for title, status in (("One", "published"), ("Two", "draft")):
            await client.post(
                "/api/v1/pages", json={"title": title, "website": acme.id, "status": status}, headers=headers
            )
        response = await client.get("/api/v1/pages", params={"status": "published"}, headers=headers)
        body = response.json()
        assert body["total"] == 1
        assert body["items"][0]["title"] == "One"
        assert body["skip"] == 0
        assert body["limit"] == 20

    async def test_invalid_block_rejected(self, client, acme_editor):
        response = await client.post(
            "/api/v1/pages",
            json={"title": "Bad", "layout": [{"block_type": "image-gallery", "images": [], "columns": 9}]},
            headers=auth(acme_editor),
        )
        assert response.status_code == 422


class TestMediaRoutes:
    async def test_create_and_list(self, client, acme, acme_editor, globex_admin):
        response = await client.post("/api/v1/media", json={"alt": "Logo", "url": "/m/logo.png"}, headers=auth(acme_editor))
        assert response.status_code == 201
        assert response.json()["website_id"] == acme.id

        response = await client.get("/api/v1/media", headers=auth(globex_admin))
        assert response.json()["items"] == []


class TestTenancyStatusRoute:
    async def test_super_admin_only(self, client, super_admin, acme_admin):
        response = await client.get("/api/v1/tenancy/status", headers=auth(acme_admin))
        assert response.status_code == 403

        response = await client.get("/api/v1/tenancy/status", headers=auth(super_admin))
        assert response.status_code == 200
        body = response.json()
        assert body["websites"] == 1
        assert body["expand_mode"] is False
        assert body["ready_to_contract"] is False


class TestAccessLog:
    async def test_access_log_names_acting_user(self, client, acme, acme_editor, caplog):
        with caplog.at_level(logging.INFO, logger="tenantcms.access_log"):
            response = await client.get("/api/v1/pages", headers={**auth(acme_editor), "X-Request-ID": "req-42"})
        assert response.status_code == 200

        records = [r for r in caplog.records if r.name == "tenantcms.access_log"]
        assert len(records) == 1
        record = records[0]
        assert record.request_id == "req-42"
        assert record.user_id == acme_editor.id
        assert record.role == "editor"
        assert record.website_ids == [acme.id]
        assert record.status_code == 200

    async def test_denied_request_logged_as_warning(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="tenantcms.access_log"):
            await client.get("/api/v1/pages")
        record = next(r for r in caplog.records if r.name == "tenantcms.access_log")
        assert record.levelno == logging.WARNING
        assert getattr(record, "user_id", "-") == "-"
