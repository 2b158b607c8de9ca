"""Tests for app-level routes and the nutrient listing."""

from core import db, settings
from nutrients import repository


class TestAppRoutes:
    """Liveness and database check routes."""

    def test_root_is_plain_text(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_db_test_success(self, client, monkeypatch):
        async def fake_fetch_value(sql, *args):
            assert "1 + 1" in sql
            return 2

        monkeypatch.setattr(db, "fetch_value", fake_fetch_value)
        response = client.get("/db-test")
        assert response.status_code == 200
        assert response.json() == {"success": True, "result": 2}

    def test_db_test_without_pool(self, client):
        response = client.get("/db-test")
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "not initialized" in body["error"]


class TestNutrientListing:
    """Tests for GET /nutrients."""

    def test_lists_rows(self, client, monkeypatch):
        calls = []
        rows = [
            {"name": "Energy", "unit": "kcal", "category": "Energy", "usda_nutrient_number": "1008",
             "is_visible": True, "sort_order": 1},
        ]

        async def fake_list(*, category=None, include_hidden=False):
            calls.append((category, include_hidden))
            return rows

        monkeypatch.setattr(repository, "list_nutrients", fake_list)

        response = client.get("/nutrients", params={"category": "Energy"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": rows, "count": 1}
        assert calls == [("Energy", False)]

    def test_unknown_category(self, client):
        response = client.get("/nutrients", params={"category": "Snacks"})
        assert response.status_code == 400
        assert "Unknown category" in response.json()["error"]


class TestSettings:
    """Tests for environment helpers."""

    def test_int_and_bool_fallbacks(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-number")
        assert settings.server_port() == 8000
        monkeypatch.setenv("DB_SSL", "off")
        assert settings.env_bool("DB_SSL", True) is False
        monkeypatch.setenv("DB_SSL", "maybe")
        assert settings.env_bool("DB_SSL", True) is True

    def test_cors_origins_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
        assert settings.cors_allow_origins() == ["http://a.test", "http://b.test"]

    def test_connect_kwargs_from_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("DB_HOST", "db.internal")
        monkeypatch.setenv("DB_PORT", "6543")
        monkeypatch.setenv("DB_USER", "svc")
        monkeypatch.setenv("DB_PASSWORD", "secret")
        monkeypatch.setenv("DB_NAME", "catalog")
        monkeypatch.setenv("DB_SSL", "false")
        assert db.connect_kwargs() == {
            "ssl": False,
            "host": "db.internal",
            "port": 6543,
            "user": "svc",
            "password": "secret",
            "database": "catalog",
        }

    def test_connect_kwargs_prefers_database_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@h:5432/d?sslmode=require&application_name=x")
        monkeypatch.setenv("DB_SSL", "true")
        assert db.connect_kwargs() == {
            "ssl": "require",
            "dsn": "postgres://u:p@h:5432/d?application_name=x",
        }
