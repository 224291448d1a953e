"""Tests for /api/dashboard and /api/server/status."""

from fastapi.testclient import TestClient

from nest_admin.config import app_cfg


class TestDashboardStats:

    def test_requires_session(self, client):
        assert client.get("/api/dashboard/stats").status_code == 401

    def test_counts_from_both_databases(self, admin_client, seed_data):
        response = admin_client.get("/api/dashboard/stats")

        assert response.status_code == 200
        assert response.json() == {
            "totalAccounts": len(seed_data["accounts"]),
            "totalCharacters": len(seed_data["characters"]),
            "onlinePlayers": sum(c["LoginStatus"] for c in seed_data["characters"]),
        }

    def test_any_failed_count_fails_the_whole_summary(self, configure_app, login, tmp_path):
        configure_app.setattr(app_cfg, "WORLD_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/missing/world.db")
        from nest_admin.main import api

        with TestClient(api) as test_client:
            login(test_client)
            response = test_client.get("/api/dashboard/stats")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to fetch dashboard stats"
        assert body["details"]

    def test_class_distribution_sums_to_total(self, admin_client, seed_data):
        data = admin_client.get("/api/dashboard/class-distribution").json()["data"]

        assert sum(row["count"] for row in data) == len(seed_data["characters"])
        assert [row["classId"] for row in data] == sorted(row["classId"] for row in data)
        warrior = next(row for row in data if row["classId"] == 1)
        assert warrior["className"] == "Warrior"


class TestServerStatus:

    def test_running(self, admin_client, seed_data):
        body = admin_client.get("/api/server/status").json()

        assert body["status"] == "running"
        assert body["onlinePlayers"] == sum(c["LoginStatus"] for c in seed_data["characters"])
        assert body["uptime"] >= 0

    def test_degrades_instead_of_failing(self, configure_app, login, tmp_path):
        configure_app.setattr(app_cfg, "WORLD_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/missing/world.db")
        from nest_admin.main import api

        with TestClient(api) as test_client:
            login(test_client)
            response = test_client.get("/api/server/status")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "database_unreachable"
        assert body["onlinePlayers"] == 0
        assert body["uptime"] >= 0
