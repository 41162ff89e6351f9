"""Tests for the Flask HTTP API.

Covers:
- app factory and routing
- JSON error mapping (400 for request problems, 500 for p4 failures)
- CORS headers for the browser UI
- static file serving
"""

import pytest

from p4_bridge.api.context import BridgeContext
from p4_bridge.api.exceptions import ProtocolError
from p4_bridge.models.records import Credential
from p4_bridge.server.app import create_app

# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

AUTH = {"server": "ssl:p4:1666", "user": "alice", "ticket": "T"}


@pytest.fixture
def app(bridge_context):
    return create_app(context=bridge_context)


@pytest.fixture
def client(app):
    return app.test_client()


# ─────────────────────────────────────────────────────────────────────────────
# App factory
# ─────────────────────────────────────────────────────────────────────────────


class TestCreateApp:

    def test_context_stored_on_app(self, app, bridge_context):
        assert app.config["BRIDGE_CONTEXT"] is bridge_context

    def test_builds_context_from_settings(self, settings):
        app = create_app(settings=settings)

        ctx = app.config["BRIDGE_CONTEXT"]
        assert isinstance(ctx, BridgeContext)
        assert ctx.settings is settings


# ─────────────────────────────────────────────────────────────────────────────
# Credentials
# ─────────────────────────────────────────────────────────────────────────────


class TestCredentialRoutes:

    def test_creds_when_nothing_saved(self, client):
        response = client.get("/api/p4/creds")

        assert response.status_code == 200
        assert response.get_json() == {"saved": False}

    def test_save_creds_with_password(self, client, fake_runner, memory_store):
        fake_runner.responses["login"] = "ABC\n"

        response = client.post(
            "/api/p4/saveCreds",
            json={"server": "ssl:p4:1666", "user": "alice", "password": "pw"},
        )

        assert response.status_code == 200
        assert response.get_json() == {"ok": True}
        assert fake_runner.subcommands() == ["trust", "login"]
        assert memory_store.get().ticket == "ABC"

        status = client.get("/api/p4/creds").get_json()
        assert status["saved"] is True
        assert status["hasTicket"] is True
        assert status["savedAt"]
        assert "ABC" not in str(status)

    def test_save_creds_missing_fields(self, client):
        response = client.post("/api/p4/saveCreds", json={"server": "p4:1666"})

        assert response.status_code == 400
        assert response.get_json() == {"error": "server, user, and password OR ticket required"}

    def test_save_creds_login_failure_is_500(self, client, fake_runner, memory_store):
        fake_runner.responses["login"] = ProtocolError(
            "Password invalid.", stderr="Password invalid.\n", returncode=1
        )

        response = client.post(
            "/api/p4/saveCreds",
            json={"server": "p4:1666", "user": "alice", "password": "bad"},
        )

        assert response.status_code == 500
        assert response.get_json() == {"error": "Password invalid."}
        assert memory_store.get() is None

    def test_clear_creds(self, client, memory_store):
        memory_store.put(Credential(server="p4:1666", user="alice", ticket="T"))

        response = client.post("/api/p4/clearCreds")

        assert response.status_code == 200
        assert response.get_json() == {"ok": True}
        assert client.get("/api/p4/creds").get_json() == {"saved": False}


# ─────────────────────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────────────────────


class TestQueryRoutes:

    def test_workspaces(self, client, fake_runner):
        fake_runner.responses["clients"] = "... client alice-ws\n"

        response = client.post("/api/p4/workspaces", json=AUTH)

        assert response.status_code == 200
        assert response.get_json() == {"workspaces": [{"name": "alice-ws"}]}

    def test_workspaces_without_any_auth(self, client, fake_runner):
        response = client.post("/api/p4/workspaces", json={})

        assert response.status_code == 400
        assert response.get_json() == {"error": "Missing server or user."}
        assert fake_runner.calls == []

    def test_changes(self, client, fake_runner):
        fake_runner.responses["changes"] = (
            "... change 55\n... time 1700000000\n... user alice\n... status submitted\n"
        )
        fake_runner.responses["describe"] = "... change 55\n... desc Fix bug\n... desc line two\n"

        response = client.post("/api/p4/changes", json={**AUTH, "client": "alice-ws", "limit": 5})

        assert response.status_code == 200
        assert response.get_json() == {"changes": [{
            "change": 55,
            "date": "2023-11-14",
            "user": "alice",
            "status": "submitted",
            "desc": "Fix bug\nline two",
        }]}

    def test_changes_missing_client(self, client):
        response = client.post("/api/p4/changes", json=AUTH)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Missing client (workspace)."}

    def test_changes_invalid_limit(self, client):
        response = client.post("/api/p4/changes", json={**AUTH, "client": "ws", "limit": "many"})

        assert response.status_code == 400
        assert "limit" in response.get_json()["error"]

    def test_pending(self, client, fake_runner):
        fake_runner.responses["opened"] = "... depotFile //depot/a.c\n... action edit\n... user alice\n"

        response = client.post("/api/p4/pending", json=AUTH)

        assert response.status_code == 200
        assert response.get_json() == {
            "files": [{"depotFile": "//depot/a.c", "action": "edit", "user": "alice"}]
        }

    def test_users(self, client, fake_runner):
        fake_runner.responses["users"] = "... User alice\n... Email alice@example.com\n"

        response = client.post("/api/p4/users", json=AUTH)

        assert response.status_code == 200
        assert response.get_json() == {"users": [{"User": "alice", "Email": "alice@example.com"}]}

    def test_saved_credential_used_for_queries(self, client, fake_runner, memory_store):
        memory_store.put(Credential(server="p4:1666", user="alice", ticket="SAVED"))

        response = client.post("/api/p4/users")

        assert response.status_code == 200
        assert fake_runner.calls[0][1].ticket == "SAVED"

    def test_p4_failure_is_500_with_stderr(self, client, fake_runner):
        fake_runner.responses["users"] = ProtocolError("Perforce password (P4PASSWD) invalid or unset.")

        response = client.post("/api/p4/users", json=AUTH)

        assert response.status_code == 500
        assert response.get_json() == {"error": "Perforce password (P4PASSWD) invalid or unset."}

    def test_unexpected_error_is_500(self, client, fake_runner):
        fake_runner.responses["users"] = RuntimeError("boom")

        response = client.post("/api/p4/users", json=AUTH)

        assert response.status_code == 500
        assert response.get_json() == {"error": "boom"}

    def test_non_json_body_treated_as_empty(self, client):
        response = client.post("/api/p4/users", data="not json", content_type="text/plain")

        assert response.status_code == 400

    def test_unknown_route_is_404(self, client):
        assert client.get("/api/p4/nope").status_code == 404


# ─────────────────────────────────────────────────────────────────────────────
# CORS and static files
# ─────────────────────────────────────────────────────────────────────────────


class TestCors:

    def test_any_origin_allowed_by_default(self, client):
        response = client.get("/api/p4/creds", headers={"Origin": "http://localhost:3000"})

        assert response.headers.get("Access-Control-Allow-Origin") == "*"

    def test_preflight(self, client):
        response = client.options(
            "/api/p4/users",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers.get("Access-Control-Allow-Origin") == "*"

    def test_wildcard_sent_for_every_origin(self, client):
        for origin in ("http://localhost:3000", "https://dashboard.example.com"):
            response = client.post("/api/p4/clearCreds", headers={"Origin": origin})

            assert response.headers.get("Access-Control-Allow-Origin") == "*"


class TestStatic:

    def test_packaged_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert b"/api/p4/creds" in response.data

    def test_custom_static_dir(self, tmp_path, fake_runner, memory_store, settings):
        static_dir = tmp_path / "ui"
        static_dir.mkdir()
        (static_dir / "index.html").write_text("<h1>custom</h1>", encoding="utf-8")
        (static_dir / "app.js").write_text("console.log(1)", encoding="utf-8")
        ctx = BridgeContext(
            settings=settings.model_copy(update={"static_dir": static_dir}),
            runner=fake_runner,
            credential_store=memory_store,
        )
        client = create_app(context=ctx).test_client()

        assert client.get("/").data == b"<h1>custom</h1>"
        assert client.get("/app.js").data == b"console.log(1)"
