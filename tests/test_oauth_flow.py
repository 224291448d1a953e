"""End-to-end login flow with the identity provider calls mocked out."""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient

from nest_admin.apis.oauth.providers import OAuthProfile, Provider
from nest_admin.apis.oauth.router import OAUTH_STATE_COOKIE
from nest_admin.config import app_cfg

FAILURE_URL = "http://localhost:3000/?error=auth_failed"


def mock_provider(test_client, provider: Provider, email: str):
    oauth_provider = test_client.app.state.oauth_service.providers[provider]
    oauth_provider.exchange_code = AsyncMock(return_value={"access_token": "token"})
    oauth_provider.fetch_profile = AsyncMock(return_value=OAuthProfile(
        provider=provider,
        provider_user_id="80351110224678912",
        email=email,
        display_name="Raid Leader",
        avatar=None,
    ))
    return oauth_provider


def start_login(test_client, provider: str) -> str:
    response = test_client.get(f"/auth/{provider}", follow_redirects=False)
    assert response.status_code == 302
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


@pytest.fixture
def restricted_client(configure_app):
    configure_app.setattr(app_cfg, "ALLOWED_ADMINS", "Admin@X.com")
    from nest_admin.main import api

    with TestClient(api) as test_client:
        yield test_client


class TestStartLogin:

    def test_google_redirect(self, client):
        response = client.get("/auth/google", follow_redirects=False)

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        query = parse_qs(location.query)
        assert location.netloc == "accounts.google.com"
        assert query["client_id"] == ["google-client"]
        assert query["scope"] == ["openid email profile"]
        assert query["state"]
        assert OAUTH_STATE_COOKIE in response.cookies

    def test_discord_redirect(self, client):
        response = client.get("/auth/discord", follow_redirects=False)

        location = urlparse(response.headers["location"])
        assert location.netloc == "discord.com"
        assert parse_qs(location.query)["scope"] == ["identify email"]

    def test_unconfigured_provider_is_404(self, configure_app):
        configure_app.setattr(app_cfg, "DISCORD_CLIENT_ID", "")
        from nest_admin.main import api

        with TestClient(api) as test_client:
            response = test_client.get("/auth/discord", follow_redirects=False)
            callback = test_client.get("/auth/discord/callback?code=x&state=y", follow_redirects=False)

        assert response.status_code == 404
        assert response.json() == {"error": "discord login is not configured"}
        assert callback.status_code == 404

    def test_unknown_provider_is_404(self, client):
        assert client.get("/auth/github", follow_redirects=False).status_code == 404


class TestCallback:

    def test_successful_login_issues_session(self, restricted_client):
        mock_provider(restricted_client, Provider.DISCORD, "admin@x.com")
        state = start_login(restricted_client, "discord")

        response = restricted_client.get(
            "/auth/discord/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"] == "http://localhost:3000/"
        user = restricted_client.get("/auth/me").json()["user"]
        assert user == {
            "id": "80351110224678912",
            "provider": "discord",
            "email": "admin@x.com",
            "displayName": "Raid Leader",
            "avatar": None,
        }
        assert restricted_client.get("/api/accounts").status_code == 200

    def test_disallowed_email_gets_no_session(self, restricted_client):
        mock_provider(restricted_client, Provider.GOOGLE, "other@x.com")
        state = start_login(restricted_client, "google")

        response = restricted_client.get(
            "/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"] == FAILURE_URL
        assert len(restricted_client.app.state.session_store) == 0
        assert restricted_client.get("/auth/me").json() == {"user": None}
        assert restricted_client.get("/api/characters").status_code == 401

    def test_state_mismatch_is_rejected_before_code_exchange(self, restricted_client):
        oauth_provider = mock_provider(restricted_client, Provider.GOOGLE, "admin@x.com")
        start_login(restricted_client, "google")

        response = restricted_client.get(
            "/auth/google/callback",
            params={"code": "auth-code", "state": "forged"},
            follow_redirects=False
        )

        assert response.headers["location"] == FAILURE_URL
        oauth_provider.exchange_code.assert_not_called()
        assert len(restricted_client.app.state.session_store) == 0

    def test_state_from_other_provider_is_rejected(self, restricted_client):
        mock_provider(restricted_client, Provider.DISCORD, "admin@x.com")
        state = start_login(restricted_client, "google")

        response = restricted_client.get(
            "/auth/discord/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False
        )

        assert response.headers["location"] == FAILURE_URL

    def test_provider_error_redirects(self, client):
        response = client.get(
            "/auth/google/callback",
            params={"error": "access_denied"},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"] == FAILURE_URL

    def test_missing_code_redirects(self, client):
        state = start_login(client, "google")

        response = client.get("/auth/google/callback", params={"state": state}, follow_redirects=False)

        assert response.headers["location"] == FAILURE_URL

    def test_token_exchange_failure_redirects(self, client):
        oauth_provider = client.app.state.oauth_service.providers[Provider.GOOGLE]
        request = httpx.Request("POST", "https://oauth2.googleapis.com/token")
        oauth_provider.exchange_code = AsyncMock(side_effect=httpx.HTTPStatusError(
            "bad code", request=request, response=httpx.Response(400, request=request)
        ))
        state = start_login(client, "google")

        response = client.get(
            "/auth/google/callback",
            params={"code": "expired", "state": state},
            follow_redirects=False
        )

        assert response.headers["location"] == FAILURE_URL
        assert len(client.app.state.session_store) == 0

    def test_relogin_replaces_previous_session(self, client, login):
        login(client)
        mock_provider(client, Provider.GOOGLE, "admin@example.com")
        state = start_login(client, "google")

        client.get(
            "/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False
        )

        assert len(client.app.state.session_store) == 1

    def test_non_json_token_reply_redirects(self, client, monkeypatch):
        def maintenance(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            "nest_admin.apis.oauth.service.httpx.AsyncClient",
            lambda **kwargs: real_client(transport=httpx.MockTransport(maintenance))
        )
        state = start_login(client, "google")

        response = client.get(
            "/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"] == FAILURE_URL
        assert len(client.app.state.session_store) == 0
