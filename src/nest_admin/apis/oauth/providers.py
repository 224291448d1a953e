"""
OAuth identity providers.

Each provider knows how to build its authorization URL, exchange an
authorization code for tokens and turn the userinfo reply into an
``OAuthProfile``. Allow-list decisions are not made here.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from nest_admin.config import ApiConfig
from nest_admin.exceptions import OAuthError

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_PROFILE_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

DISCORD_AUTH_URL = "https://discord.com/oauth2/authorize"
DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_PROFILE_URL = "https://discord.com/api/users/@me"
DISCORD_AVATAR_URL = "https://cdn.discordapp.com/avatars/{user_id}/{avatar}.png"


class Provider(str, Enum):
    GOOGLE = "google"
    DISCORD = "discord"


@dataclass(frozen=True)
class OAuthProfile:
    provider: Provider
    provider_user_id: str
    email: str
    display_name: str
    avatar: str | None = None


class OAuthProvider(ABC):
    """Base class for an authorization-code OAuth provider."""

    name: Provider

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri

    @property
    def default_scopes(self) -> tuple[str, ...]:
        return ()

    def build_authorization_url(self, *, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "state": state,
            "scope": " ".join(self.default_scopes),
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    @property
    @abstractmethod
    def authorize_url(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def token_url(self) -> str:
        raise NotImplementedError

    async def exchange_code(self, *, client: "httpx.AsyncClient", code: str) -> dict:
        """Exchange an authorization code for tokens."""
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "code": code,
        }
        response = await client.post(
            self.token_url,
            data=data,
            headers={"Accept": "application/json"}
        )
        response.raise_for_status()
        return response.json()

    @abstractmethod
    async def fetch_profile(self, *, client: "httpx.AsyncClient", tokens: dict) -> OAuthProfile:
        raise NotImplementedError

    @staticmethod
    def _bearer(tokens: dict, provider: str) -> dict:
        access_token = tokens.get("access_token")
        if not access_token:
            raise OAuthError(f"Missing {provider} access token")
        return {"Authorization": f"Bearer {access_token}"}


class GoogleOAuthProvider(OAuthProvider):
    name = Provider.GOOGLE

    @property
    def default_scopes(self) -> tuple[str, ...]:
        return ("openid", "email", "profile")

    @property
    def authorize_url(self) -> str:
        return GOOGLE_AUTH_URL

    @property
    def token_url(self) -> str:
        return GOOGLE_TOKEN_URL

    async def fetch_profile(self, *, client: "httpx.AsyncClient", tokens: dict) -> OAuthProfile:
        response = await client.get(GOOGLE_PROFILE_URL, headers=self._bearer(tokens, "Google"))
        response.raise_for_status()
        data = response.json()
        if not data.get("sub"):
            raise OAuthError("Google profile has no subject id")
        return OAuthProfile(
            provider=self.name,
            provider_user_id=str(data["sub"]),
            email=data.get("email") or "",
            display_name=data.get("name") or data.get("given_name") or "",
            avatar=data.get("picture"),
        )


class DiscordOAuthProvider(OAuthProvider):
    name = Provider.DISCORD

    @property
    def default_scopes(self) -> tuple[str, ...]:
        return ("identify", "email")

    @property
    def authorize_url(self) -> str:
        return DISCORD_AUTH_URL

    @property
    def token_url(self) -> str:
        return DISCORD_TOKEN_URL

    async def fetch_profile(self, *, client: "httpx.AsyncClient", tokens: dict) -> OAuthProfile:
        response = await client.get(DISCORD_PROFILE_URL, headers=self._bearer(tokens, "Discord"))
        response.raise_for_status()
        data = response.json()
        if not data.get("id"):
            raise OAuthError("Discord profile has no user id")
        user_id = str(data["id"])
        avatar = data.get("avatar")
        return OAuthProfile(
            provider=self.name,
            provider_user_id=user_id,
            email=data.get("email") or "",
            display_name=data.get("username") or "",
            avatar=DISCORD_AVATAR_URL.format(user_id=user_id, avatar=avatar) if avatar else None,
        )


def build_providers(cfg: ApiConfig) -> dict[Provider, OAuthProvider]:
    """
    Build every provider that has credentials configured.

    A provider without a client id or secret is skipped (and its login
    routes answer 404) instead of failing startup.
    """
    providers: dict[Provider, OAuthProvider] = {}

    if cfg.GOOGLE_CLIENT_ID and cfg.GOOGLE_CLIENT_SECRET:
        providers[Provider.GOOGLE] = GoogleOAuthProvider(
            client_id=cfg.GOOGLE_CLIENT_ID,
            client_secret=cfg.GOOGLE_CLIENT_SECRET,
            redirect_uri=cfg.GOOGLE_CALLBACK_URL,
        )
        logger.info("Google OAuth provider configured")
    else:
        logger.warning("Google OAuth not configured - missing GOOGLE_CLIENT_ID or GOOGLE_CLIENT_SECRET")

    if cfg.DISCORD_CLIENT_ID and cfg.DISCORD_CLIENT_SECRET:
        providers[Provider.DISCORD] = DiscordOAuthProvider(
            client_id=cfg.DISCORD_CLIENT_ID,
            client_secret=cfg.DISCORD_CLIENT_SECRET,
            redirect_uri=cfg.DISCORD_CALLBACK_URL,
        )
        logger.info("Discord OAuth provider configured")
    else:
        logger.warning("Discord OAuth not configured - missing DISCORD_CLIENT_ID or DISCORD_CLIENT_SECRET")

    return providers
