import logging
import secrets

import httpx
from fastapi import Request
from itsdangerous import BadSignature, URLSafeTimedSerializer

from nest_admin.apis.auth import is_allowed_admin
from nest_admin.apis.models import AdminPrincipal
from nest_admin.apis.oauth.providers import OAuthProvider, Provider
from nest_admin.exceptions import OAuthError, ProviderNotConfigured, Unauthorized

logger = logging.getLogger(__name__)

OAUTH_STATE_MAX_AGE_SECONDS = 600


class OAuthService:
    """
    Runs the authorization-code dance for every configured provider.

    The allow-list check happens once, after the provider has vouched for
    the identity and before a principal is handed back, so a rejected
    identity never reaches the session store.
    """

    def __init__(
        self,
        providers: dict[Provider, OAuthProvider],
        allowed_admins: frozenset[str],
        state_secret: str,
        verify_ssl: bool = True,
        timeout: float | None = None,
    ):
        self.providers = providers
        self.allowed_admins = allowed_admins
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._state_serializer = URLSafeTimedSerializer(state_secret, salt="nest-admin-oauth-state")
        logger.info(
            f"OAuthService initialized with providers: "
            f"{', '.join(p.value for p in providers) or 'none'}"
        )

    def get_provider(self, name: str) -> OAuthProvider:
        """
        Look up a configured provider by its route name.

        Raises:
            ProviderNotConfigured: for unknown names and providers without credentials
        """
        try:
            provider = self.providers.get(Provider(name))
        except ValueError:
            provider = None
        if provider is None:
            raise ProviderNotConfigured(name)
        return provider

    def issue_state(self, provider: OAuthProvider) -> tuple[str, str]:
        """
        Create an anti-CSRF state value for one login attempt.

        Returns:
            Tuple of (state, cookie_value); the cookie value is the signed pair
            of provider and state and must come back with the callback.
        """
        state = secrets.token_urlsafe(32)
        cookie_value = self._state_serializer.dumps({"provider": provider.name.value, "state": state})
        return state, cookie_value

    def verify_state(self, provider: OAuthProvider, state: str | None, cookie_value: str | None) -> None:
        """Raise OAuthError unless ``state`` matches the signed state cookie for ``provider``."""
        if not state or not cookie_value:
            raise OAuthError("Missing OAuth state")
        try:
            payload = self._state_serializer.loads(cookie_value, max_age=OAUTH_STATE_MAX_AGE_SECONDS)
        except BadSignature:
            raise OAuthError("Invalid or expired OAuth state")
        if payload.get("provider") != provider.name.value or not secrets.compare_digest(
            str(payload.get("state", "")), state
        ):
            raise OAuthError("OAuth state mismatch")

    async def authenticate(self, provider: OAuthProvider, code: str) -> AdminPrincipal:
        """
        Exchange ``code`` with ``provider`` and gate the resulting identity.

        Args:
            provider: Configured provider that issued the code
            code: Authorization code from the callback

        Returns:
            The admin principal to put in a new session

        Raises:
            OAuthError: token exchange or profile lookup failed
            Unauthorized: the identity is real but not on the allow-list
        """
        try:
            async with httpx.AsyncClient(verify=self.verify_ssl, timeout=self.timeout) as client:
                tokens = await provider.exchange_code(client=client, code=code)
                profile = await provider.fetch_profile(client=client, tokens=tokens)
        except httpx.HTTPStatusError as e:
            raise OAuthError(
                f"{provider.name.value} rejected the request",
                details=f"{e.response.status_code} from {e.request.url}"
            )
        except httpx.HTTPError as e:
            raise OAuthError(f"Could not reach {provider.name.value}", details=str(e))
        except ValueError as e:
            # Non-JSON body, e.g. an HTML maintenance page
            raise OAuthError(f"{provider.name.value} sent an unreadable reply", details=str(e))

        if not is_allowed_admin(profile.email, self.allowed_admins):
            raise Unauthorized(profile.email)

        return AdminPrincipal(
            id=profile.provider_user_id,
            provider=profile.provider.value,
            email=profile.email,
            displayName=profile.display_name,
            avatar=profile.avatar,
        )


def get_oauth_service(request: Request) -> OAuthService:
    return request.app.state.oauth_service
