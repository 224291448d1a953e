import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from typing import Annotated

from nest_admin.apis.auth import current_session
from nest_admin.apis.dependencies import get_cookie_signer, get_session_store
from nest_admin.apis.oauth.models import LogoutResponse, MeResponse
from nest_admin.apis.oauth.service import (
    OAUTH_STATE_MAX_AGE_SECONDS,
    OAuthService,
    get_oauth_service,
)
from nest_admin.config import app_cfg
from nest_admin.exceptions import OAuthError, Unauthorized
from nest_admin.sessions import SessionCookieSigner, SessionStore

logger = logging.getLogger(__name__)

oauth_router = APIRouter(prefix="/auth", tags=["auth"])

OAUTH_STATE_COOKIE = "nest_admin_oauth_state"


def _failure_redirect() -> RedirectResponse:
    response = RedirectResponse(
        url=f"{app_cfg.CLIENT_URL.rstrip('/')}/?error=auth_failed",
        status_code=status.HTTP_302_FOUND
    )
    response.delete_cookie(OAUTH_STATE_COOKIE)
    return response


@oauth_router.get(
    "/me",
    response_model=MeResponse,
    summary="Get the logged in admin"
)
async def get_me(request: Request) -> MeResponse:
    """Return the session principal, or ``{"user": null}`` for anonymous callers."""
    record = current_session(request)
    return MeResponse(user=record.principal if record else None)


@oauth_router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Destroy the current session"
)
async def logout(
    request: Request,
    store: Annotated[SessionStore, Depends(get_session_store)],
    signer: Annotated[SessionCookieSigner, Depends(get_cookie_signer)],
):
    """Log out. Succeeds even when there is no session to destroy."""
    try:
        session_id = signer.unsign(request.cookies.get(app_cfg.SESSION_COOKIE_NAME))
        destroyed = store.destroy(session_id)
    except Exception as e:
        logger.error(f"Logout failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Logout failed"}
        )

    if destroyed:
        logger.info("Session destroyed on logout")

    response = JSONResponse(content=LogoutResponse().model_dump())
    response.delete_cookie(app_cfg.SESSION_COOKIE_NAME)
    return response


@oauth_router.get(
    "/{provider}",
    summary="Start an OAuth login",
    description="Redirect the browser to the identity provider (google or discord)"
)
async def start_login(
    provider: str,
    service: Annotated[OAuthService, Depends(get_oauth_service)],
) -> RedirectResponse:
    oauth_provider = service.get_provider(provider)
    state, cookie_value = service.issue_state(oauth_provider)

    response = RedirectResponse(
        url=oauth_provider.build_authorization_url(state=state),
        status_code=status.HTTP_302_FOUND
    )
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        cookie_value,
        max_age=OAUTH_STATE_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=app_cfg.is_production
    )
    logger.info(f"Redirecting to {provider} for login")
    return response


@oauth_router.get(
    "/{provider}/callback",
    summary="OAuth callback handler",
    description="Exchange the authorization code, apply the admin allow-list and issue a session"
)
async def login_callback(
    provider: str,
    request: Request,
    service: Annotated[OAuthService, Depends(get_oauth_service)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    signer: Annotated[SessionCookieSigner, Depends(get_cookie_signer)],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    oauth_provider = service.get_provider(provider)

    try:
        if error:
            raise OAuthError(f"Provider returned error: {error}")
        if not code:
            raise OAuthError("Missing authorization code")
        service.verify_state(oauth_provider, state, request.cookies.get(OAUTH_STATE_COOKIE))
        principal = await service.authenticate(oauth_provider, code)
    except Unauthorized as e:
        logger.warning(f"Rejected {provider} login for {e.email or '<no email>'}: not on admin allow-list")
        return _failure_redirect()
    except OAuthError as e:
        logger.warning(f"{provider} login failed: {e.message} {e.details or ''}".rstrip())
        return _failure_redirect()

    # Never carry a pre-login session id across authentication
    store.destroy(signer.unsign(request.cookies.get(app_cfg.SESSION_COOKIE_NAME)))
    record = store.create(principal)

    response = RedirectResponse(
        url=f"{app_cfg.CLIENT_URL.rstrip('/')}/",
        status_code=status.HTTP_302_FOUND
    )
    response.set_cookie(
        app_cfg.SESSION_COOKIE_NAME,
        signer.sign(record.session_id),
        max_age=store.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=app_cfg.is_production
    )
    response.delete_cookie(OAUTH_STATE_COOKIE)
    logger.info(f"Admin {principal.email} logged in via {provider}")
    return response
