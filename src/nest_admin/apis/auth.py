import logging
from fastapi import Request

from nest_admin.apis.dependencies import get_cookie_signer, get_session_store
from nest_admin.apis.models import AdminPrincipal
from nest_admin.config import app_cfg
from nest_admin.exceptions import Unauthenticated
from nest_admin.sessions import SessionRecord

logger = logging.getLogger(__name__)


def parse_allow_list(raw: str | None) -> frozenset[str]:
    """Parse the comma separated ALLOWED_ADMINS value into lower-cased emails."""
    if not raw:
        return frozenset()
    return frozenset(
        email.strip().lower()
        for email in raw.split(",")
        if email.strip()
    )


def is_allowed_admin(email: str | None, allow_list: frozenset[str]) -> bool:
    """
    Decide whether an authenticated identity may administer the server.

    An empty allow-list admits everyone (open-admission mode). Otherwise the
    email must match an entry case-insensitively.
    """
    if not allow_list:
        return True
    if not email:
        return False
    return email.strip().lower() in allow_list


def current_session(request: Request) -> SessionRecord | None:
    """Resolve the session referenced by the request cookie, if any."""
    cookie_value = request.cookies.get(app_cfg.SESSION_COOKIE_NAME)
    session_id = get_cookie_signer(request).unsign(cookie_value)
    return get_session_store(request).get(session_id)


def is_authenticated(request: Request) -> bool:
    """True when the request carries a validly signed cookie for a live session with a principal."""
    record = current_session(request)
    return record is not None and record.principal is not None


async def require_admin(request: Request) -> AdminPrincipal:
    """
    Authentication dependency for every /api route.

    Raises Unauthenticated before the endpoint body runs, so no query is
    issued for anonymous callers.
    """
    if not is_authenticated(request):
        logger.info(f"Rejected unauthenticated request to {request.url.path}")
        raise Unauthenticated()
    return current_session(request).principal
