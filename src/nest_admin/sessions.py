"""
Server-side admin sessions.

The browser only ever holds a signed session id. The principal lives in
process memory and disappears on logout, expiry or restart.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from itsdangerous import BadSignature, SignatureExpired, TimestampSigner

from nest_admin.apis.models import AdminPrincipal

logger = logging.getLogger(__name__)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionRecord:
    session_id: str
    principal: AdminPrincipal
    created_at: datetime
    expires_at: datetime

    def is_expired(self, at: datetime | None = None) -> bool:
        return (at or now_utc()) >= self.expires_at


class SessionStore:
    """In-memory session table keyed by session id."""

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds
        self._sessions: dict[str, SessionRecord] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, principal: AdminPrincipal) -> SessionRecord:
        """
        Issue a fresh session for an authenticated principal.

        Expired sessions are swept first, so abandoned sessions whose cookie
        never comes back do not accumulate.
        """
        self.purge_expired()
        created_at = now_utc()
        record = SessionRecord(
            session_id=secrets.token_urlsafe(32),
            principal=principal,
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=self.ttl_seconds),
        )
        self._sessions[record.session_id] = record
        logger.info(f"Session created for {principal.provider} user {principal.email}")
        return record

    def get(self, session_id: str | None) -> SessionRecord | None:
        """Return the live session or None; expired sessions are evicted."""
        if not session_id:
            return None
        record = self._sessions.get(session_id)
        if record is None:
            return None
        if record.is_expired():
            self._sessions.pop(session_id, None)
            logger.info(f"Session for {record.principal.email} expired")
            return None
        return record

    def destroy(self, session_id: str | None) -> bool:
        """
        Remove a session.

        Returns:
            True if a session was removed, False if there was none
        """
        if not session_id:
            return False
        return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        """Drop every expired session and return how many were dropped."""
        at = now_utc()
        expired = [sid for sid, record in self._sessions.items() if record.is_expired(at)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug(f"Purged {len(expired)} expired sessions")
        return len(expired)


class SessionCookieSigner:
    """Signs session ids for the cookie and verifies them on the way back."""

    def __init__(self, secret: str, max_age: int, salt: str = "nest-admin-session"):
        self._signer = TimestampSigner(secret, salt=salt)
        self.max_age = max_age

    def sign(self, session_id: str) -> str:
        return self._signer.sign(session_id).decode()

    def unsign(self, cookie_value: str | None) -> str | None:
        """Return the session id, or None when the cookie is missing, tampered or stale."""
        if not cookie_value:
            return None
        try:
            return self._signer.unsign(cookie_value, max_age=self.max_age).decode()
        except SignatureExpired:
            logger.info("Session cookie signature expired")
            return None
        except BadSignature:
            logger.warning("Rejected session cookie with bad signature")
            return None
