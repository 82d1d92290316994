import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from fastapi import Request

from app.core.config import settings
from app.core.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass
class AdminSession:
    session_id: str
    login_time: float = field(default_factory=time.time)
    csrf_token: str = ""
    csrf_token_time: float = 0.0


class SessionStore:
    """Admin sessions held in process memory, keyed by the session cookie value."""

    def __init__(self):
        self._sessions: Dict[str, AdminSession] = {}

    def create(self) -> AdminSession:
        self.prune()
        session = AdminSession(session_id=secrets.token_urlsafe(32))
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: Optional[str]) -> Optional[AdminSession]:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def destroy(self, session_id: Optional[str]) -> None:
        if session_id:
            self._sessions.pop(session_id, None)

    def prune(self) -> None:
        """Drop sessions idle for longer than the session timeout."""
        cutoff = time.time() - settings.SESSION_TIMEOUT
        for session_id in [sid for sid, s in self._sessions.items() if s.login_time < cutoff]:
            del self._sessions[session_id]

    def __len__(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()


sessions = SessionStore()


def check_credentials(username: str, password: str) -> bool:
    if not settings.ADMIN_PASSWORD:
        return False
    ok_user = secrets.compare_digest(username, settings.ADMIN_USERNAME)
    ok_pass = secrets.compare_digest(password, settings.ADMIN_PASSWORD)
    return ok_user and ok_pass


def ensure_csrf_token(session: AdminSession) -> str:
    """Return the session's CSRF token, issuing a new one when missing or older than the TTL."""
    now = time.time()
    if not session.csrf_token or now - session.csrf_token_time > settings.CSRF_TOKEN_TTL:
        session.csrf_token = secrets.token_hex(32)
        session.csrf_token_time = now
    return session.csrf_token


def verify_csrf_token(session: AdminSession, token: Optional[str]) -> bool:
    if not token or not session.csrf_token:
        return False
    return secrets.compare_digest(session.csrf_token, str(token))


def require_admin(request: Request) -> AdminSession:
    """FastAPI dependency: the request must carry a live admin session cookie."""
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    session = sessions.get(session_id)
    if session is None:
        raise AuthError("Not authenticated")
    if time.time() - session.login_time > settings.SESSION_TIMEOUT:
        sessions.destroy(session_id)
        logger.info("Admin session expired")
        raise AuthError("Session expired")
    session.login_time = time.time()
    return session


def require_csrf(session: AdminSession, token: Optional[str]) -> None:
    if not verify_csrf_token(session, token):
        logger.warning("Rejected request with invalid CSRF token")
        raise AuthError("Invalid CSRF token")
