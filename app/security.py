import hashlib
import hmac
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_403_FORBIDDEN

from app.settings import Settings, settings

SESSION_COOKIE_NAME = "blogAuth"


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


@dataclass
class AdminSession:
    """
    Authentication state for the blog admin area.

    The gate is a single shared password; it only guards the entry point to
    the write path; the GitHub token is the real access control.

    The cookie token is the same for every login and only changes when
    SESSION_SECRET (or ADMIN_PASSWORD, when no secret is set) is rotated.
    Logout only deletes the client's cookie, so a copied token stays valid
    until then.
    """

    settings: Settings = field(repr=False)
    authenticated: bool = False

    @classmethod
    def from_persisted(cls, value: Optional[str], settings: Settings) -> "AdminSession":
        session = cls(settings=settings)
        expected = session.persisted_value_for(authenticated=True)
        session.authenticated = bool(
            value
            and expected
            and hmac.compare_digest(value.encode("utf-8"), expected.encode("utf-8"))
        )
        return session

    def login(self, password: str) -> bool:
        secret = self.settings.ADMIN_PASSWORD
        self.authenticated = bool(
            secret
            and password
            and hmac.compare_digest(password.encode("utf-8"), secret.encode("utf-8"))
        )
        return self.authenticated

    def logout(self) -> None:
        self.authenticated = False

    def persisted_value(self) -> Optional[str]:
        return self.persisted_value_for(self.authenticated)

    def persisted_value_for(self, authenticated: bool) -> Optional[str]:
        key = self.settings.SESSION_SECRET or self.settings.ADMIN_PASSWORD
        if not authenticated or not key:
            return None
        return hmac.new(
            key.encode("utf-8"), SESSION_COOKIE_NAME.encode("utf-8"), hashlib.sha256
        ).hexdigest()


def get_admin_session(
    request: Request, current_settings: Settings = Depends(get_settings)
) -> AdminSession:
    return AdminSession.from_persisted(
        request.cookies.get(SESSION_COOKIE_NAME), current_settings
    )


def require_admin(session: AdminSession = Depends(get_admin_session)) -> AdminSession:
    if session.authenticated:
        return session
    raise HTTPException(
        status_code=HTTP_403_FORBIDDEN,
        detail="Admin login required",
    )
