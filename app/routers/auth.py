import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from starlette.status import HTTP_401_UNAUTHORIZED

from app.security import SESSION_COOKIE_NAME, AdminSession, get_admin_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


class LoginRequest(BaseModel):
    password: str


class SessionStatus(BaseModel):
    authenticated: bool


@router.post("/login", response_model=SessionStatus)
def login(
    request: LoginRequest,
    response: Response,
    session: AdminSession = Depends(get_admin_session),
):
    if not session.login(request.password):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid password")

    response.set_cookie(
        SESSION_COOKIE_NAME,
        session.persisted_value(),
        httponly=True,
        samesite="lax",
    )
    return SessionStatus(authenticated=True)


@router.post("/logout", response_model=SessionStatus)
def logout(response: Response, session: AdminSession = Depends(get_admin_session)):
    session.logout()
    response.delete_cookie(SESSION_COOKIE_NAME)
    return SessionStatus(authenticated=session.authenticated)


@router.get("/session", response_model=SessionStatus)
def current_session(session: AdminSession = Depends(get_admin_session)):
    return SessionStatus(authenticated=session.authenticated)
