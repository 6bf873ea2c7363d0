"""
Auth endpoints
==============

GET  /           -- liveness probe
GET  /api/login  -- is the caller logged in, and as whom
POST /register   -- create an account (form), redirect to the frontend
POST /login      -- open a session (form), redirect to the frontend

Both POST routes answer with a 303 redirect.  A duplicate registration is
not an error: it redirects to ``/home`` without issuing a session cookie.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tripshare.api.dependencies import get_current_user, get_db, get_session_store
from tripshare.api.middleware import RATE_LIMIT, limiter
from tripshare.api.schemas import LoginStatusResponse
from tripshare.config import settings
from tripshare.domain.entities import UserIdentity
from tripshare.domain.errors import DuplicateEntity, InvalidCredentials
from tripshare.infrastructure.sessions import SessionStore
from tripshare.services.auth import SessionAuthenticator

router = APIRouter(tags=["auth"])


def _redirect(path: str, session_id: str | None = None) -> RedirectResponse:
    response = RedirectResponse(url=settings.frontend_url + path, status_code=303)
    if session_id:
        response.set_cookie(
            settings.session_cookie_name,
            session_id,
            max_age=settings.session_max_age_seconds,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
        )
    return response


@router.get("/", summary="Liveness probe")
async def root():
    return {"status": True}


@router.get(
    "/api/login",
    response_model=LoginStatusResponse,
    response_model_exclude_none=True,
    summary="Authentication status of the caller",
)
@limiter.limit(RATE_LIMIT)
async def login_status(
    request: Request,
    user: Optional[UserIdentity] = Depends(get_current_user),
):
    if user is None:
        return LoginStatusResponse(loggedIn=False)
    return LoginStatusResponse(loggedIn=True, name=user.name)


@router.post("/register", status_code=303, summary="Register a new user")
@limiter.limit(RATE_LIMIT)
async def register(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    name: str = Form(...),
    db: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
):
    auth = SessionAuthenticator(db, sessions)
    try:
        _, session_id = await auth.register(username, password, name)
    except DuplicateEntity:
        return _redirect("/home")
    return _redirect("/login", session_id)


@router.post("/login", status_code=303, summary="Log in with email and password")
@limiter.limit(RATE_LIMIT)
async def login(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    db: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
):
    auth = SessionAuthenticator(db, sessions)
    try:
        _, session_id = await auth.authenticate(username, password)
    except InvalidCredentials:
        return _redirect("/login")
    return _redirect("/dashboard", session_id)
