"""FastAPI dependency injection helpers."""

from typing import Optional

from fastapi import Depends, Request, WebSocket
from sqlalchemy.ext.asyncio import AsyncSession

from tripshare.api.broadcast import BroadcastChannel
from tripshare.config import settings
from tripshare.domain.entities import UserIdentity
from tripshare.domain.errors import NotAuthenticated
from tripshare.infrastructure.database import async_session_factory
from tripshare.infrastructure.redis_client import get_redis
from tripshare.infrastructure.sessions import SessionStore


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session_store() -> SessionStore:
    return SessionStore(await get_redis(), settings.session_max_age_seconds)


async def get_current_user(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
) -> Optional[UserIdentity]:
    """Identity bound to the request's session cookie, if any."""
    return await sessions.get(request.cookies.get(settings.session_cookie_name))


async def require_user(
    user: Optional[UserIdentity] = Depends(get_current_user),
) -> UserIdentity:
    if user is None:
        raise NotAuthenticated()
    return user


def get_chat_channel(websocket: WebSocket) -> BroadcastChannel:
    return websocket.app.state.chat
