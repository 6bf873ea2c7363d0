"""
Session Authenticator
=====================

Registration and login against the ``users`` table, with the resulting
identity bound to a Redis-backed server-side session.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tripshare.config import settings
from tripshare.domain.entities import UserIdentity
from tripshare.domain.errors import DuplicateEntity, InvalidCredentials
from tripshare.domain.security import hash_password, verify_password
from tripshare.infrastructure.repositories import UserRepository
from tripshare.infrastructure.sessions import SessionStore

logger = logging.getLogger(__name__)


class SessionAuthenticator:
    def __init__(
        self,
        db: AsyncSession,
        sessions: SessionStore,
        bcrypt_rounds: int | None = None,
    ):
        self.users = UserRepository(db)
        self.sessions = sessions
        self.bcrypt_rounds = bcrypt_rounds or settings.bcrypt_rounds

    async def register(
        self, email: str, password: str, name: str
    ) -> tuple[UserIdentity, str]:
        """Create the user and open a session; returns (identity, session id)."""
        if await self.users.get_by_email(email):
            raise DuplicateEntity("A user with this email already exists")

        password_hash = await hash_password(password, self.bcrypt_rounds)
        try:
            async with self.users.session.begin_nested():
                user = await self.users.create_user(
                    email=email, name=name, password_hash=password_hash
                )
        except IntegrityError as exc:
            raise DuplicateEntity("A user with this email already exists") from exc

        identity = UserIdentity(id=user.id, email=user.email, name=user.name)
        # the account must be durable before a session can point at it
        await self.users.session.commit()
        session_id = await self.sessions.issue(identity)
        logger.info("Registered user %d", identity.id)
        return identity, session_id

    async def authenticate(
        self, email: str, password: str
    ) -> tuple[UserIdentity, str]:
        user = await self.users.get_by_email(email)
        if user is None or not await verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise InvalidCredentials()

        identity = UserIdentity(id=user.id, email=user.email, name=user.name)
        session_id = await self.sessions.issue(identity)
        logger.info("User %d logged in", user.id)
        return identity, session_id
