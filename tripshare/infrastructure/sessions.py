"""
Redis-backed server-side sessions.

The browser only holds an opaque random token (the session cookie).  Redis
stores ``session:<token>`` -> JSON user identity with a TTL equal to the
cookie max-age, so a session lives 7 days from its last (re)issue.
"""

from __future__ import annotations

import json
import secrets
from typing import Optional

import redis.asyncio as aioredis

from tripshare.domain.entities import UserIdentity


class SessionStore:
    def __init__(self, client: aioredis.Redis, ttl_seconds: int):
        self.redis = client
        self.ttl = ttl_seconds

    @staticmethod
    def _key(session_id: str) -> str:
        return f"session:{session_id}"

    async def issue(self, user: UserIdentity) -> str:
        """Create a session for *user* and return its token."""
        session_id = secrets.token_urlsafe(32)
        await self.redis.set(
            self._key(session_id), json.dumps(user.to_dict()), ex=self.ttl
        )
        return session_id

    async def get(self, session_id: str | None) -> Optional[UserIdentity]:
        if not session_id:
            return None
        raw = await self.redis.get(self._key(session_id))
        if raw is None:
            return None
        return UserIdentity.from_dict(json.loads(raw))
