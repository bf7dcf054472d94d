"""
Dashboard sessions -- opaque session id -> backend bearer token.

Key format:  dashboard_session:{session_id}
TTL:         settings.session_ttl_s (SET EX)

Login stores the token returned by the backend; logout or any backend 401
drops it. When redis is None the store keeps sessions in process memory, which
is fine for a single dashboard worker and for tests.
"""

from __future__ import annotations

import json
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _redis_key(session_id: str) -> str:
    return f"dashboard_session:{session_id}"


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class SessionStore:
    """
    Usage:
        store = SessionStore(app.state.redis, ttl_s=settings.session_ttl_s)
        sid = await store.create(token, user)
        session = await store.get(sid)      # {"token", "user", "createdAt"} or None
        await store.delete(sid)
    """

    def __init__(self, redis: Any, ttl_s: int) -> None:
        self._redis = redis
        self._ttl_s = ttl_s
        self._local: dict[str, tuple[float, dict[str, Any]]] = {}

    async def create(self, token: str, user: Optional[dict[str, Any]] = None) -> str:
        session_id = new_session_id()
        record = {
            "token": token,
            "user": user or {},
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        if self._redis is None:
            self._local[session_id] = (time.monotonic() + self._ttl_s, record)
        else:
            await self._redis.set(_redis_key(session_id), json.dumps(record), ex=self._ttl_s)
        logger.info("session_created user=%s", (user or {}).get("email", "?"))
        return session_id

    async def get(self, session_id: str) -> Optional[dict[str, Any]]:
        if not session_id:
            return None
        if self._redis is None:
            entry = self._local.get(session_id)
            if entry is None:
                return None
            expires_at, record = entry
            if expires_at <= time.monotonic():
                self._local.pop(session_id, None)
                return None
            return record

        raw = await self._redis.get(_redis_key(session_id))
        if not raw:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("session_corrupt key=%s", _redis_key(session_id))
            return None

    async def delete(self, session_id: str) -> None:
        if not session_id:
            return
        if self._redis is None:
            self._local.pop(session_id, None)
        else:
            await self._redis.delete(_redis_key(session_id))
        logger.info("session_cleared")
