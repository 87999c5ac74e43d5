from __future__ import annotations

import copy
import threading
import time
import uuid
from typing import Any, Callable, Protocol

from cachetools import TTLCache
from fastapi import Request

import config

ASKED_QUESTIONS = "askedQuestions"
_SID = "sid"


class SessionStore(Protocol):
    def get(self, session_id: str, key: str, default: Any = None) -> Any: ...

    def set(self, session_id: str, key: str, value: Any) -> None: ...


class MemorySessionStore:
    """Process-local session values keyed by session id."""

    def __init__(
        self,
        maxsize: int = config.SESSION_MAX_ENTRIES,
        ttl: float = config.SESSION_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        # idle sessions expire and the least recently used are evicted at maxsize
        self._data: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._lock = threading.Lock()

    def get(self, session_id: str, key: str, default: Any = None) -> Any:
        with self._lock:
            values = self._data.get(session_id, {})
            if key not in values:
                return default
            return copy.deepcopy(values[key])

    def set(self, session_id: str, key: str, value: Any) -> None:
        with self._lock:
            values = dict(self._data.get(session_id, {}))
            values[key] = copy.deepcopy(value)
            # re-inserting restarts the ttl
            self._data[session_id] = values

    def __len__(self) -> int:
        with self._lock:
            self._data.expire()
            return len(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class SessionContext:
    """One caller's view of the session store."""

    def __init__(self, session_id: str, store: SessionStore):
        self.session_id = session_id
        self._store = store

    def get(self, key: str, default: Any = None) -> Any:
        return self._store.get(self.session_id, key, default)

    def set(self, key: str, value: Any) -> None:
        self._store.set(self.session_id, key, value)


session_store = MemorySessionStore()


def get_session(request: Request) -> SessionContext:
    # the signed cookie only carries an id; values stay server side
    sid = request.session.get(_SID)
    if not sid:
        sid = uuid.uuid4().hex
        request.session[_SID] = sid
    return SessionContext(sid, session_store)
