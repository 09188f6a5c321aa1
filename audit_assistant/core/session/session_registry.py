"""
Session registry.

In-process map from session id to its live conversation handle. The
persistent store is authoritative; this registry only avoids rebuilding
handles on every turn and can be cleared at any time.

Registration is first-writer-wins: a second `put` for the same id returns
the handle already registered instead of replacing it. Each session also
gets an asyncio.Lock so that turns for one session run one at a time.

Dependencies: asyncio
System role: Session affinity cache for live conversation handles
"""

import asyncio
from typing import Generic, TypeVar

HandleT = TypeVar("HandleT")


class SessionRegistry(Generic[HandleT]):
    """Live conversation handles keyed by session id."""

    def __init__(self) -> None:
        self._handles: dict[str, HandleT] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, session_id: str) -> HandleT | None:
        return self._handles.get(session_id)

    def put(self, session_id: str, handle: HandleT) -> HandleT:
        """
        Register a handle unless one is already present.

        Returns:
            The registered handle, which is the existing one if another
            creator got there first
        """
        existing = self._handles.get(session_id)
        if existing is not None:
            return existing
        self._handles[session_id] = handle
        return handle

    def remove(self, session_id: str) -> HandleT | None:
        """
        Forget a session: its handle, and its lock unless a turn holds it.

        A held lock stays so that turns already queued on it remain
        serialized with the next one. No-op when the session is absent.
        """
        lock = self._locks.get(session_id)
        if lock is not None and not lock.locked():
            del self._locks[session_id]
        return self._handles.pop(session_id, None)

    def discard_handle(self, session_id: str) -> HandleT | None:
        """Drop only the handle, keeping the session's lock for its current holder."""
        return self._handles.pop(session_id, None)

    def lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def clear(self) -> None:
        self._handles.clear()
        self._locks.clear()

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._handles
