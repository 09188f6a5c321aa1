"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite database, fake Gemini language model and chat,
session registry
Dependencies: pytest, pytest-asyncio, sqlalchemy
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Sequence

import pytest
from langchain_core.messages import BaseMessage
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from audit_assistant.boundary.db.base import Base
from audit_assistant.boundary.db.connection import build_async_engine
from audit_assistant.boundary.db.models import AuditSessionModel, ChatMessageModel  # noqa: F401
from audit_assistant.boundary.gemini.client import CacheHandle, ConversationHandle
from audit_assistant.core.session import SessionRegistry


class FakeChat:
    """Stands in for the google-genai chat object behind a ConversationHandle."""

    def __init__(self, model: "FakeLanguageModel", history: Sequence[BaseMessage]) -> None:
        self._model = model
        self.history = [(m.type, m.content) for m in history]
        self.sent: list[str] = []

    def send_message(self, text: str) -> SimpleNamespace:
        if self._model.send_error is not None:
            raise self._model.send_error
        self.sent.append(text)
        reply = f"reply {len(self.history) // 2 + 1}: {text}"
        self.history.extend([("human", text), ("ai", reply)])
        return SimpleNamespace(text=reply)


class FakeLanguageModel:
    """
    In-memory LanguageModel.

    Records every conversation it creates so tests can inspect how a
    handle was configured (cache or raw instruction, replayed history).
    """

    def __init__(self) -> None:
        self.cache_error: Exception | None = None
        self.send_error: Exception | None = None
        self.cache_lifetime = timedelta(hours=1)
        self.caches: list[dict[str, Any]] = []
        self.conversations: list[dict[str, Any]] = []
        self.prompts: list[str] = []
        self.replies: dict[str, Any] = {}
        self.default_reply = '{"typical_evidence": [], "questions": [], "suggestions": []}'

    async def create_cache(
        self,
        instruction: str,
        ttl_seconds: int,
        display_name: str | None = None,
    ) -> CacheHandle:
        if self.cache_error is not None:
            raise self.cache_error
        name = f"cachedContents/fake-{len(self.caches) + 1}"
        self.caches.append(
            {"name": name, "instruction": instruction, "ttl_seconds": ttl_seconds,
             "display_name": display_name}
        )
        return CacheHandle(name=name, expires_at=datetime.now(timezone.utc) + self.cache_lifetime)

    def create_conversation(
        self,
        system_instruction: str | None = None,
        cache_name: str | None = None,
        cache_expires_at: datetime | None = None,
        history: Sequence[BaseMessage] | None = None,
    ) -> ConversationHandle:
        chat = FakeChat(self, history or [])
        self.conversations.append(
            {
                "system_instruction": system_instruction,
                "cache_name": cache_name,
                "history": list(history or []),
                "chat": chat,
            }
        )
        return ConversationHandle(
            chat,
            cache_name=cache_name,
            system_instruction=None if cache_name else system_instruction,
            cache_expires_at=cache_expires_at if cache_name else None,
        )

    async def generate_once(self, prompt: str) -> str:
        self.prompts.append(prompt)
        for marker, reply in self.replies.items():
            if marker in prompt:
                if isinstance(reply, Exception):
                    raise reply
                return reply
        return self.default_reply


@pytest.fixture
def fake_model() -> FakeLanguageModel:
    return FakeLanguageModel()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with foreign keys enforced, shared across sessions."""
    engine = build_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_async_db(db_session_factory):
    """
    Async session on the in-memory database.

    Yields:
        AsyncSession: Test database session, rolled back afterwards
    """
    async with db_session_factory() as session:
        yield session
        await session.rollback()
