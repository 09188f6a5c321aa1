"""
Test suite for SessionCRUD database operations.

Runs against the in-memory SQLite database from conftest with foreign
keys enforced.

System role: Verification of session persistence layer
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from audit_assistant.boundary.db.CRUD.message_crud import message_crud
from audit_assistant.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from audit_assistant.boundary.db.models import AuditSessionModel, MessageRole
from audit_assistant.core.exceptions import DuplicateSessionError

pytestmark = pytest.mark.integration

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


async def _create(db: AsyncSession, session_id: str, **overrides) -> AuditSessionModel:
    values = {
        "id": session_id,
        "grounding_context": {"requirements": [], "query": ""},
        "system_instruction": "instruction",
    }
    values.update(overrides)
    return await session_crud.create_session(db, **values)


class TestSessionCRUDInit:
    def test_init_should_set_model_to_audit_session_model(self) -> None:
        assert SessionCRUD().model is AuditSessionModel


class TestCreateSession:
    """Test suite for SessionCRUD.create_session."""

    @pytest.mark.asyncio
    async def test_create_should_persist_fields(self, test_async_db: AsyncSession) -> None:
        # Arrange
        expires = BASE_TIME + timedelta(hours=1)

        # Act
        record = await _create(
            test_async_db,
            "s-1",
            grounding_context={"query": "scope?"},
            cache_name="cachedContents/abc",
            cache_expires_at=expires,
        )

        # Assert
        loaded = await session_crud.get_by_id(test_async_db, "s-1")
        assert loaded is record
        assert loaded.grounding_context == {"query": "scope?"}
        assert loaded.system_instruction == "instruction"
        assert loaded.cache_name == "cachedContents/abc"
        assert loaded.created_at is not None
        assert loaded.degraded is False

    @pytest.mark.asyncio
    async def test_duplicate_id_should_raise(self, test_async_db: AsyncSession) -> None:
        # Arrange
        await _create(test_async_db, "dup")

        # Act & Assert
        with pytest.raises(DuplicateSessionError) as exc_info:
            await _create(test_async_db, "dup", system_instruction="other")

        assert exc_info.value.details["session_id"] == "dup"
        record = await session_crud.get_by_id(test_async_db, "dup")
        assert record.system_instruction == "instruction"


class TestIsDegraded:
    """Test suite for SessionCRUD.is_degraded."""

    @pytest.mark.asyncio
    async def test_should_report_stored_marker(self, test_async_db: AsyncSession) -> None:
        # Arrange
        await _create(test_async_db, "grounded")
        await _create(test_async_db, "bare", degraded=True)

        # Act & Assert
        assert await session_crud.is_degraded(test_async_db, "grounded") is False
        assert await session_crud.is_degraded(test_async_db, "bare") is True

    @pytest.mark.asyncio
    async def test_unknown_id_should_not_be_degraded(self, test_async_db: AsyncSession) -> None:
        assert await session_crud.is_degraded(test_async_db, "missing") is False


class TestListWithMessageCounts:
    """Test suite for SessionCRUD.list_with_message_counts."""

    @pytest.mark.asyncio
    async def test_should_list_newest_first_with_counts(
        self, test_async_db: AsyncSession
    ) -> None:
        # Arrange
        await _create(test_async_db, "old", created_at=BASE_TIME)
        await _create(test_async_db, "new", created_at=BASE_TIME + timedelta(minutes=5))
        for role, text in [(MessageRole.USER, "q1"), (MessageRole.ASSISTANT, "a1")]:
            await message_crud.append(test_async_db, "old", role, text)

        # Act
        rows = await session_crud.list_with_message_counts(test_async_db)

        # Assert
        assert [row.session.id for row in rows] == ["new", "old"]
        assert [row.message_count for row in rows] == [0, 2]

    @pytest.mark.asyncio
    async def test_should_paginate(self, test_async_db: AsyncSession) -> None:
        # Arrange
        for minute in range(3):
            await _create(
                test_async_db, f"s-{minute}", created_at=BASE_TIME + timedelta(minutes=minute)
            )

        # Act
        rows = await session_crud.list_with_message_counts(test_async_db, limit=1, offset=1)

        # Assert
        assert [row.session.id for row in rows] == ["s-1"]

    @pytest.mark.asyncio
    async def test_empty_store_should_return_empty_list(
        self, test_async_db: AsyncSession
    ) -> None:
        assert await session_crud.list_with_message_counts(test_async_db) == []


class TestDeleteWithMessages:
    """Test suite for SessionCRUD.delete_with_messages."""

    @pytest.mark.asyncio
    async def test_should_delete_session_and_messages(
        self, test_async_db: AsyncSession
    ) -> None:
        # Arrange
        await _create(test_async_db, "gone")
        await message_crud.append(test_async_db, "gone", MessageRole.USER, "hello")

        # Act
        deleted = await session_crud.delete_with_messages(test_async_db, "gone")

        # Assert
        assert deleted is True
        assert await session_crud.get_by_id(test_async_db, "gone") is None
        assert await message_crud.list_for_session(test_async_db, "gone") == []

    @pytest.mark.asyncio
    async def test_unknown_id_should_return_false(self, test_async_db: AsyncSession) -> None:
        assert await session_crud.delete_with_messages(test_async_db, "missing") is False
