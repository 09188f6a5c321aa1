"""
Test suite for MessageCRUD database operations.

System role: Verification of append-only chat history persistence
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from audit_assistant.boundary.db.CRUD.message_crud import message_crud
from audit_assistant.boundary.db.CRUD.session_crud import session_crud
from audit_assistant.boundary.db.models import MessageRole
from audit_assistant.core.exceptions import OrphanMessageError, ValidationError

pytestmark = pytest.mark.integration


@pytest.fixture
async def stored_session(test_async_db: AsyncSession) -> str:
    await session_crud.create_session(
        test_async_db,
        id="session-1",
        grounding_context={},
        system_instruction="instruction",
    )
    return "session-1"


class TestAppend:
    """Test suite for MessageCRUD.append."""

    @pytest.mark.asyncio
    async def test_append_should_store_turn(
        self, test_async_db: AsyncSession, stored_session: str
    ) -> None:
        # Act
        message = await message_crud.append(
            test_async_db, stored_session, MessageRole.USER, "What is A.5.1?"
        )

        # Assert
        assert message.id is not None
        assert message.role == "user"
        assert message.text == "What is A.5.1?"

    @pytest.mark.asyncio
    async def test_append_to_unknown_session_should_raise(
        self, test_async_db: AsyncSession
    ) -> None:
        with pytest.raises(OrphanMessageError):
            await message_crud.append(test_async_db, "missing", MessageRole.USER, "hi")

    @pytest.mark.asyncio
    async def test_unknown_role_should_raise(
        self, test_async_db: AsyncSession, stored_session: str
    ) -> None:
        with pytest.raises(ValidationError):
            await message_crud.append(test_async_db, stored_session, "system", "hi")


class TestListForSession:
    """Test suite for MessageCRUD.list_for_session."""

    @pytest.mark.asyncio
    async def test_identical_timestamps_should_keep_insertion_order(
        self, test_async_db: AsyncSession, stored_session: str
    ) -> None:
        # Arrange
        same_time = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        turns = [
            (MessageRole.USER, "u1"),
            (MessageRole.ASSISTANT, "a1"),
            (MessageRole.USER, "u2"),
            (MessageRole.ASSISTANT, "a2"),
        ]
        for role, text in turns:
            await message_crud.append(
                test_async_db, stored_session, role, text, created_at=same_time
            )

        # Act
        messages = await message_crud.list_for_session(test_async_db, stored_session)

        # Assert
        assert [(m.role, m.text) for m in messages] == [
            ("user", "u1"),
            ("assistant", "a1"),
            ("user", "u2"),
            ("assistant", "a2"),
        ]

    @pytest.mark.asyncio
    async def test_session_without_messages_should_return_empty(
        self, test_async_db: AsyncSession, stored_session: str
    ) -> None:
        assert list(await message_crud.list_for_session(test_async_db, stored_session)) == []

    @pytest.mark.asyncio
    async def test_should_only_return_own_messages(
        self, test_async_db: AsyncSession, stored_session: str
    ) -> None:
        # Arrange
        await session_crud.create_session(
            test_async_db, id="session-2", grounding_context={}, system_instruction="x"
        )
        await message_crud.append(test_async_db, stored_session, MessageRole.USER, "mine")
        await message_crud.append(test_async_db, "session-2", MessageRole.USER, "theirs")

        # Act
        messages = await message_crud.list_for_session(test_async_db, stored_session)

        # Assert
        assert [m.text for m in messages] == ["mine"]
