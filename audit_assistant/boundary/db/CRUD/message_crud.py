"""
Chat message CRUD operations.

Append-only message history for audit sessions, read back in strict
(created_at, id) order.

Dependencies: sqlalchemy, audit_assistant.boundary.db.models
System role: Chat message persistence
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from audit_assistant.boundary.db.CRUD.base_crud import BaseCRUD
from audit_assistant.boundary.db.CRUD.session_crud import session_crud
from audit_assistant.boundary.db.models.message_model import ChatMessageModel, MessageRole
from audit_assistant.core.exceptions import OrphanMessageError, ValidationError


class MessageCRUD(BaseCRUD[ChatMessageModel]):
    """
    CRUD operations for ChatMessageModel.

    All operations are session-scoped; messages belong to a specific session.
    """

    def __init__(self) -> None:
        """Initialize MessageCRUD with ChatMessageModel."""
        super().__init__(ChatMessageModel)

    async def append(
        self,
        session: AsyncSession,
        session_id: str,
        role: MessageRole | str,
        text: str,
        created_at: datetime | None = None,
    ) -> ChatMessageModel:
        """
        Append one turn to a session's history.

        Args:
            session: Async database session
            session_id: Owning session id
            role: 'user' or 'assistant'
            text: Turn content
            created_at: Turn timestamp, defaults to now

        Returns:
            Created ChatMessageModel

        Raises:
            OrphanMessageError: If the session does not exist
            ValidationError: If the role is unknown
        """
        try:
            role_value = MessageRole(role).value
        except ValueError as e:
            raise ValidationError(f"Unknown message role: {role}", field="role") from e

        if not await session_crud.exists(session, session_id):
            raise OrphanMessageError(session_id)

        values = {"session_id": session_id, "role": role_value, "text": text}
        if created_at is not None:
            values["created_at"] = created_at
        return await self.create(session, **values)

    async def list_for_session(
        self,
        session: AsyncSession,
        session_id: str,
    ) -> Sequence[ChatMessageModel]:
        """
        Retrieve a session's messages in conversation order.

        Returns:
            Messages ordered by (created_at, id); empty when there are none
        """
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.session_id == session_id)
            .order_by(ChatMessageModel.created_at, ChatMessageModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


message_crud = MessageCRUD()
