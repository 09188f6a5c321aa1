"""
Chat history adapter.

High-level access to one session's persisted turns. Records can be read
back raw, as LangChain messages for rebuilding a conversation, or as
dicts for API responses.

Dependencies: audit_assistant.boundary.db.CRUD.message_crud, langchain_core
System role: Chat history business logic adapter
"""

from datetime import datetime
from typing import List, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from sqlalchemy.ext.asyncio import AsyncSession

from audit_assistant.boundary.db.CRUD.message_crud import message_crud
from audit_assistant.boundary.db.models.message_model import ChatMessageModel, MessageRole


class ChatHistoryAdapter:
    """
    Adapter for one session's chat history.

    Writes flush only; the caller owns the transaction.
    """

    def __init__(self, session_id: str, db: AsyncSession) -> None:
        """
        Initialize chat history adapter.

        Args:
            session_id: Session id for chat history scope
            db: AsyncSession for database operations
        """
        self.session_id = session_id
        self.db = db

    async def add_exchange(
        self,
        user_text: str,
        assistant_text: str,
        created_at: datetime | None = None,
    ) -> None:
        """
        Append a completed round trip: the user turn, then the reply.

        Raises:
            OrphanMessageError: If the session does not exist
        """
        await message_crud.append(
            self.db, self.session_id, MessageRole.USER, user_text, created_at=created_at
        )
        await message_crud.append(
            self.db, self.session_id, MessageRole.ASSISTANT, assistant_text, created_at=created_at
        )

    async def get_records(self) -> Sequence[ChatMessageModel]:
        return await message_crud.list_for_session(self.db, self.session_id)

    async def get_messages(self, limit: int | None = None) -> List[BaseMessage]:
        """
        Get the history as LangChain messages.

        Args:
            limit: Maximum number of recent messages to return (None = all)

        Returns:
            HumanMessage for user turns, AIMessage for assistant turns
        """
        records = await self.get_records()
        if limit is not None and limit > 0:
            records = records[-limit:]

        return [
            HumanMessage(content=record.text)
            if record.role == MessageRole.USER.value
            else AIMessage(content=record.text)
            for record in records
        ]

    async def get_messages_as_dicts(self) -> List[dict]:
        """
        Get the history as dicts for API responses.

        Returns:
            List of message dicts with keys: role, text, created_at
        """
        records = await self.get_records()
        return [
            {"role": record.role, "text": record.text, "created_at": record.created_at}
            for record in records
        ]
