"""
Audit session CRUD operations.

Create/read/list/delete for AuditSessionModel, with the message count
aggregated at query time.

Dependencies: sqlalchemy, audit_assistant.boundary.db.models
System role: Session persistence operations
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from audit_assistant.boundary.db.CRUD.base_crud import BaseCRUD
from audit_assistant.boundary.db.models.message_model import ChatMessageModel
from audit_assistant.boundary.db.models.session_model import AuditSessionModel
from audit_assistant.core.exceptions import DuplicateSessionError


@dataclass(frozen=True)
class SessionWithCount:
    """A session row paired with its derived message count."""

    session: AuditSessionModel
    message_count: int


class SessionCRUD(BaseCRUD[AuditSessionModel]):
    """
    CRUD operations for AuditSessionModel.

    Sessions are write-once: there is no update operation.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with AuditSessionModel."""
        super().__init__(AuditSessionModel)

    async def create_session(
        self,
        session: AsyncSession,
        id: str,
        grounding_context: dict[str, Any],
        system_instruction: str,
        cache_name: str | None = None,
        cache_expires_at: datetime | None = None,
        degraded: bool = False,
        created_at: datetime | None = None,
    ) -> AuditSessionModel:
        """
        Insert a new session record.

        Args:
            session: Async database session
            id: Session identifier
            grounding_context: Context snapshot (JSON-serialisable)
            system_instruction: Composed instruction text
            cache_name: Provider cache name, if caching succeeded
            cache_expires_at: Provider cache expiry
            degraded: Whether the session was created without grounding
            created_at: Explicit creation time, defaults to now

        Returns:
            Created AuditSessionModel

        Raises:
            DuplicateSessionError: If a session with this id already exists
        """
        if await self.exists(session, id):
            raise DuplicateSessionError(id)

        values: dict[str, Any] = {
            "id": id,
            "grounding_context": grounding_context,
            "system_instruction": system_instruction,
            "cache_name": cache_name,
            "cache_expires_at": cache_expires_at,
            "degraded": degraded,
        }
        if created_at is not None:
            values["created_at"] = created_at

        try:
            return await self.create(session, **values)
        except IntegrityError as e:
            raise DuplicateSessionError(id, details={"error": str(e.orig)}) from e

    async def is_degraded(self, session: AsyncSession, id: str) -> bool:
        """True when the session exists and was created without grounding."""
        result = await session.execute(
            select(AuditSessionModel.degraded).where(AuditSessionModel.id == id)
        )
        return bool(result.scalar_one_or_none())

    async def list_with_message_counts(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[SessionWithCount]:
        """
        List sessions newest first, each with its message count.

        Args:
            session: Async database session
            limit: Maximum number of sessions to return
            offset: Number of sessions to skip

        Returns:
            List of SessionWithCount ordered by created_at descending
        """
        message_count = func.count(ChatMessageModel.id).label("message_count")
        stmt = (
            select(AuditSessionModel, message_count)
            .outerjoin(ChatMessageModel, ChatMessageModel.session_id == AuditSessionModel.id)
            .group_by(AuditSessionModel.id)
            .order_by(AuditSessionModel.created_at.desc(), AuditSessionModel.id)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await session.execute(stmt)
        return [SessionWithCount(session=row[0], message_count=row[1]) for row in result.all()]

    async def delete_with_messages(self, session: AsyncSession, id: str) -> bool:
        """
        Delete a session and all of its messages.

        Messages are removed explicitly as well so the cascade holds on
        backends where foreign keys are not enforced.

        Returns:
            True if a session row was deleted, False if it did not exist
        """
        await session.execute(delete(ChatMessageModel).where(ChatMessageModel.session_id == id))
        return await self.delete_by_id(session, id)


session_crud = SessionCRUD()
