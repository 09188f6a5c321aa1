"""
Session lifecycle service.

Creates audit chat sessions, exchanges messages and resumes sessions
transparently after the in-process handle is lost.

A session is Absent (no record), ColdRegistered (record, no live handle
in this process) or Warm (live handle in the registry). Sending to a cold
session rebuilds its handle from the stored instruction and history and
never reuses the stored cache. Sending to an unknown id creates a bare
baseline session on the fly; it is marked degraded in storage and every
turn in it is reported as degraded.

Dependencies: audit_assistant.core, audit_assistant.boundary, sqlalchemy
System role: Chat session state machine
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Protocol, Sequence

import pydantic
from langchain_core.messages import BaseMessage
from sqlalchemy.ext.asyncio import AsyncSession

from audit_assistant.application.adapters.chat_history_adapter import ChatHistoryAdapter
from audit_assistant.boundary.db.CRUD.session_crud import session_crud
from audit_assistant.boundary.db.models.session_model import AuditSessionModel
from audit_assistant.boundary.gemini.cache_manager import CacheManager, DEFAULT_CACHE_TTL_SECONDS
from audit_assistant.boundary.gemini.client import CacheHandle, ConversationHandle, as_utc
from audit_assistant.core.audit.context_composer import coerce_context, compose
from audit_assistant.core.exceptions import SessionNotFoundError, ValidationError
from audit_assistant.core.session.session_registry import SessionRegistry
from audit_assistant.models.grounding import GroundingContext

logger = logging.getLogger(__name__)

MAX_SESSION_ID_LENGTH = 36


class LanguageModel(Protocol):
    """The parts of GeminiClient the lifecycle needs."""

    async def create_cache(
        self,
        instruction: str,
        ttl_seconds: int,
        display_name: str | None = None,
    ) -> CacheHandle: ...

    def create_conversation(
        self,
        system_instruction: str | None = None,
        cache_name: str | None = None,
        cache_expires_at: datetime | None = None,
        history: Sequence[BaseMessage] | None = None,
    ) -> ConversationHandle: ...


@dataclass(frozen=True)
class CreatedSession:
    session_id: str
    cache_name: str | None = None


@dataclass(frozen=True)
class ChatTurnResult:
    reply: str
    degraded: bool = False


def _new_session_id() -> str:
    return str(uuid.uuid4())


def _cache_is_live(record: AuditSessionModel, now: datetime | None = None) -> bool:
    expires_at = as_utc(record.cache_expires_at)
    if record.cache_name is None or expires_at is None:
        return False
    return (now or datetime.now(timezone.utc)) < expires_at


class SessionLifecycleService:
    """
    Session lifecycle orchestrator.

    Attributes:
        db: Request-scoped async database session; this service commits
        registry: Live handles for this process
    """

    def __init__(
        self,
        db: AsyncSession,
        registry: SessionRegistry[ConversationHandle],
        client_provider: Callable[[], LanguageModel],
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        id_factory: Callable[[], str] = _new_session_id,
    ) -> None:
        """
        Initialize the lifecycle service.

        Args:
            db: Async SQLAlchemy session
            registry: Process-wide session registry
            client_provider: Returns the language model; raises
                ConfigurationError when none is configured
            cache_ttl_seconds: Lifetime of provider caches
            id_factory: Generates new session ids
        """
        self.db = db
        self.registry = registry
        self._client_provider = client_provider
        self._cache_ttl_seconds = cache_ttl_seconds
        self._id_factory = id_factory

    async def create_session(
        self,
        context: GroundingContext | dict[str, Any] | None,
    ) -> CreatedSession:
        """
        Create a grounded session (Absent -> Warm).

        Flow:
        1. Compose the system instruction from the grounding context
        2. Try to cache it with the provider (failure falls back to inline)
        3. Start a conversation bound to the cache or the instruction
        4. Persist the session record and register the live handle

        Args:
            context: Grounding context (model or camelCase/snake_case dict)

        Returns:
            CreatedSession with the new id and the cache name, if any

        Raises:
            ConfigurationError: If the language model is not configured
            ValidationError: If the context is malformed
        """
        try:
            grounding = coerce_context(context)
        except pydantic.ValidationError as e:
            raise ValidationError(
                "Invalid grounding context",
                field="context",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

        client = self._client_provider()
        instruction = compose(grounding)
        session_id = self._id_factory()

        cache = await CacheManager(client, self._cache_ttl_seconds).try_create_cache(
            instruction, session_id
        )
        if cache is not None:
            handle = client.create_conversation(
                cache_name=cache.name,
                cache_expires_at=cache.expires_at,
            )
        else:
            handle = client.create_conversation(system_instruction=instruction)

        await session_crud.create_session(
            self.db,
            id=session_id,
            grounding_context=grounding.model_dump(mode="json", by_alias=True),
            system_instruction=instruction,
            cache_name=cache.name if cache else None,
            cache_expires_at=cache.expires_at if cache else None,
        )
        await self.db.commit()
        self.registry.put(session_id, handle)

        logger.info(
            "Session created",
            extra={
                "session_id": session_id,
                "cached": cache is not None,
                "requirements": len(grounding.requirements),
                "instruction_length": len(instruction),
            },
        )
        return CreatedSession(session_id=session_id, cache_name=cache.name if cache else None)

    async def send_message(self, session_id: str, message: str) -> ChatTurnResult:
        """
        Exchange one turn in a session.

        Turns for the same session are serialized by the registry lock.
        The user turn and the reply are persisted together only after the
        model answered; a failed call stores nothing.

        Args:
            session_id: Session id (an unknown id takes the degraded path)
            message: User message

        Returns:
            ChatTurnResult with the reply and whether the session is degraded

        Raises:
            ValidationError: If the id or message is empty or the id too long
            ConfigurationError: If a handle must be built without a configured model
            UpstreamError: If the model call fails
        """
        if not session_id or len(session_id) > MAX_SESSION_ID_LENGTH:
            raise ValidationError("Invalid session id", field="sessionId")
        if not message or not message.strip():
            raise ValidationError("Message must not be empty", field="message")

        async with self.registry.lock_for(session_id):
            handle = self.registry.get(session_id)

            if handle is not None and handle.is_cache_expired():
                logger.info(
                    "session.cache_expired",
                    extra={"session_id": session_id, "cache_name": handle.cache_name},
                )
                self.registry.discard_handle(session_id)
                handle = None

            if handle is None:
                handle, degraded = await self._rebuild_handle(session_id)
            else:
                degraded = await session_crud.is_degraded(self.db, session_id)

            reply = await handle.send(message)

            try:
                await ChatHistoryAdapter(session_id, self.db).add_exchange(message, reply)
                await self.db.commit()
            except Exception:
                await self.db.rollback()
                # the handle already holds this turn; rebuild from storage next time
                self.registry.discard_handle(session_id)
                raise

        return ChatTurnResult(reply=reply, degraded=degraded)

    async def _rebuild_handle(self, session_id: str) -> tuple[ConversationHandle, bool]:
        """
        Build a live handle from storage (ColdRegistered -> Warm).

        The handle always uses the stored instruction directly. An unknown
        id gets a baseline record first (Absent -> Warm), marked degraded.
        """
        client = self._client_provider()
        record = await session_crud.get_by_id(self.db, session_id)

        if record is None:
            logger.warning("session.degraded_create", extra={"session_id": session_id})
            record = await session_crud.create_session(
                self.db,
                id=session_id,
                grounding_context=GroundingContext().model_dump(mode="json", by_alias=True),
                system_instruction=compose(None),
                degraded=True,
            )
            await self.db.commit()
            history: list[BaseMessage] = []
        else:
            history = await ChatHistoryAdapter(session_id, self.db).get_messages()
            logger.info(
                "session.resumed",
                extra={
                    "session_id": session_id,
                    "history_length": len(history),
                    "had_cache": record.cache_name is not None,
                },
            )

        handle = client.create_conversation(
            system_instruction=record.system_instruction,
            history=history,
        )
        return self.registry.put(session_id, handle), record.degraded

    async def get_session(self, session_id: str) -> dict[str, Any]:
        """
        Load a session and its history for display (no state change).

        Returns:
            dict: id, created_at, context, cached, degraded, history

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        record = await session_crud.get_by_id(self.db, session_id)
        if record is None:
            raise SessionNotFoundError(session_id)

        history = await ChatHistoryAdapter(session_id, self.db).get_messages_as_dicts()
        for message in history:
            message["created_at"] = as_utc(message["created_at"])
        return {
            "id": record.id,
            "created_at": as_utc(record.created_at),
            "context": record.grounding_context,
            "cached": _cache_is_live(record),
            "degraded": record.degraded,
            "history": history,
        }

    async def list_sessions(self, limit: int | None = None, offset: int = 0) -> list[dict[str, Any]]:
        """
        List sessions newest first with their message counts.

        Returns:
            list[dict]: id, created_at, message_count, requirement_count, query, cached
        """
        rows = await session_crud.list_with_message_counts(self.db, limit=limit, offset=offset)
        now = datetime.now(timezone.utc)

        summaries = []
        for row in rows:
            context = row.session.grounding_context or {}
            summaries.append(
                {
                    "id": row.session.id,
                    "created_at": as_utc(row.session.created_at),
                    "message_count": row.message_count,
                    "requirement_count": len(context.get("requirements") or []),
                    "query": context.get("query") or "",
                    "cached": _cache_is_live(row.session, now),
                }
            )
        return summaries

    async def delete_session(self, session_id: str) -> bool:
        """
        Delete a session and its messages (Warm|ColdRegistered -> Absent).

        Idempotent: deleting an unknown id is a no-op. Waits for an in-flight
        turn of the same session to finish first.

        Returns:
            bool: True if a record was deleted, False if there was none
        """
        async with self.registry.lock_for(session_id):
            self.registry.discard_handle(session_id)
            deleted = await session_crud.delete_with_messages(self.db, session_id)
            await self.db.commit()
        self.registry.remove(session_id)

        logger.info("Session deleted", extra={"session_id": session_id, "existed": deleted})
        return deleted
