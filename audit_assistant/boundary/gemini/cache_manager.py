"""
Context cache manager.

Best-effort creation of provider-side cached content for a session's
system instruction. A failed attempt is logged under `cache.create_failed`
and reported as None; it never fails session creation.

Dependencies: audit_assistant.boundary.gemini.client
System role: Optional context caching for chat sessions
"""

import logging
from typing import Protocol

from audit_assistant.boundary.gemini.client import CacheHandle
from audit_assistant.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 3600


class CachingModel(Protocol):
    async def create_cache(
        self,
        instruction: str,
        ttl_seconds: int,
        display_name: str | None = None,
    ) -> CacheHandle: ...


class CacheManager:
    """Creates provider caches with a fixed TTL."""

    def __init__(self, model: CachingModel, ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS) -> None:
        self.model = model
        self.ttl_seconds = ttl_seconds

    async def try_create_cache(self, instruction: str, session_id: str) -> CacheHandle | None:
        """
        Attempt to cache an instruction for one session.

        Args:
            instruction: System instruction to cache
            session_id: Owning session, used in the cache display name

        Returns:
            CacheHandle valid for ttl_seconds, or None when caching failed
        """
        try:
            handle = await self.model.create_cache(
                instruction,
                ttl_seconds=self.ttl_seconds,
                display_name=f"audit-session-{session_id}",
            )
        except Exception as e:
            log_with_context(
                logger,
                logging.WARNING,
                "cache.create_failed",
                session_id=session_id,
                error=str(e),
                error_type=type(e).__name__,
                instruction_length=len(instruction),
            )
            return None

        logger.info(
            "Context cache created",
            extra={"session_id": session_id, "cache_name": handle.name},
        )
        return handle
