"""
Gemini language model client.

Wraps one google-genai Client for the three things the application needs:
one-shot completions for requirement analysis, provider-side context
caches, and multi-turn conversations bound either to a cache or to a raw
system instruction. Blocking SDK calls run in worker threads.

Provider exceptions are translated to UpstreamError here and never retried.

Dependencies: google.genai, langchain_google_genai, langchain_core, httpx
System role: LanguageModel boundary for chat sessions and analysis
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from audit_assistant.configs.gemini import GeminiSettings
from audit_assistant.core.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

PROVIDER_ERRORS = (genai_errors.APIError, httpx.HTTPError)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes (as read back from SQLite) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def describe_provider_error(error: Exception) -> str:
    """Best human-readable message for a provider exception."""
    message = getattr(error, "message", None)
    return str(message or error)


@dataclass(frozen=True)
class CacheHandle:
    """Provider-side cached content and the moment it stops being valid."""

    name: str
    expires_at: datetime


def to_content_history(messages: Sequence[BaseMessage]) -> list[types.Content]:
    """
    Convert LangChain messages to Gemini conversation history.

    HumanMessage becomes a 'user' turn and AIMessage a 'model' turn; any
    other message type carries no conversational turn and is skipped.
    """
    history: list[types.Content] = []
    for message in messages:
        if isinstance(message, HumanMessage):
            role = "user"
        elif isinstance(message, AIMessage):
            role = "model"
        else:
            continue
        history.append(types.Content(role=role, parts=[types.Part(text=_message_text(message))]))
    return history


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ConversationHandle:
    """
    A live multi-turn conversation.

    Bound to exactly one of a cached-content name or a raw system
    instruction. The underlying SDK chat object keeps the exchanged turns
    for the lifetime of the process.

    Attributes:
        cache_name: Provider cache the conversation reads its instruction from
        system_instruction: Instruction sent inline when no cache is used
        cache_expires_at: When the bound cache stops being valid
    """

    def __init__(
        self,
        chat: Any,
        cache_name: str | None = None,
        system_instruction: str | None = None,
        cache_expires_at: datetime | None = None,
    ) -> None:
        self._chat = chat
        self.cache_name = cache_name
        self.system_instruction = system_instruction
        self.cache_expires_at = as_utc(cache_expires_at)

    def is_cache_expired(self, now: datetime | None = None) -> bool:
        """True when bound to a cache whose lifetime has elapsed."""
        if self.cache_name is None or self.cache_expires_at is None:
            return False
        now = as_utc(now) or datetime.now(timezone.utc)
        return now >= self.cache_expires_at

    async def send(self, text: str) -> str:
        """
        Send one user turn and return the model's reply text.

        Raises:
            UpstreamError: If the provider call fails or returns no text
        """
        try:
            response = await asyncio.to_thread(self._chat.send_message, text)
        except PROVIDER_ERRORS as e:
            raise UpstreamError(describe_provider_error(e), operation="send") from e

        reply = getattr(response, "text", None)
        if not reply:
            raise UpstreamError("No response from Gemini API", operation="send")
        return reply


class GeminiClient:
    """
    LanguageModel backed by Google Gemini.

    Usage:
        client = GeminiClient(api_key="...", model="gemini-2.5-flash")
        reply = await client.generate_once("Summarise ISO 27001 A.5.1")
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        top_k: int = 40,
        top_p: float = 0.95,
        max_output_tokens: int = 4096,
        request_timeout: float | None = 60.0,
        client: genai.Client | None = None,
    ) -> None:
        self.model = model
        self._client = client or genai.Client(api_key=api_key)
        self._analysis_model = ChatGoogleGenerativeAI(
            model=model,
            google_api_key=api_key,
            temperature=temperature,
            top_k=top_k,
            top_p=top_p,
            max_output_tokens=max_output_tokens,
            timeout=request_timeout,
            # failures surface to the caller; a batch counts them per item
            max_retries=0,
        )

    @property
    def sdk(self) -> genai.Client:
        """Underlying google-genai client, shared with the document store."""
        return self._client

    async def generate_once(self, prompt: str) -> str:
        """
        Single-shot completion without history.

        Raises:
            UpstreamError: If the call fails or the reply is empty
        """
        try:
            response = await self._analysis_model.ainvoke([HumanMessage(content=prompt)])
        except PROVIDER_ERRORS as e:
            raise UpstreamError(describe_provider_error(e), operation="generate") from e
        except Exception as e:
            # langchain_google_genai wraps SDK failures in its own exception types
            raise UpstreamError(f"Gemini API error: {e}", operation="generate") from e

        text = _message_text(response)
        if not text:
            raise UpstreamError("No response from Gemini API", operation="generate")
        return text

    async def create_cache(
        self,
        instruction: str,
        ttl_seconds: int,
        display_name: str | None = None,
    ) -> CacheHandle:
        """
        Register an instruction as provider-side cached content.

        Raises:
            UpstreamError: If the provider rejects or fails the request
        """
        config = types.CreateCachedContentConfig(
            system_instruction=instruction,
            ttl=f"{ttl_seconds}s",
            display_name=display_name,
        )
        try:
            cached = await asyncio.to_thread(
                self._client.caches.create,
                model=self.model,
                config=config,
            )
        except PROVIDER_ERRORS as e:
            raise UpstreamError(describe_provider_error(e), operation="cache") from e

        if not cached.name:
            raise UpstreamError("Cache created without a name", operation="cache")

        expires_at = as_utc(cached.expire_time) or (
            datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        )
        return CacheHandle(name=cached.name, expires_at=expires_at)

    def create_conversation(
        self,
        system_instruction: str | None = None,
        cache_name: str | None = None,
        cache_expires_at: datetime | None = None,
        history: Sequence[BaseMessage] | None = None,
    ) -> ConversationHandle:
        """
        Start a conversation bound to a cache or to a raw instruction.

        Args:
            system_instruction: Inline instruction (used when cache_name is None)
            cache_name: Provider cached-content name
            cache_expires_at: Expiry of the cache, tracked on the handle
            history: Prior turns to seed the conversation with

        Returns:
            ConversationHandle ready to send the next turn
        """
        if cache_name:
            config = types.GenerateContentConfig(cached_content=cache_name)
        else:
            config = types.GenerateContentConfig(system_instruction=system_instruction)

        chat = self._client.chats.create(
            model=self.model,
            config=config,
            history=to_content_history(history or []),
        )
        return ConversationHandle(
            chat,
            cache_name=cache_name or None,
            system_instruction=None if cache_name else system_instruction,
            cache_expires_at=cache_expires_at if cache_name else None,
        )


def get_gemini_client(settings: GeminiSettings) -> GeminiClient:
    """
    Build a GeminiClient from settings.

    Raises:
        ConfigurationError: If no API key is configured
    """
    if not settings.api_key:
        raise ConfigurationError(
            "Gemini API key not configured. Set GEMINI_API_KEY.",
            setting="GEMINI_API_KEY",
        )
    return GeminiClient(
        api_key=settings.api_key,
        model=settings.model,
        temperature=settings.temperature,
        top_k=settings.top_k,
        top_p=settings.top_p,
        max_output_tokens=settings.max_output_tokens,
        request_timeout=settings.request_timeout_seconds,
    )
