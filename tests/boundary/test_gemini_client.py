"""
Test suite for the Gemini client boundary.

The google-genai client is a MagicMock and ChatGoogleGenerativeAI is
patched, so no network calls are made.

System role: Verification of provider translation and error mapping
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from audit_assistant.boundary.gemini.client import (
    ConversationHandle,
    GeminiClient,
    as_utc,
    get_gemini_client,
    to_content_history,
)
from audit_assistant.configs.gemini import GeminiSettings
from audit_assistant.core.exceptions import ConfigurationError, UpstreamError


@pytest.fixture
def mock_sdk() -> MagicMock:
    return MagicMock()


@pytest.fixture
def gemini_client(mock_sdk):
    with patch("audit_assistant.boundary.gemini.client.ChatGoogleGenerativeAI") as chat_model_cls:
        chat_model_cls.return_value.ainvoke = AsyncMock()
        client = GeminiClient(api_key="test-key", model="gemini-2.5-flash", client=mock_sdk)
        yield client


class TestHistoryConversion:
    def test_should_map_roles_and_skip_other_messages(self) -> None:
        # Act
        history = to_content_history(
            [
                SystemMessage(content="ignored"),
                HumanMessage(content="question"),
                AIMessage(content="answer"),
            ]
        )

        # Assert
        assert [content.role for content in history] == ["user", "model"]
        assert [content.parts[0].text for content in history] == ["question", "answer"]

    def test_as_utc_should_tag_naive_datetimes(self) -> None:
        naive = datetime(2026, 1, 1, 10, 0)
        assert as_utc(naive).tzinfo is timezone.utc
        assert as_utc(None) is None


class TestConversationHandle:
    @pytest.mark.asyncio
    async def test_send_should_return_reply_text(self) -> None:
        # Arrange
        chat = MagicMock()
        chat.send_message.return_value = SimpleNamespace(text="Ask for the signed policy.")
        handle = ConversationHandle(chat, system_instruction="inst")

        # Act
        reply = await handle.send("What evidence?")

        # Assert
        assert reply == "Ask for the signed policy."
        chat.send_message.assert_called_once_with("What evidence?")

    @pytest.mark.asyncio
    async def test_provider_error_should_become_upstream_error(self) -> None:
        # Arrange
        chat = MagicMock()
        chat.send_message.side_effect = httpx.ConnectError("connection reset")
        handle = ConversationHandle(chat, system_instruction="inst")

        # Act & Assert
        with pytest.raises(UpstreamError) as exc_info:
            await handle.send("hello")

        assert exc_info.value.message == "connection reset"
        assert exc_info.value.details["operation"] == "send"

    @pytest.mark.asyncio
    async def test_empty_reply_should_raise(self) -> None:
        chat = MagicMock()
        chat.send_message.return_value = SimpleNamespace(text=None)

        with pytest.raises(UpstreamError):
            await ConversationHandle(chat).send("hello")

    def test_cache_expiry(self) -> None:
        # Arrange
        expires = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        handle = ConversationHandle(
            MagicMock(), cache_name="cachedContents/a", cache_expires_at=expires
        )

        # Assert
        assert handle.is_cache_expired(expires - timedelta(seconds=1)) is False
        assert handle.is_cache_expired(expires) is True
        assert ConversationHandle(MagicMock(), system_instruction="x").is_cache_expired() is False


class TestGeminiClient:
    def test_conversation_with_cache_should_use_cached_content(
        self, gemini_client, mock_sdk
    ) -> None:
        # Arrange
        expires = datetime.now(timezone.utc) + timedelta(hours=1)

        # Act
        handle = gemini_client.create_conversation(
            system_instruction="ignored",
            cache_name="cachedContents/abc",
            cache_expires_at=expires,
        )

        # Assert
        kwargs = mock_sdk.chats.create.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["config"].cached_content == "cachedContents/abc"
        assert kwargs["config"].system_instruction is None
        assert handle.cache_name == "cachedContents/abc"
        assert handle.system_instruction is None
        assert handle.cache_expires_at == expires

    def test_conversation_without_cache_should_send_instruction_and_history(
        self, gemini_client, mock_sdk
    ) -> None:
        # Act
        handle = gemini_client.create_conversation(
            system_instruction="You are an auditor.",
            history=[HumanMessage(content="q1"), AIMessage(content="a1")],
        )

        # Assert
        kwargs = mock_sdk.chats.create.call_args.kwargs
        assert kwargs["config"].system_instruction == "You are an auditor."
        assert kwargs["config"].cached_content is None
        assert [content.role for content in kwargs["history"]] == ["user", "model"]
        assert handle.cache_name is None
        assert handle.cache_expires_at is None

    @pytest.mark.asyncio
    async def test_create_cache_should_return_handle(self, gemini_client, mock_sdk) -> None:
        # Arrange
        mock_sdk.caches.create.return_value = SimpleNamespace(
            name="cachedContents/xyz",
            expire_time=datetime(2026, 1, 1, 13, 0),
        )

        # Act
        handle = await gemini_client.create_cache("instruction", ttl_seconds=3600)

        # Assert
        assert handle.name == "cachedContents/xyz"
        assert handle.expires_at == datetime(2026, 1, 1, 13, 0, tzinfo=timezone.utc)
        config = mock_sdk.caches.create.call_args.kwargs["config"]
        assert config.ttl == "3600s"
        assert config.system_instruction == "instruction"

    @pytest.mark.asyncio
    async def test_create_cache_failure_should_raise_upstream_error(
        self, gemini_client, mock_sdk
    ) -> None:
        mock_sdk.caches.create.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(UpstreamError):
            await gemini_client.create_cache("instruction", ttl_seconds=60)

    @pytest.mark.asyncio
    async def test_generate_once_should_return_text(self, gemini_client) -> None:
        # Arrange
        gemini_client._analysis_model.ainvoke.return_value = AIMessage(content='{"questions": []}')

        # Act
        text = await gemini_client.generate_once("prompt")

        # Assert
        assert text == '{"questions": []}'

    @pytest.mark.asyncio
    async def test_generate_once_failure_should_raise_upstream_error(self, gemini_client) -> None:
        gemini_client._analysis_model.ainvoke.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(UpstreamError) as exc_info:
            await gemini_client.generate_once("prompt")

        assert "quota exceeded" in exc_info.value.message


class TestAnalysisModel:
    def test_analysis_model_should_not_retry(self) -> None:
        client = GeminiClient(api_key="test-key", client=MagicMock())

        assert client._analysis_model.max_retries == 0

    def test_settings_timeout_should_reach_analysis_model(self) -> None:
        # Arrange
        settings = GeminiSettings(api_key="test-key", request_timeout_seconds=15)

        # Act
        with patch("audit_assistant.boundary.gemini.client.genai.Client"), patch(
            "audit_assistant.boundary.gemini.client.ChatGoogleGenerativeAI"
        ) as chat_model_cls:
            get_gemini_client(settings)

        # Assert
        kwargs = chat_model_cls.call_args.kwargs
        assert kwargs["timeout"] == 15
        assert kwargs["max_retries"] == 0


class TestGetGeminiClient:
    def test_missing_key_should_raise_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            get_gemini_client(GeminiSettings(api_key=None))

        assert exc_info.value.details["setting"] == "GEMINI_API_KEY"
