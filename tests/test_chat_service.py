"""
Unit Tests for Chat Service

Tests pipeline wiring, session isolation and failed-turn reporting.
"""

import dataclasses
import os

import pytest
from unittest.mock import Mock, patch

from clients import MockSearchClient
from core import Intent, get_intent_description
from services.chat_service import ChatService, build_pipeline, process_user_message
from tests.fakes import prompts_for, scripted_pipeline_backend


class TestChatService:
    """Test ChatService class."""

    @pytest.fixture
    def backend(self):
        return scripted_pipeline_backend(intent="chat", reply="Hi!")

    @pytest.fixture
    def chat_service(self, test_settings, backend):
        """Fixture providing a ChatService over a scripted backend."""
        return ChatService(test_settings, backend=backend)

    def test_process_message_success(self, chat_service):
        """Test successful message processing."""
        response = chat_service.process_message(
            user_message="hello",
            session_id="test_session_123",
        )

        assert response.success is True
        assert response.message == "Hi!"
        assert response.metadata["session_id"] == "test_session_123"
        assert response.metadata["intent"] == "chat"
        assert response.metadata["tools_used"] == []

    def test_generates_session_id(self, chat_service):
        response = chat_service.process_message(user_message="hello")

        assert response.metadata["session_id"]
        assert response.metadata["session_id"] in chat_service.sessions

    def test_sessions_have_separate_history(self, chat_service, backend):
        """Turns in one session never appear in another."""
        chat_service.process_message("I'm Alice", session_id="a")
        chat_service.process_message("I'm Bob", session_id="b")
        chat_service.process_message("who am I?", session_id="a")

        assert len(chat_service.get_session("a").history) == 2
        assert len(chat_service.get_session("b").history) == 1
        last_prompt = prompts_for(backend, "reply")[-1]
        assert "I'm Alice" in last_prompt
        assert "I'm Bob" not in last_prompt

    def test_get_history(self, chat_service):
        chat_service.process_message("hello", session_id="s")

        assert chat_service.get_history("s") == [
            {"role": "user", "content": "hello"},
            {"role": "assistant", "content": "Hi!"},
        ]
        assert chat_service.get_history("unknown") == []

    def test_reset_session(self, chat_service):
        chat_service.process_message("hello", session_id="s")

        chat_service.reset_session("s")

        assert chat_service.get_history("s") == []

    def test_process_message_error_handling(self, test_settings):
        """Response-stage failures become unsuccessful responses."""
        backend = scripted_pipeline_backend(reply=RuntimeError("503 unavailable"))
        chat_service = ChatService(test_settings, backend=backend)

        response = chat_service.process_message(user_message="hello", session_id="s")

        assert response.success is False
        assert response.metadata["error"]["type"] == "GenerationError"
        assert response.metadata["error"]["stage"] == "respond"
        assert chat_service.get_history("s") == []

    def test_search_turn_reports_tool(self, test_settings):
        backend = scripted_pipeline_backend(intent="search", reply="It's X.")
        search = MockSearchClient()
        chat_service = ChatService(test_settings, backend=backend, search_client=search)

        response = chat_service.process_message("who is the president?")

        assert response.metadata["tools_used"] == ["search"]
        assert len(search.queries) == 1
        assert response.turn.tool_context

    def test_metadata_describes_intent(self, chat_service):
        response = chat_service.process_message("hello")

        assert response.metadata["intent_description"] == get_intent_description(Intent.CHAT)

    def test_get_status_checks_response_backend(self, test_settings):
        backend = scripted_pipeline_backend(reply="OK")
        chat_service = ChatService(test_settings, backend=backend)

        status = chat_service.get_status()

        assert status["backend"].endswith("healthy")
        assert status["model"] == test_settings.response_config.model
        assert status["search"] == "mock"

    def test_close_flushes_langfuse(self, chat_service):
        chat_service.langfuse = Mock()

        chat_service.close()

        chat_service.langfuse.flush.assert_called_once()


class TestBuildPipeline:
    """Test build_pipeline wiring."""

    def test_stages_bound_to_their_configs(self, test_settings):
        pipeline = build_pipeline(test_settings, backend=scripted_pipeline_backend())

        search_tool = pipeline.tools[Intent.SEARCH]
        assert pipeline.router.invoker.config is test_settings.classifier_config
        assert search_tool.invoker.config is test_settings.classifier_config
        assert pipeline.responder.invoker.config is test_settings.response_config
        assert pipeline.router.invoker is not search_tool.invoker

    def test_cheap_tier_shares_lock(self, test_settings):
        pipeline = build_pipeline(test_settings, backend=scripted_pipeline_backend())

        search_tool = pipeline.tools[Intent.SEARCH]
        assert pipeline.router.invoker._lock is search_tool.invoker._lock
        assert pipeline.responder.invoker._lock is not pipeline.router.invoker._lock

    def test_search_disabled(self, test_settings):
        settings = dataclasses.replace(test_settings, search_mode="none")

        pipeline = build_pipeline(settings, backend=scripted_pipeline_backend())

        assert pipeline.tools == {}

    @patch("services.chat_service.GeminiBackend")
    def test_default_backend_is_gemini(self, mock_gemini, test_settings):
        build_pipeline(test_settings)

        mock_gemini.assert_called_once_with(
            api_key="test-key",
            max_retries=test_settings.max_retries,
            retry_delay=test_settings.retry_delay,
        )


class TestProcessUserMessage:
    """Test convenience function."""

    @patch("services.chat_service.ChatService")
    def test_process_user_message_convenience(self, mock_service_class, test_settings):
        """Test the single-shot wrapper."""
        mock_service = Mock()
        mock_service.process_message.return_value = Mock(success=True, message="Response")
        mock_service_class.return_value = mock_service

        response = process_user_message(user_message="Hello", settings=test_settings)

        mock_service_class.assert_called_once_with(test_settings)
        mock_service.process_message.assert_called_once_with(user_message="Hello")
        mock_service.close.assert_called_once()
        assert response.message == "Response"


# ============================================================================
# INTEGRATION TESTS
# ============================================================================

@pytest.mark.integration
@pytest.mark.skipif(not os.getenv("GOOGLE_API_KEY"), reason="GOOGLE_API_KEY not set")
class TestChatServiceIntegration:
    """Integration tests against the live Gemini API."""

    def test_simple_greeting_flow(self):
        """A greeting is answered without searching."""
        from config import load_settings

        search = MockSearchClient()
        chat_service = ChatService(load_settings(), search_client=search)

        response = chat_service.process_message(user_message="Hello", session_id="integration_test")

        assert response.success is True
        assert len(response.message) > 0
        assert search.queries == []
