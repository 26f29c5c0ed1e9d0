"""
Chat Service - Main Coordinator

Builds the pipeline from resolved settings and manages sessions:
1. Wires backends, invokers and stages (one invoker per stage)
2. Keeps one Orchestrator, and so one history, per session id
3. Runs turns and converts failed turns into ChatResponse objects

This is the main entry point for the CLI and the Streamlit UI.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ai import (
    GeminiBackend,
    GenerationBackend,
    ModelInvoker,
    RoutewiseError,
    get_langfuse_client,
    health_check,
)
from clients import MockSearchClient, SearchClient
from config import Settings
from core import Intent, IntentRouter, Orchestrator, ResponseGenerator, TurnResult
from tools import SearchTool, get_tool_registry

logger = logging.getLogger(__name__)


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class ChatResponse:
    """
    Response from the chat service.

    Attributes:
        message: The response text to display to the user
        success: Whether the turn completed
        metadata: Intent, tools used, session id, error details
        turn: Full turn record (for debugging)
    """
    message: str
    success: bool
    metadata: Dict[str, Any] = field(default_factory=dict)
    turn: Optional[TurnResult] = None


@dataclass
class Pipeline:
    """The stages shared by every session of one ChatService."""
    router: IntentRouter
    responder: ResponseGenerator
    tools: Dict[Intent, SearchTool]
    backend: GenerationBackend


# ============================================================================
# PIPELINE CONSTRUCTION
# ============================================================================

def build_pipeline(
    settings: Settings,
    backend: Optional[GenerationBackend] = None,
    search_client: Optional[SearchClient] = None,
    langfuse: Optional[Any] = None,
) -> Pipeline:
    """
    Wire stages from settings.

    The router and the query extractor each get their own invoker on the
    classifier config; they share one lock because they share one backend
    tier. The responder gets its own invoker and lock on the response config.

    Args:
        settings: Resolved settings
        backend: Generation backend (defaults to Gemini)
        search_client: Search backend (defaults per settings.search_mode)
        langfuse: Optional Langfuse client

    Returns:
        Pipeline with router, responder and tool dispatch table
    """
    if backend is None:
        backend = GeminiBackend(
            api_key=settings.google_api_key,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay,
        )

    if search_client is None and settings.search_mode == "mock":
        search_client = MockSearchClient()

    cheap_lock = threading.Lock()

    router = IntentRouter(ModelInvoker(
        backend, settings.classifier_config, lock=cheap_lock, langfuse=langfuse, stage="classify",
    ))

    responder = ResponseGenerator(ModelInvoker(
        backend, settings.response_config, langfuse=langfuse, stage="respond",
    ))

    search_tool = None
    if search_client is not None:
        search_tool = SearchTool(
            ModelInvoker(
                backend, settings.classifier_config, lock=cheap_lock, langfuse=langfuse, stage="search",
            ),
            search_client,
        )

    return Pipeline(
        router=router,
        responder=responder,
        tools=get_tool_registry(search_tool),
        backend=backend,
    )


# ============================================================================
# CHAT SERVICE
# ============================================================================

class ChatService:
    """
    Main chat service coordinator.

    Stages are built once and shared; each session gets its own
    Orchestrator and therefore its own history.
    """

    def __init__(
        self,
        settings: Settings,
        backend: Optional[GenerationBackend] = None,
        search_client: Optional[SearchClient] = None,
    ):
        """
        Args:
            settings: Resolved settings (see config.load_settings)
            backend: Override the generation backend
            search_client: Override the search backend
        """
        self.settings = settings
        self.langfuse = get_langfuse_client(
            settings.langfuse_public_key,
            settings.langfuse_secret_key,
            settings.langfuse_host,
            enabled=settings.langfuse_enabled,
        )
        self.pipeline = build_pipeline(settings, backend, search_client, self.langfuse)
        self.sessions: Dict[str, Orchestrator] = {}
        self._sessions_lock = threading.Lock()
        logger.info(
            f"✅ ChatService initialized (tools: "
            f"{[intent.value for intent in self.pipeline.tools] or 'none'})"
        )

    def get_session(self, session_id: str) -> Orchestrator:
        """Return the session's orchestrator, creating it on first use."""
        with self._sessions_lock:
            if session_id not in self.sessions:
                self.sessions[session_id] = Orchestrator(
                    router=self.pipeline.router,
                    responder=self.pipeline.responder,
                    tools=self.pipeline.tools,
                )
            return self.sessions[session_id]

    def reset_session(self, session_id: str) -> None:
        """Drop a session and its history."""
        with self._sessions_lock:
            self.sessions.pop(session_id, None)

    def get_history(self, session_id: str) -> List[Dict[str, str]]:
        """Session history as role/content dicts, oldest first."""
        orchestrator = self.sessions.get(session_id)
        if orchestrator is None:
            return []
        return [
            {"role": role, "content": text}
            for role, text in orchestrator.history.turns()
        ]

    def process_message(
        self,
        user_message: str,
        session_id: Optional[str] = None,
    ) -> ChatResponse:
        """
        Process a user message and generate a response.

        Args:
            user_message: The user's input text
            session_id: Session identifier (a new one is generated if omitted)

        Returns:
            ChatResponse with the reply and metadata. success is False when
            the response stage failed; the session's history is unchanged.
        """
        if not session_id:
            session_id = str(uuid.uuid4())

        logger.info(f"💬 Processing message (session: {session_id}): {user_message[:50]}...")

        orchestrator = self.get_session(session_id)

        try:
            turn = orchestrator.run(user_message)
        except RoutewiseError as e:
            logger.error(f"❌ Turn failed: {e}")
            return ChatResponse(
                message=self._get_error_message(),
                success=False,
                metadata={"error": e.to_dict(), "session_id": session_id},
            )

        return ChatResponse(
            message=turn.reply,
            success=True,
            metadata={**turn.get_summary(), "session_id": session_id},
            turn=turn,
        )

    def get_status(self) -> Dict[str, Any]:
        """Backend health for the response stage, plus routing setup."""
        status = health_check(self.pipeline.backend, self.settings.response_config)
        status["search"] = self.settings.search_mode
        return status

    def close(self) -> None:
        """Flush pending traces."""
        if self.langfuse is not None:
            self.langfuse.flush()

    def _get_error_message(self) -> str:
        """Get a friendly error message."""
        return (
            "I'm having trouble generating a reply right now. "
            "This could be a temporary issue; please try sending your message again."
        )


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def process_user_message(
    user_message: str,
    settings: Settings,
    **kwargs
) -> ChatResponse:
    """
    Single-shot convenience: build a service, run one turn, flush traces.

    Args:
        user_message: The user's message
        settings: Resolved settings
        **kwargs: Passed to ChatService (backend, search_client)

    Returns:
        ChatResponse
    """
    service = ChatService(settings, **kwargs)
    try:
        return service.process_message(user_message=user_message)
    finally:
        service.close()
