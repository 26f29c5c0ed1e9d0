"""
Orchestrator - Classify, Act, Respond

Implements the single-hop turn pipeline:
1. Classify: Ask the router for the message's intent
2. Act: If the intent has a tool stage, run it to gather context
3. Respond: Generate the reply from history, message and tool context

Classification and tool failures degrade to a chat-only reply. Response
failures are surfaced to the caller and leave history untouched.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol

from ai import GenerationError, ParseError, ToolError

from .history import ConversationHistory
from .responder import ResponseGenerator
from .router import Intent, IntentRouter, get_intent_description

logger = logging.getLogger(__name__)


# ============================================================================
# DATA STRUCTURES
# ============================================================================

class TurnState(Enum):
    """Orchestrator state within a turn."""
    IDLE = "idle"
    CLASSIFYING = "classifying"
    TOOL_EXECUTING = "tool_executing"
    RESPONDING = "responding"


class ToolStage(Protocol):
    """Anything that maps a user message to context text."""

    name: str

    def execute(self, user_message: str) -> str:
        ...


@dataclass
class TurnResult:
    """
    Record of one processed turn.

    Attributes:
        message: The user's message
        reply: Final reply (None if the turn failed)
        intent: Classified intent (None if classification fell back)
        tool_context: Context passed to the responder ("" when no tool ran)
        tools_used: Names of tool stages that produced context
        fallback_reason: Why the turn degraded to chat-only, if it did
        states: States visited, in order
        execution_time: Wall time for the turn (seconds)
    """
    message: str
    reply: Optional[str] = None
    intent: Optional[Intent] = None
    tool_context: str = ""
    tools_used: List[str] = field(default_factory=list)
    fallback_reason: Optional[str] = None
    states: List[TurnState] = field(default_factory=list)
    start_time: float = field(default_factory=time.time)
    execution_time: float = 0.0

    def get_summary(self) -> Dict[str, object]:
        """Summary for logs and UI metadata."""
        return {
            "intent": self.intent.value if self.intent else "unknown",
            "intent_description": get_intent_description(self.intent or Intent.CHAT),
            "tools_used": list(self.tools_used),
            "fallback": self.fallback_reason,
            "execution_time": self.execution_time,
        }


# ============================================================================
# ORCHESTRATOR
# ============================================================================

class Orchestrator:
    """
    One conversation session.

    Owns the session's ConversationHistory and references to every stage.
    Turns on one session are processed one at a time.
    """

    def __init__(
        self,
        router: IntentRouter,
        responder: ResponseGenerator,
        tools: Optional[Dict[Intent, ToolStage]] = None,
        history: Optional[ConversationHistory] = None,
    ):
        """
        Args:
            router: Intent router (deterministic config)
            responder: Response generator (creative config)
            tools: Dispatch table from Intent to tool stage
            history: Existing history to continue (defaults to empty)
        """
        self.router = router
        self.responder = responder
        self.tools: Dict[Intent, ToolStage] = dict(tools or {})
        self.history = history if history is not None else ConversationHistory()
        self._state = TurnState.IDLE
        self._turn_lock = threading.Lock()

    @property
    def state(self) -> TurnState:
        return self._state

    def _enter(self, state: TurnState, turn: TurnResult) -> None:
        self._state = state
        turn.states.append(state)

    def run(self, user_message: str) -> TurnResult:
        """
        Process one user message.

        Args:
            user_message: The user's input

        Returns:
            TurnResult with the reply and routing details

        Raises:
            GenerationError: The response stage failed (history unchanged)
            ParseError: The response stage reply was malformed (history unchanged)
        """
        with self._turn_lock:
            turn = TurnResult(message=user_message)

            try:
                self._enter(TurnState.CLASSIFYING, turn)
                tool = self._select_tool(user_message, turn)

                if tool is not None:
                    self._enter(TurnState.TOOL_EXECUTING, turn)
                    turn.tool_context = self._execute_tool(tool, user_message, turn)

                self._enter(TurnState.RESPONDING, turn)
                try:
                    reply = self.responder.respond(self.history, user_message, turn.tool_context)
                except (GenerationError, ParseError) as e:
                    logger.error(f"❌ Response generation failed, turn not recorded: {e}")
                    raise

                self.history.append(user_message, reply)
                turn.reply = reply

                logger.info(
                    f"✅ Turn completed ({turn.intent.value if turn.intent else 'fallback'}, "
                    f"{len(turn.tools_used)} tool calls, history={len(self.history)})"
                )
                return turn

            finally:
                self._state = TurnState.IDLE
                turn.execution_time = time.time() - turn.start_time

    def handle(self, user_message: str) -> str:
        """Process one user message and return only the reply."""
        return self.run(user_message).reply

    def _select_tool(self, user_message: str, turn: TurnResult) -> Optional[ToolStage]:
        """Classify and look up the tool stage; None means respond directly."""
        try:
            turn.intent = self.router.classify(user_message)
        except (GenerationError, ParseError) as e:
            logger.warning(f"⚠️  Classification failed, falling back to chat: {e}")
            turn.fallback_reason = f"classification: {e}"
            return None

        logger.info(f"🎯 Intent: {turn.intent.value}")
        return self.tools.get(turn.intent)

    def _execute_tool(self, tool: ToolStage, user_message: str, turn: TurnResult) -> str:
        """Run a tool stage; failures yield empty context."""
        logger.info(f"🔧 Calling tool: {tool.name}")

        try:
            context = tool.execute(user_message)
        except ToolError as e:
            logger.warning(f"⚠️  Tool {tool.name} failed, continuing without context: {e}")
            turn.fallback_reason = f"tool: {e}"
            return ""

        turn.tools_used.append(tool.name)
        return context
