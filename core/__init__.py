"""
Core Pipeline Module

This module contains the turn pipeline of Routewise:
- Intent classification (router): decides whether a tool is needed
- Response generation: writes the final reply
- Orchestration: sequences router -> (tool) -> responder and owns history

Each stage is bound to its own ModelInvoker and generation config.
"""

from .router import (
    Intent,
    IntentRouter,
    parse_intent,
    get_intent_description,
)

from .history import (
    ConversationHistory,
    HistoryEntry,
)

from .responder import ResponseGenerator

from .orchestrator import (
    Orchestrator,
    TurnResult,
    TurnState,
    ToolStage,
)

__all__ = [
    # Router
    "Intent",
    "IntentRouter",
    "parse_intent",
    "get_intent_description",

    # History
    "ConversationHistory",
    "HistoryEntry",

    # Responder
    "ResponseGenerator",

    # Orchestrator
    "Orchestrator",
    "TurnResult",
    "TurnState",
    "ToolStage",
]
