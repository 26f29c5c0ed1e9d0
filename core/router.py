"""
Intent Classification Router

Classifies each user message into a closed Intent label using a
deterministic, cheap-tier model invocation. The orchestrator uses the
label to pick a branch from its dispatch table.

Intent types:
- chat: Answer directly, no tool
- search: Look something up before answering
"""

import logging
from enum import Enum

from ai import ClassificationError, ModelInvoker, ParseError
from config import build_intent_exchange

logger = logging.getLogger(__name__)


# ============================================================================
# INTENT TYPES
# ============================================================================

class Intent(Enum):
    """Closed enumeration of user intents. Values are the model-facing labels."""

    CHAT = "chat"
    SEARCH = "search"


INTENT_EXCHANGE = build_intent_exchange([intent.value for intent in Intent])


# ============================================================================
# ROUTER
# ============================================================================

class IntentRouter:
    """Maps a raw user message to an Intent."""

    def __init__(self, invoker: ModelInvoker):
        self.invoker = invoker

    def classify(self, user_message: str) -> Intent:
        """
        Classify the user's intent.

        Args:
            user_message: The user's current message

        Returns:
            The classified Intent

        Raises:
            ClassificationError: The label is outside the Intent enumeration
            GenerationError: The backend call failed

        Example:
            >>> router.classify("who is the president?")
            <Intent.SEARCH: 'search'>
        """
        try:
            result = self.invoker.invoke(INTENT_EXCHANGE, user_message=user_message)
        except ClassificationError:
            raise
        except ParseError as e:
            raise ClassificationError(
                "Unrecognized intent label",
                details=e.details,
                stage="classify",
            ) from e

        intent = parse_intent(result["intent"])
        logger.info(f"🧭 Intent classified: {intent.value}")
        return intent


def parse_intent(label: str) -> Intent:
    """
    Map a label to an Intent by exact, case-sensitive match.

    Surrounding whitespace is ignored.

    Raises:
        ClassificationError: If the label is not a known Intent value
    """
    try:
        return Intent(label.strip())
    except ValueError:
        logger.warning(f"Unknown intent returned: {label!r}")
        raise ClassificationError(
            "Unrecognized intent label",
            details=label[:100],
            stage="classify",
        ) from None


def get_intent_description(intent: Intent) -> str:
    """Human-readable description of an intent, for UI metadata."""
    descriptions = {
        Intent.CHAT: "Having a conversation",
        Intent.SEARCH: "Looking up information before answering",
    }
    return descriptions.get(intent, "Processing your message")
