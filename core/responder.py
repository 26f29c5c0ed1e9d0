"""
Response Generator

Terminal pipeline stage: turns history, the user's message and optional
tool context into the final reply. Failures propagate to the caller.
"""

import logging

from ai import ModelInvoker
from config import RESPONSE_EXCHANGE

from .history import ConversationHistory

logger = logging.getLogger(__name__)


class ResponseGenerator:
    """Produces the assistant's reply with the creative generation config."""

    def __init__(self, invoker: ModelInvoker):
        self.invoker = invoker

    def respond(
        self,
        history: ConversationHistory,
        user_message: str,
        tool_context: str = "",
    ) -> str:
        """
        Generate the final reply.

        Args:
            history: Session history (read only)
            user_message: The user's current message
            tool_context: Tool output for this turn, or "" when no tool ran

        Returns:
            The reply text as returned by the model

        Raises:
            GenerationError: Backend failed or returned nothing
            ParseError: Reply did not fit the response exchange
        """
        result = self.invoker.invoke(
            RESPONSE_EXCHANGE,
            history=history.serialize(),
            user_message=user_message,
            tool_context=tool_context or "",
        )

        logger.debug(f"💬 Reply generated ({len(result['reply'])} chars)")
        return result["reply"]
