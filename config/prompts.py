"""
Prompt templates and structured exchanges for Routewise.

This module contains:
- The assistant's system persona
- The three structured exchanges driving the pipeline:
  intent classification, search query extraction, response generation

All prompts should be maintained here (not hardcoded in stages).
"""

from typing import Sequence

from ai.exchange import ExchangeField, StructuredExchange

# ============================================================================
# SYSTEM PROMPT
# ============================================================================

SYSTEM_PROMPT = """You are Routewise, a helpful, concise conversational assistant.

Guidelines:
- Answer in the language of the user's message
- When search results are provided, ground your answer in them and say so
- When search results are missing or irrelevant, answer from general knowledge and be clear about uncertainty
- Never invent sources or quote results that were not provided
- Keep a friendly, conversational tone"""

# ============================================================================
# INTENT CLASSIFICATION
# ============================================================================

ROUTER_PROMPT = """Classify the user's message into exactly ONE intent label.

**Intent labels:**

- **chat** - Greetings, small talk, opinions, creative writing, or questions answerable without fresh facts
  Examples:
  - "hello there!"
  - "tell me a joke"
  - "how do I reverse a list in Python?"

- **search** - Questions about current events, specific people, places, prices, or facts that need looking up
  Examples:
  - "who is the president?"
  - "what's the weather in Lisbon today?"
  - "latest release of numpy"

Respond with ONLY the label, lowercase, no explanation."""

INTENT_MESSAGE_FIELD = ExchangeField("user_message", "The raw message from the user")


def build_intent_exchange(labels: Sequence[str]) -> StructuredExchange:
    """
    Build the intent-classification exchange for a closed set of labels.

    Args:
        labels: Allowed intent labels, in display order

    Returns:
        StructuredExchange with one input (user_message) and one output (intent)
    """
    return StructuredExchange(
        name="classify_intent",
        instruction=ROUTER_PROMPT,
        inputs=(INTENT_MESSAGE_FIELD,),
        outputs=(
            ExchangeField(
                "intent",
                "The intent label for the message",
                choices=tuple(labels),
            ),
        ),
    )

# ============================================================================
# QUERY EXTRACTION
# ============================================================================

QUERY_EXTRACTION_PROMPT = """Turn the user's message into a short web search query.

Rules:
- Keep only the words a search engine needs (names, places, dates, key terms)
- No quotes, no operators, no explanation
- At most 10 words"""

QUERY_EXCHANGE = StructuredExchange(
    name="extract_query",
    instruction=QUERY_EXTRACTION_PROMPT,
    inputs=(ExchangeField("user_message", "The raw message from the user"),),
    outputs=(ExchangeField("query", "A compact search query"),),
)

# ============================================================================
# RESPONSE GENERATION
# ============================================================================

RESPONSE_PROMPT = SYSTEM_PROMPT + """

Write the assistant's next reply to the user.
Use the conversation history for context. If `tool_context` is not empty it
contains search results gathered for this message; use them."""

RESPONSE_EXCHANGE = StructuredExchange(
    name="generate_response",
    instruction=RESPONSE_PROMPT,
    inputs=(
        ExchangeField("history", "Earlier turns of this conversation, oldest first (may be empty)"),
        ExchangeField("user_message", "The user's latest message"),
        ExchangeField("tool_context", "Search results for this message (may be empty)"),
    ),
    outputs=(ExchangeField("reply", "The assistant's reply to the user"),),
)

