"""
Configuration module for Routewise.

This module provides centralized configuration management including:
- Application settings (models, API keys, retries, tracing)
- Prompt templates and structured exchanges

All configurable values should be imported from this module to ensure
consistency across the application.
"""

from .settings import (
    # LLM Settings
    DEFAULT_RESPONSE_MODEL,
    RESPONSE_TEMPERATURE,
    CLASSIFIER_MODEL,
    CLASSIFIER_TEMPERATURE,
    MAX_RETRIES,
    TIMEOUT,

    # Application Settings
    SEARCH_MODES,
    APP_TITLE,
    APP_SUBTITLE,

    # Resolution
    Settings,
    load_settings,
    setup_logging,
)

from .prompts import (
    SYSTEM_PROMPT,
    ROUTER_PROMPT,
    QUERY_EXTRACTION_PROMPT,
    RESPONSE_PROMPT,
    QUERY_EXCHANGE,
    RESPONSE_EXCHANGE,
    build_intent_exchange,
)

__all__ = [
    # Settings
    "DEFAULT_RESPONSE_MODEL",
    "RESPONSE_TEMPERATURE",
    "CLASSIFIER_MODEL",
    "CLASSIFIER_TEMPERATURE",
    "MAX_RETRIES",
    "TIMEOUT",
    "SEARCH_MODES",
    "APP_TITLE",
    "APP_SUBTITLE",
    "Settings",
    "load_settings",
    "setup_logging",

    # Prompts
    "SYSTEM_PROMPT",
    "ROUTER_PROMPT",
    "QUERY_EXTRACTION_PROMPT",
    "RESPONSE_PROMPT",
    "QUERY_EXCHANGE",
    "RESPONSE_EXCHANGE",
    "build_intent_exchange",
]
