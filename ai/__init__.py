"""
AI Infrastructure Module

This module provides the LLM infrastructure for Routewise:
- Structured exchanges (prompt contracts) and their rendering/parsing
- Generation backends (Gemini, scripted) and per-stage GenerationConfig
- The Model Invoker used by every pipeline stage
- The error taxonomy shared by all stages

All LLM calls should go through ModelInvoker to ensure consistent
configuration isolation, error mapping and tracing.
"""

from .errors import (
    RoutewiseError,
    GenerationError,
    ParseError,
    ClassificationError,
    ToolError,
    ConfigurationError,
)

from .exchange import (
    ExchangeField,
    StructuredExchange,
)

from .llm_service import (
    GenerationConfig,
    GenerationBackend,
    GeminiBackend,
    ScriptedBackend,
    get_langfuse_client,
    health_check,
)

from .invoker import ModelInvoker

__all__ = [
    # Errors
    "RoutewiseError",
    "GenerationError",
    "ParseError",
    "ClassificationError",
    "ToolError",
    "ConfigurationError",

    # Exchanges
    "ExchangeField",
    "StructuredExchange",

    # Backends
    "GenerationConfig",
    "GenerationBackend",
    "GeminiBackend",
    "ScriptedBackend",
    "get_langfuse_client",
    "health_check",

    # Invoker
    "ModelInvoker",
]
