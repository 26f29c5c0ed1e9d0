"""
Application settings and configuration values.

This module centralizes all configuration values including:
- API keys and credentials
- Per-stage model parameters
- Retry/timeout settings
- Langfuse observability keys
- Logging setup

Environment variables are loaded via python-dotenv. Module-level values are
defaults; load_settings() resolves everything once at process start into an
immutable Settings object that is passed explicitly into constructors.
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from ai.errors import ConfigurationError
from ai.llm_service import GenerationConfig

# Load environment variables from .env file
load_dotenv()

# ============================================================================
# LLM CONFIGURATION
# ============================================================================

# Response stage (overridable via GEMINI_MODEL)
DEFAULT_RESPONSE_MODEL = "gemini-2.5-flash"
RESPONSE_TEMPERATURE = 0.7

# Classification and query extraction (fixed, cheap tier)
CLASSIFIER_MODEL = "gemini-2.5-flash-lite"
CLASSIFIER_TEMPERATURE = 0.0
CLASSIFIER_MAX_TOKENS = 64

# Shared sampling parameters
MAX_TOKENS = 8192
TOP_P = 0.95
TOP_K = 40

# Retry and Timeout Settings (MAX_RETRIES counts attempts; 1 = no retry)
MAX_RETRIES = 1
RETRY_DELAY = 1.0  # seconds
TIMEOUT = 30.0  # seconds

# ============================================================================
# LANGFUSE OBSERVABILITY
# ============================================================================

LANGFUSE_HOST = "https://cloud.langfuse.com"

# ============================================================================
# APPLICATION SETTINGS
# ============================================================================

# "mock" returns canned results; "none" disables the search branch
SEARCH_MODES = ("mock", "none")
DEFAULT_SEARCH_MODE = "mock"

APP_TITLE = "Routewise 🧭"
APP_SUBTITLE = "Chat that looks things up when it needs to"

LOG_LEVEL = "INFO"


# ============================================================================
# RESOLVED SETTINGS
# ============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Immutable configuration resolved once at startup.

    Attributes:
        google_api_key: Gemini API credential
        classifier_config: Deterministic config for classification and extraction
        response_config: Creative config for response generation
        max_retries: Backend attempts per call
        retry_delay: Initial backoff delay (seconds)
        search_mode: Which search backend to build
        langfuse_public_key: Langfuse public key (optional)
        langfuse_secret_key: Langfuse secret key (optional)
        langfuse_host: Langfuse host URL
        langfuse_enabled: Whether tracing is on
        log_level: Logging level name
    """
    google_api_key: str
    classifier_config: GenerationConfig
    response_config: GenerationConfig
    max_retries: int = MAX_RETRIES
    retry_delay: float = RETRY_DELAY
    search_mode: str = DEFAULT_SEARCH_MODE
    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_host: str = LANGFUSE_HOST
    langfuse_enabled: bool = False
    log_level: str = LOG_LEVEL


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Resolve configuration from the environment.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        Frozen Settings

    Raises:
        ConfigurationError: If GOOGLE_API_KEY is missing or a value is invalid
    """
    env = os.environ if env is None else env

    api_key = env.get("GOOGLE_API_KEY")
    if not api_key:
        raise ConfigurationError(
            "GOOGLE_API_KEY not found in environment variables.",
            details="Please set it in your .env file.",
            stage="startup",
        )

    try:
        timeout = float(env.get("TIMEOUT", TIMEOUT))
        max_retries = int(env.get("MAX_RETRIES", MAX_RETRIES))
        retry_delay = float(env.get("RETRY_DELAY", RETRY_DELAY))
        max_tokens = int(env.get("MAX_TOKENS", MAX_TOKENS))
        top_p = float(env.get("TOP_P", TOP_P))
        top_k = int(env.get("TOP_K", TOP_K))
    except ValueError as e:
        raise ConfigurationError("Invalid numeric setting", details=str(e), stage="startup") from e

    search_mode = env.get("SEARCH_MODE", DEFAULT_SEARCH_MODE).lower()
    if search_mode not in SEARCH_MODES:
        raise ConfigurationError(
            f"Unknown SEARCH_MODE '{search_mode}'",
            details=f"Expected one of {list(SEARCH_MODES)}",
            stage="startup",
        )

    classifier_config = GenerationConfig(
        model=CLASSIFIER_MODEL,
        temperature=CLASSIFIER_TEMPERATURE,
        max_output_tokens=CLASSIFIER_MAX_TOKENS,
        top_p=top_p,
        top_k=top_k,
        timeout=timeout,
    )

    response_config = GenerationConfig(
        model=env.get("GEMINI_MODEL") or DEFAULT_RESPONSE_MODEL,
        temperature=RESPONSE_TEMPERATURE,
        max_output_tokens=max_tokens,
        top_p=top_p,
        top_k=top_k,
        timeout=timeout,
    )

    public_key = env.get("LANGFUSE_PUBLIC_KEY")
    secret_key = env.get("LANGFUSE_SECRET_KEY")
    langfuse_enabled = env.get("LANGFUSE_ENABLED", "true").lower() == "true"

    if langfuse_enabled and (not public_key or not secret_key):
        langfuse_enabled = False

    return Settings(
        google_api_key=api_key,
        classifier_config=classifier_config,
        response_config=response_config,
        max_retries=max_retries,
        retry_delay=retry_delay,
        search_mode=search_mode,
        langfuse_public_key=public_key,
        langfuse_secret_key=secret_key,
        langfuse_host=env.get("LANGFUSE_HOST", LANGFUSE_HOST),
        langfuse_enabled=langfuse_enabled,
        log_level=env.get("LOG_LEVEL", LOG_LEVEL).upper(),
    )


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for CLI and UI entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
