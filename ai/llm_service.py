"""
LLM Service - Generation Backends

This service provides the opaque text-generation call used by every
pipeline stage:
- GenerationConfig: frozen per-stage model and sampling parameters
- GeminiBackend: Google Gemini API with safety settings, request timeout
  and optional retry with exponential backoff
- ScriptedBackend: canned replies for demos and tests
- Langfuse client construction for generation tracing

Stages never call a backend directly; they go through ai.invoker.ModelInvoker.
"""

import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import google.generativeai as genai
from google.generativeai.types import GenerationConfig as GeminiGenerationConfig
from google.generativeai.types import HarmCategory, HarmBlockThreshold
from langfuse import Langfuse

logger = logging.getLogger(__name__)


# ============================================================================
# SAFETY SETTINGS
# ============================================================================

SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}


# ============================================================================
# GENERATION CONFIGURATION
# ============================================================================

@dataclass(frozen=True)
class GenerationConfig:
    """
    Model identifier and sampling parameters bound to one pipeline stage.

    Attributes:
        model: Model identifier (e.g., "gemini-2.5-flash")
        temperature: Sampling temperature (0.0 - 2.0)
        max_output_tokens: Maximum tokens to generate
        top_p: Nucleus sampling parameter
        top_k: Top-k sampling parameter
        timeout: Request timeout in seconds (None = backend default)
    """
    model: str
    temperature: float
    max_output_tokens: int = 8192
    top_p: float = 0.95
    top_k: int = 40
    timeout: Optional[float] = None

    def sampling_params(self) -> Dict[str, Any]:
        """Per-call parameters beyond model and temperature."""
        return {
            "max_output_tokens": self.max_output_tokens,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "timeout": self.timeout,
        }


def get_generation_config(
    temperature: float,
    max_output_tokens: Optional[int] = None,
    top_p: Optional[float] = None,
    top_k: Optional[int] = None,
) -> GeminiGenerationConfig:
    """
    Create a Gemini generation configuration.

    Temperature is passed through as given, so 0.0 stays 0.0.
    """
    config_dict: Dict[str, Any] = {"temperature": temperature}

    if max_output_tokens is not None:
        config_dict["max_output_tokens"] = max_output_tokens
    if top_p is not None:
        config_dict["top_p"] = top_p
    if top_k is not None:
        config_dict["top_k"] = top_k

    return GeminiGenerationConfig(**config_dict)


# ============================================================================
# RETRY DECORATOR
# ============================================================================

def retry_on_error(max_retries: int = 1, delay: float = 1.0):
    """
    Decorator to retry function calls on transient errors.
    Implements exponential backoff.

    max_retries counts attempts, so 1 means a single attempt.

    Args:
        max_retries: Maximum number of attempts
        delay: Initial delay between retries (seconds)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            attempts = max(1, max_retries)
            current_delay = delay

            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)

                except Exception as e:
                    error_type = type(e).__name__
                    error_msg = str(e)

                    retryable = any([
                        "rate limit" in error_msg.lower(),
                        "quota" in error_msg.lower(),
                        "timeout" in error_msg.lower(),
                        "503" in error_msg,
                        "429" in error_msg,
                        "500" in error_msg,
                    ])

                    if not retryable or attempt >= attempts:
                        logger.error(f"❌ {func.__name__} failed: {error_type}: {error_msg}")
                        raise

                    logger.warning(
                        f"⚠️  {func.__name__} failed (attempt {attempt}/{attempts}): "
                        f"{error_type}. Retrying in {current_delay}s..."
                    )

                    time.sleep(current_delay)
                    current_delay *= 2

        return wrapper
    return decorator


# ============================================================================
# BACKENDS
# ============================================================================

class GenerationBackend(ABC):
    """
    Opaque text-generation endpoint.

    Implementations raise on transport or auth failure; the invoker turns
    any such exception into a GenerationError.
    """

    @abstractmethod
    def generate(
        self,
        prompt_text: str,
        model_id: str,
        temperature: float,
        **params: Any,
    ) -> str:
        """
        Generate text for a fully rendered prompt.

        Args:
            prompt_text: Rendered prompt
            model_id: Model identifier bound to the calling stage
            temperature: Sampling temperature bound to the calling stage
            **params: Other sampling parameters (max_output_tokens, top_p,
                top_k, timeout)

        Returns:
            Raw response text
        """
        raise NotImplementedError


class GeminiBackend(GenerationBackend):
    """Google Gemini API backend."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 1,
        retry_delay: float = 1.0,
    ):
        genai.configure(api_key=api_key)
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        logger.info("✅ Gemini backend configured")

    def generate(
        self,
        prompt_text: str,
        model_id: str,
        temperature: float,
        **params: Any,
    ) -> str:
        call = retry_on_error(self.max_retries, self.retry_delay)(self._generate_once)
        return call(prompt_text, model_id, temperature, **params)

    def _generate_once(
        self,
        prompt_text: str,
        model_id: str,
        temperature: float,
        max_output_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
        top_k: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> str:
        model = genai.GenerativeModel(
            model_name=model_id,
            generation_config=get_generation_config(
                temperature, max_output_tokens, top_p, top_k
            ),
            safety_settings=SAFETY_SETTINGS,
        )

        request_options = {"timeout": timeout} if timeout else None

        start_time = time.time()
        response = model.generate_content(prompt_text, request_options=request_options)
        latency = time.time() - start_time

        if not response.candidates:
            raise RuntimeError("No response candidates returned from Gemini API")

        text = response.text

        if hasattr(response, "usage_metadata"):
            usage = response.usage_metadata
            logger.debug(
                f"📊 Tokens: {usage.prompt_token_count} in, "
                f"{usage.candidates_token_count} out, "
                f"⏱️  {latency:.2f}s"
            )

        return text


@dataclass
class ScriptedBackend(GenerationBackend):
    """
    Backend returning canned replies, for demos and tests.

    `replies` is either a list consumed in order (the last reply repeats) or a
    callable receiving the prompt text. Every call is recorded in `calls`.
    """
    replies: Union[Sequence[str], Callable[[str], str]] = ("",)
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def generate(
        self,
        prompt_text: str,
        model_id: str,
        temperature: float,
        **params: Any,
    ) -> str:
        self.calls.append({
            "prompt": prompt_text,
            "model": model_id,
            "temperature": temperature,
            **params,
        })

        if callable(self.replies):
            return self.replies(prompt_text)

        index = min(len(self.calls), len(self.replies)) - 1
        return self.replies[index]


# ============================================================================
# OBSERVABILITY
# ============================================================================

def get_langfuse_client(
    public_key: Optional[str],
    secret_key: Optional[str],
    host: str,
    enabled: bool = True,
) -> Optional[Langfuse]:
    """
    Build a Langfuse client if tracing is enabled and keys are present.

    Returns:
        Langfuse client, or None when tracing is disabled
    """
    if not enabled or not public_key or not secret_key:
        logger.info("ℹ️  Langfuse observability disabled")
        return None

    client = Langfuse(public_key=public_key, secret_key=secret_key, host=host)
    logger.info("✅ Langfuse observability initialized")
    return client


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def health_check(backend: GenerationBackend, config: GenerationConfig) -> Dict[str, Any]:
    """
    Perform a health check on a backend with one stage configuration.

    Returns:
        Dict with service status information
    """
    status = {"backend": "unknown", "model": config.model}

    try:
        reply = backend.generate(
            "Say 'OK' if you can read this.", config.model, 0.0,
            timeout=config.timeout,
        )
        status["backend"] = "✅ healthy" if "ok" in reply.lower() else "⚠️  degraded"
    except Exception as e:
        status["backend"] = f"❌ error: {str(e)[:100]}"

    return status
