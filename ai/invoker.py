"""
Model Invoker

Wraps one generation backend and one GenerationConfig behind a uniform
call-and-parse interface. Each pipeline stage owns its own invoker, so a
stage always calls the backend with exactly the configuration it was built
with.
"""

import logging
import threading
import time
from typing import Any, Dict, Optional

from .errors import GenerationError, ParseError
from .exchange import StructuredExchange
from .llm_service import GenerationBackend, GenerationConfig

logger = logging.getLogger(__name__)


class ModelInvoker:
    """
    Render an exchange, call the backend, parse the reply.

    The lock guards the backend handle. It is held only for the duration
    of a single backend call; pass the same lock to invokers that share
    one connection.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        config: GenerationConfig,
        lock: Optional[threading.Lock] = None,
        langfuse: Optional[Any] = None,
        stage: str = "invoke",
    ):
        """
        Args:
            backend: Generation backend to call
            config: Frozen generation config bound to this stage
            lock: Mutual exclusion for a shared backend handle
            langfuse: Optional Langfuse client for generation tracing
            stage: Stage name used in logs, traces and errors
        """
        self.backend = backend
        self.config = config
        self.stage = stage
        self._lock = lock or threading.Lock()
        self._langfuse = langfuse

    def invoke(self, exchange: StructuredExchange, **inputs: str) -> Dict[str, str]:
        """
        Run one structured exchange.

        Args:
            exchange: The exchange to instantiate
            **inputs: Concrete values for the exchange's input fields

        Returns:
            Dict mapping each output field to its parsed value

        Raises:
            GenerationError: Backend failed or returned an empty response
            ParseError: Inputs don't fit the exchange, or the reply doesn't
                fit its declared outputs
        """
        prompt = exchange.render(**inputs)

        if self._langfuse is not None:
            with self._langfuse.start_as_current_generation(
                name=f"{self.stage}:{exchange.name}",
                model=self.config.model,
                input=prompt,
                model_parameters={
                    "temperature": self.config.temperature,
                    "max_output_tokens": self.config.max_output_tokens,
                },
            ) as generation:
                text = self._call_backend(exchange, prompt)
                generation.update(output=text)
        else:
            text = self._call_backend(exchange, prompt)

        try:
            return exchange.parse(text)
        except ParseError as e:
            e.stage = e.stage or self.stage
            logger.warning(f"⚠️  [{self.stage}] could not parse '{exchange.name}' reply: {e}")
            raise

    def _call_backend(self, exchange: StructuredExchange, prompt: str) -> str:
        start_time = time.time()

        try:
            with self._lock:
                text = self.backend.generate(
                    prompt,
                    self.config.model,
                    self.config.temperature,
                    **self.config.sampling_params(),
                )
        except Exception as e:
            logger.error(f"❌ [{self.stage}] backend call failed: {type(e).__name__}: {e}")
            raise GenerationError(
                f"Generation backend failed for '{exchange.name}'",
                details=str(e),
                stage=self.stage,
            ) from e

        if text is None or not text.strip():
            raise GenerationError(
                f"Empty response for '{exchange.name}'",
                stage=self.stage,
            )

        logger.debug(
            f"🤖 [{self.stage}] {exchange.name} via {self.config.model} "
            f"(T={self.config.temperature}) in {time.time() - start_time:.2f}s"
        )
        return text
