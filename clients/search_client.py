"""
Search Client

Opaque search backends: query text in, result text out. The pipeline is
indifferent to whether results are real or canned.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


DEFAULT_MOCK_RESULT = (
    "[mock search] No live search backend is configured. "
    "Results for '{query}' are unavailable; answer from general knowledge."
)


class SearchClient(ABC):
    """Contract for search backends."""

    @abstractmethod
    def search(self, query: str) -> str:
        """
        Run a search.

        Args:
            query: Compact search query

        Returns:
            Raw result text

        Raises:
            Exception: Any backend failure (the tool stage maps it to ToolError)
        """
        raise NotImplementedError


class MockSearchClient(SearchClient):
    """
    Canned search results for local runs, demos and tests.

    Every query is recorded in `queries`, so tests can count invocations.
    """

    def __init__(self, result_template: str = DEFAULT_MOCK_RESULT):
        self.result_template = result_template
        self.queries: List[str] = []

    def search(self, query: str) -> str:
        self.queries.append(query)
        logger.debug(f"🔎 Mock search #{len(self.queries)}: {query}")
        return self.result_template.format(query=query)


class CallableSearchClient(SearchClient):
    """Adapts any `str -> str` function into a SearchClient."""

    def __init__(self, func: Callable[[str], str], name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "search")

    def search(self, query: str) -> str:
        return self.func(query)
