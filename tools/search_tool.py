"""
Search Tool Stage

Turns a user message into search context in two steps:
1. Extract a compact query with the cheap, deterministic model config
2. Run the query against the search backend and pass results through verbatim
"""

import logging
import time

from ai import GenerationError, ModelInvoker, ParseError, ToolError
from clients import SearchClient
from config import QUERY_EXCHANGE

logger = logging.getLogger(__name__)


class SearchTool:
    """Tool stage for the search intent."""

    name = "search"

    def __init__(self, invoker: ModelInvoker, search_client: SearchClient):
        """
        Args:
            invoker: Cheap-tier invoker used for query extraction
            search_client: Opaque search backend
        """
        self.invoker = invoker
        self.search_client = search_client

    def extract_query(self, user_message: str) -> str:
        """
        Extract a compact search query from the user's message.

        Raises:
            ToolError: If extraction fails or yields an empty query
        """
        try:
            result = self.invoker.invoke(QUERY_EXCHANGE, user_message=user_message)
        except (GenerationError, ParseError) as e:
            raise ToolError("Query extraction failed", details=str(e), stage=self.name) from e

        query = result["query"].strip()
        if not query:
            raise ToolError("Query extraction yielded an empty query", stage=self.name)

        return query

    def execute(self, user_message: str) -> str:
        """
        Run the full search stage for one message.

        Args:
            user_message: The user's current message

        Returns:
            Search result text, unmodified

        Raises:
            ToolError: Extraction or search failed
        """
        query = self.extract_query(user_message)
        logger.info(f"🔎 Searching: {query}")

        start_time = time.time()
        try:
            results = self.search_client.search(query)
        except Exception as e:
            logger.error(f"❌ Search backend failed: {e}", exc_info=True)
            raise ToolError("Search backend failed", details=str(e), stage=self.name) from e

        logger.info(f"✅ Search returned {len(results or '')} chars in {time.time() - start_time:.2f}s")
        return results
