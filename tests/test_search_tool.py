"""
Unit Tests for the Search Tool Stage

Tests query extraction, search pass-through and ToolError mapping.
"""

import pytest
from unittest.mock import Mock

from ai import ModelInvoker, ToolError
from clients import CallableSearchClient, MockSearchClient
from tools import SearchTool, get_tool_registry
from core.router import Intent
from tests.fakes import CHEAP_CONFIG


class TestSearchTool:
    """Test SearchTool.execute."""

    def test_execute_passes_results_verbatim(self, make_invoker):
        """Results come back exactly as the backend returned them."""
        invoker, _ = make_invoker(["  president United States  "])
        raw = "1. Result one\n2. Result two\n"
        client = CallableSearchClient(lambda query: raw)

        result = SearchTool(invoker, client).execute("who is the president?")

        assert result == raw

    def test_execute_searches_extracted_query(self, make_invoker):
        """The backend receives the stripped extracted query, once."""
        invoker, backend = make_invoker(["president United States"])
        client = MockSearchClient()

        SearchTool(invoker, client).execute("who is the president?")

        assert client.queries == ["president United States"]
        assert "who is the president?" in backend.calls[0]["prompt"]

    def test_every_call_searches_again(self, make_invoker):
        """Results are never cached between turns."""
        invoker, _ = make_invoker(["same query"])
        client = MockSearchClient()
        tool = SearchTool(invoker, client)

        tool.execute("q")
        tool.execute("q")

        assert len(client.queries) == 2

    def test_empty_query_raises_tool_error(self, make_invoker):
        """An extraction that yields only whitespace is a ToolError; no search runs."""
        invoker, _ = make_invoker(["[[ ## query ## ]]\n   \n[[ ## completed ## ]]"])
        client = MockSearchClient()

        with pytest.raises(ToolError):
            SearchTool(invoker, client).execute("hmm")

        assert client.queries == []

    def test_extraction_failure_raises_tool_error(self):
        """Backend failure during extraction is wrapped as ToolError."""
        backend = Mock()
        backend.generate.side_effect = RuntimeError("503")
        tool = SearchTool(ModelInvoker(backend, CHEAP_CONFIG), MockSearchClient())

        with pytest.raises(ToolError) as exc_info:
            tool.execute("who won?")

        assert exc_info.value.stage == "search"

    def test_search_backend_failure_raises_tool_error(self, make_invoker):
        """Search backend exceptions are wrapped as ToolError."""
        invoker, _ = make_invoker(["query"])

        def broken(query):
            raise IOError("search down")

        with pytest.raises(ToolError) as exc_info:
            SearchTool(invoker, CallableSearchClient(broken)).execute("q")

        assert "search down" in str(exc_info.value)


class TestToolRegistry:
    """Test get_tool_registry."""

    def test_registry_keys_search_intent(self, make_invoker):
        tool = SearchTool(make_invoker(["q"])[0], MockSearchClient())

        registry = get_tool_registry(tool)

        assert registry == {Intent.SEARCH: tool}
        assert Intent.CHAT not in registry

    def test_registry_without_search(self):
        assert get_tool_registry(None) == {}
