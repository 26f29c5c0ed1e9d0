"""
Tool Stages Module

Tool stages map a user message to externally fetched context text. Each
is keyed by the Intent that triggers it in the orchestrator's dispatch
table.

Adding a tool-bearing intent:
1. Add a member to core.router.Intent
2. Add a stage here with `name` and `execute(user_message) -> str`
3. Register it in get_tool_registry
"""

from typing import Dict, Optional

from core.router import Intent

from .search_tool import SearchTool


def get_tool_registry(search_tool: Optional[SearchTool] = None) -> Dict[Intent, SearchTool]:
    """
    Build the intent -> tool stage dispatch table.

    Intents without a stage (or whose stage is None) get no tool.

    Returns:
        Dictionary mapping Intent to tool stage
    """
    registry = {}

    if search_tool is not None:
        registry[Intent.SEARCH] = search_tool

    return registry


__all__ = [
    "SearchTool",
    "get_tool_registry",
]
