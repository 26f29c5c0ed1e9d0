"""
Utility Clients Module

This module contains low-level clients for external services. These are
pure adapters that don't contain pipeline logic.

Clients:
- Search Client: opaque query -> result text backends (mock and callable)
"""

from .search_client import (
    SearchClient,
    MockSearchClient,
    CallableSearchClient,
)

__all__ = [
    "SearchClient",
    "MockSearchClient",
    "CallableSearchClient",
]
