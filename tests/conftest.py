"""
Shared fixtures: resolved test settings and invoker factories.
"""

import pytest

from ai import ModelInvoker, ScriptedBackend
from config import Settings
from tests.fakes import CHEAP_CONFIG, CREATIVE_CONFIG


@pytest.fixture
def test_settings():
    """Settings resolved without touching the environment."""
    return Settings(
        google_api_key="test-key",
        classifier_config=CHEAP_CONFIG,
        response_config=CREATIVE_CONFIG,
        search_mode="mock",
        langfuse_enabled=False,
    )


@pytest.fixture
def make_invoker():
    """Factory for invokers over a ScriptedBackend."""
    def factory(replies, config=CHEAP_CONFIG, stage="test"):
        backend = ScriptedBackend(replies=replies)
        return ModelInvoker(backend, config, stage=stage), backend
    return factory
