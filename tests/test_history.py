"""
Unit Tests for Conversation History
"""

import dataclasses

import pytest

from core import ConversationHistory, HistoryEntry


class TestConversationHistory:
    """Test ConversationHistory."""

    def test_empty(self):
        history = ConversationHistory()

        assert len(history) == 0
        assert history.turns() == []
        assert history.serialize() == ""

    def test_append_counts_units(self):
        history = ConversationHistory()

        entry = history.append("hello", "Hi!")
        history.append("how are you?", "Fine.")

        assert entry == HistoryEntry(user="hello", assistant="Hi!")
        assert len(history) == 2
        assert len(history.turns()) == 4

    def test_serialize_oldest_first(self):
        history = ConversationHistory()
        history.append("one", "1")
        history.append("two", "2")

        assert history.serialize() == "User: one\nAssistant: 1\nUser: two\nAssistant: 2"

    def test_entries_are_immutable_snapshot(self):
        history = ConversationHistory()
        history.append("hello", "Hi!")

        snapshot = history.entries
        history.append("again", "Hi again!")

        assert len(snapshot) == 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot[0].user = "changed"
