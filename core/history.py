"""
Conversation History

Append-only record of one session's exchanges. Each entry is one unit:
the user's message and the assistant's reply to it.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass(frozen=True)
class HistoryEntry:
    """One recorded exchange: a user turn and the assistant turn answering it."""
    user: str
    assistant: str


class ConversationHistory:
    """
    Ordered, append-only sequence of HistoryEntry units.

    len() counts exchange units, not individual turns.
    """

    def __init__(self):
        self._entries: List[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def append(self, user_message: str, reply: str) -> HistoryEntry:
        """Record one completed exchange."""
        entry = HistoryEntry(user=user_message, assistant=reply)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def turns(self) -> List[Tuple[str, str]]:
        """Flatten to (role, text) turns in submission order."""
        result = []
        for entry in self._entries:
            result.append((USER_ROLE, entry.user))
            result.append((ASSISTANT_ROLE, entry.assistant))
        return result

    def serialize(self) -> str:
        """Render history as prompt text, oldest first. Empty history renders as ''."""
        return "\n".join(
            f"{'User' if role == USER_ROLE else 'Assistant'}: {text}"
            for role, text in self.turns()
        )
