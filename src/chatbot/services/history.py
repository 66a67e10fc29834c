"""Per-user conversation memory for prompt construction.

Keeps the last few exchanges (user message + short assistant summary) for
each user. The store is created by whoever builds the interpreter and passed
in; nothing here is module-global.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

from chatbot.config import settings


@dataclass(frozen=True)
class ConversationExchange:
    user_message: str
    summary: str


class _UserHistory:
    """One user's bounded exchange log, guarded by its own lock."""

    def __init__(self, max_exchanges: int) -> None:
        self.lock = threading.Lock()
        self.exchanges: deque[ConversationExchange] = deque(maxlen=max_exchanges)


class ConversationHistoryStore:
    """Thread-safe map of user id to their most recent exchanges."""

    def __init__(self, max_exchanges: int | None = None) -> None:
        resolved = max_exchanges if max_exchanges is not None else settings.history_max_exchanges
        if resolved < 1:
            raise ValueError("max_exchanges must be at least 1")
        self.max_exchanges = resolved
        self._users: dict[str, _UserHistory] = {}
        self._lock = threading.Lock()

    def _bucket(self, user_id: str, create: bool) -> _UserHistory | None:
        with self._lock:
            bucket = self._users.get(user_id)
            if bucket is None and create:
                bucket = _UserHistory(self.max_exchanges)
                self._users[user_id] = bucket
            return bucket

    def append(self, user_id: str, user_message: str, summary: str) -> None:
        """Record an exchange; the oldest one is evicted once the bound is reached."""
        bucket = self._bucket(user_id, create=True)
        with bucket.lock:
            bucket.exchanges.append(ConversationExchange(user_message, summary))

    def get(self, user_id: str) -> list[ConversationExchange]:
        """Snapshot of a user's exchanges, oldest first."""
        bucket = self._bucket(user_id, create=False)
        if bucket is None:
            return []
        with bucket.lock:
            return list(bucket.exchanges)

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._users.pop(user_id, None)

    def to_context(self, user_id: str) -> str:
        """Render a user's history as prompt context; empty string when there is none."""
        exchanges = self.get(user_id)
        if not exchanges:
            return ""

        lines = ["Historique de conversation:"]
        for exchange in exchanges:
            lines.append(f"User: {exchange.user_message}")
            lines.append(f"Assistant: {exchange.summary}")
        return "\n".join(lines) + "\n"

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
