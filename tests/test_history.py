import threading

import pytest

from chatbot.services.history import ConversationExchange, ConversationHistoryStore


class TestConversationHistoryStore:
    def setup_method(self):
        self.store = ConversationHistoryStore(max_exchanges=3)

    def test_empty_history(self):
        assert self.store.get("u1") == []
        assert self.store.to_context("u1") == ""

    def test_append_keeps_order(self):
        self.store.append("u1", "first", "s1")
        self.store.append("u1", "second", "s2")
        assert self.store.get("u1") == [
            ConversationExchange("first", "s1"),
            ConversationExchange("second", "s2"),
        ]

    def test_oldest_exchange_is_evicted(self):
        for index in range(5):
            self.store.append("u1", f"m{index}", f"s{index}")
        assert [e.user_message for e in self.store.get("u1")] == ["m2", "m3", "m4"]

    def test_users_are_isolated(self):
        self.store.append("u1", "hello", "s")
        assert self.store.get("u2") == []

    def test_clear_only_affects_one_user(self):
        self.store.append("u1", "a", "s")
        self.store.append("u2", "b", "s")
        self.store.clear("u1")
        assert self.store.get("u1") == []
        assert len(self.store.get("u2")) == 1

    def test_clear_unknown_user_is_noop(self):
        self.store.clear("nobody")
        assert len(self.store) == 0

    def test_context_rendering(self):
        self.store.append("u1", "Creer une tache", "Intent: CREATE_TASK, Title: N/A")
        context = self.store.to_context("u1")
        assert context.startswith("Historique de conversation:\n")
        assert "User: Creer une tache\n" in context
        assert "Assistant: Intent: CREATE_TASK, Title: N/A\n" in context

    def test_snapshot_is_a_copy(self):
        self.store.append("u1", "a", "s")
        snapshot = self.store.get("u1")
        snapshot.clear()
        assert len(self.store.get("u1")) == 1

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            ConversationHistoryStore(max_exchanges=0)

    def test_concurrent_appends_for_many_users(self):
        store = ConversationHistoryStore(max_exchanges=50)

        def worker(user_id: str) -> None:
            for index in range(50):
                store.append(user_id, f"{user_id}-{index}", "s")

        threads = [threading.Thread(target=worker, args=(f"u{n}",)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 8
        for n in range(8):
            messages = [e.user_message for e in store.get(f"u{n}")]
            assert messages == [f"u{n}-{index}" for index in range(50)]
