"""Command interpreter facade.

Pipeline for one incoming chat message:
1. Ask the LLM backend for a parse when it is available
2. Fall back to the rule-based parser when the backend is unavailable, fails,
   returns no usable JSON, or answers UNKNOWN
3. Dispatch the accepted parse to the domain services
4. Record the exchange in the caller's conversation history
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from chatbot.config import settings
from chatbot.ports import LLMPort
from chatbot.schemas import ChatbotResponse, ChatMessageRequest, Intent, ParsedMessage
from chatbot.services.dispatcher import ActionDispatcher
from chatbot.services.history import ConversationHistoryStore
from chatbot.services.llm_parser import LLMIntentParser
from chatbot.services.parser import Parser

logger = logging.getLogger(__name__)


class CommandInterpreter:
    def __init__(
        self,
        *,
        llm: LLMPort,
        dispatcher: ActionDispatcher,
        history: ConversationHistoryStore | None = None,
        parser: Parser | None = None,
        llm_parser: LLMIntentParser | None = None,
        check_interval: float | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.llm = llm
        self.dispatcher = dispatcher
        self.history = history if history is not None else ConversationHistoryStore()
        self.parser = parser or Parser()
        self.llm_parser = llm_parser or LLMIntentParser(llm, history=self.history)
        self.check_interval = (
            check_interval if check_interval is not None else settings.ollama_check_interval
        )
        self._monotonic = monotonic
        self._availability: bool | None = None
        self._checked_at = 0.0
        self._availability_lock = threading.Lock()

    def parse(self, raw_message: str | None) -> ParsedMessage:
        """Rule-based parse only; never consults the LLM."""
        return self.parser.parse(raw_message)

    def process_message(self, request: ChatMessageRequest, user_id: str) -> ChatbotResponse:
        message = request.message
        organization_id = request.organization_id

        parsed: ParsedMessage | None = None
        used_llm = False
        if message and message.strip() and self.is_llm_available():
            try:
                parsed = self.llm_parser.parse(message, user_id, organization_id)
            except Exception as exc:
                logger.warning("LLM parsing failed, falling back to rules: %s", exc)
                parsed = None
            if parsed is None:
                logger.warning("LLM parse unusable, falling back to rules")
            elif parsed.intent is Intent.UNKNOWN:
                logger.info("LLM answered UNKNOWN, falling back to rules")
                parsed = None
            else:
                used_llm = True

        if parsed is None:
            parsed = self.parser.parse(message)

        response = self.dispatcher.dispatch(parsed, user_id, organization_id)

        if message and message.strip():
            self.history.append(user_id, message, _summarize(parsed))

        if used_llm:
            return response.model_copy(
                update={"used_ollama": True, "ollama_model": self.llm_model_name()}
            )
        return response.model_copy(update={"used_ollama": False, "ollama_model": None})

    def is_llm_available(self) -> bool:
        """Backend availability, re-probed at most every ``check_interval`` seconds."""
        with self._availability_lock:
            now = self._monotonic()
            stale = (
                self._availability is None
                or self.check_interval <= 0
                or now - self._checked_at >= self.check_interval
            )
            if not stale:
                return self._availability

        # The lock is not held across the probe, which may block on the network.
        available = self._probe()
        with self._availability_lock:
            self._availability = available
            self._checked_at = now
        return available

    def llm_model_name(self) -> str:
        return self.llm.model_name()

    def clear_history(self, user_id: str) -> None:
        self.history.clear(user_id)

    def _probe(self) -> bool:
        try:
            available = bool(self.llm.is_available())
        except Exception as exc:
            logger.warning("LLM availability probe failed: %s", exc)
            return False
        logger.debug("LLM availability check: %s", available)
        return available


def _summarize(parsed: ParsedMessage) -> str:
    return f"Intent: {parsed.intent.value}, Title: {parsed.title or 'N/A'}"
