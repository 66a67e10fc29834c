"""Command interpreter services.

Entity extraction, intent classification, confidence scoring, the two parser
strategies, action dispatch and the interpreter facade. Imports are lazy so
that importing one extractor does not pull in the whole pipeline.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, tuple[str, str]] = {
    # Confidence
    "ConfidenceBreakdown": ("chatbot.services.confidence", "ConfidenceBreakdown"),
    "ConfidenceScorer": ("chatbot.services.confidence", "ConfidenceScorer"),
    "calculate_confidence": ("chatbot.services.confidence", "calculate_confidence"),
    # Dispatcher
    "ActionDispatcher": ("chatbot.services.dispatcher", "ActionDispatcher"),
    # Entities
    "extract_date": ("chatbot.services.entities", "extract_date"),
    "extract_priority": ("chatbot.services.entities", "extract_priority"),
    "extract_time": ("chatbot.services.entities", "extract_time"),
    "extract_title": ("chatbot.services.entities", "extract_title"),
    "normalize_text": ("chatbot.services.entities", "normalize_text"),
    # History
    "ConversationExchange": ("chatbot.services.history", "ConversationExchange"),
    "ConversationHistoryStore": ("chatbot.services.history", "ConversationHistoryStore"),
    # Intent
    "classify_intent": ("chatbot.services.intent", "classify_intent"),
    # Interpreter
    "CommandInterpreter": ("chatbot.services.interpreter", "CommandInterpreter"),
    # JSON extraction
    "extract_json_object": ("chatbot.services.json_extract", "extract_json_object"),
    "find_json_object": ("chatbot.services.json_extract", "find_json_object"),
    # Parsers
    "LLMIntentParser": ("chatbot.services.llm_parser", "LLMIntentParser"),
    "Parser": ("chatbot.services.parser", "Parser"),
}

__all__ = list(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _EXPORTS[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))
