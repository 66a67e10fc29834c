from datetime import date, datetime

import pytz

from chatbot.config import settings
from chatbot.schemas import Intent, ParsedMessage, Priority
from chatbot.services.confidence import ConfidenceScorer
from chatbot.services.entities import (
    extract_date,
    extract_priority,
    extract_time,
    extract_title,
    normalize_text,
)
from chatbot.services.intent import classify_intent


class Parser:
    """Deterministic parser: keyword intent plus independent entity extractors."""

    def __init__(self, timezone: str | None = None, scorer: ConfidenceScorer | None = None):
        self.timezone = pytz.timezone(timezone or settings.user_timezone)
        self.scorer = scorer or ConfidenceScorer()

    def today(self) -> date:
        return datetime.now(self.timezone).date()

    def parse(self, text: str | None, today: date | None = None) -> ParsedMessage:
        if text is None or not text.strip():
            return ParsedMessage(intent=Intent.UNKNOWN, confidence=0.0, raw_message=text)

        normalized = normalize_text(text)
        reference_day = today or self.today()

        intent = classify_intent(normalized)
        extracted_date = extract_date(normalized, reference_day)
        extracted_time = extract_time(normalized)
        priority = extract_priority(normalized)
        title = extract_title(text)

        confidence = self.scorer.score(
            intent,
            has_date=extracted_date is not None,
            has_time=extracted_time is not None,
            has_priority=priority is not Priority.MEDIUM,
            has_title=bool(title),
        )

        return ParsedMessage(
            intent=intent,
            extracted_date=extracted_date,
            extracted_time=extracted_time,
            priority=priority,
            title=title,
            confidence=confidence,
            raw_message=text,
        )
