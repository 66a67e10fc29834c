"""Confidence scoring for rule-based parses.

The score is a 0-1 measure of how much extracted evidence backs the detected
intent. A recognised intent on its own sits at 0.5; each independent entity
adds a fixed bonus, so more evidence never lowers the score.
"""

from dataclasses import dataclass

from chatbot.schemas import Intent


@dataclass
class ConfidenceBreakdown:
    """Components of a confidence score."""

    base_score: float = 0.0  # 0.5 once an intent is recognised
    title_bonus: float = 0.0  # +0.2
    date_bonus: float = 0.0  # +0.15
    time_bonus: float = 0.0  # +0.1
    priority_bonus: float = 0.0  # +0.05 for an explicitly stated priority

    @property
    def total(self) -> float:
        raw = (
            self.base_score
            + self.title_bonus
            + self.date_bonus
            + self.time_bonus
            + self.priority_bonus
        )
        return round(max(0.0, min(1.0, raw)), 4)

    def to_dict(self) -> dict:
        return {
            "base_score": self.base_score,
            "title_bonus": self.title_bonus,
            "date_bonus": self.date_bonus,
            "time_bonus": self.time_bonus,
            "priority_bonus": self.priority_bonus,
            "total": self.total,
        }


class ConfidenceScorer:
    BASE_SCORE = 0.5
    TITLE_BONUS = 0.2
    DATE_BONUS = 0.15
    TIME_BONUS = 0.1
    PRIORITY_BONUS = 0.05

    def breakdown(
        self,
        intent: Intent,
        *,
        has_date: bool = False,
        has_time: bool = False,
        has_priority: bool = False,
        has_title: bool = False,
    ) -> ConfidenceBreakdown:
        if intent is Intent.UNKNOWN:
            return ConfidenceBreakdown()

        return ConfidenceBreakdown(
            base_score=self.BASE_SCORE,
            title_bonus=self.TITLE_BONUS if has_title else 0.0,
            date_bonus=self.DATE_BONUS if has_date else 0.0,
            time_bonus=self.TIME_BONUS if has_time else 0.0,
            priority_bonus=self.PRIORITY_BONUS if has_priority else 0.0,
        )

    def score(
        self,
        intent: Intent,
        *,
        has_date: bool = False,
        has_time: bool = False,
        has_priority: bool = False,
        has_title: bool = False,
    ) -> float:
        return self.breakdown(
            intent,
            has_date=has_date,
            has_time=has_time,
            has_priority=has_priority,
            has_title=has_title,
        ).total


def calculate_confidence(
    intent: Intent,
    *,
    has_date: bool = False,
    has_time: bool = False,
    has_priority: bool = False,
    has_title: bool = False,
) -> float:
    """Convenience wrapper around a default ``ConfidenceScorer``."""
    return ConfidenceScorer().score(
        intent,
        has_date=has_date,
        has_time=has_time,
        has_priority=has_priority,
        has_title=has_title,
    )
