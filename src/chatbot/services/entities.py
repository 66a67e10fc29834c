"""Entity extraction for chat commands.

Pulls a due date, a time of day, a priority and a title out of a French chat
message. Each extractor is an ordered tuple of ``(name, pattern, resolver)``
rules: the first rule whose pattern matches and whose resolver produces a value
wins, so the position of a rule in its tuple is its precedence.

Date, time and priority rules run on normalised text (see ``normalize_text``).
Title rules run on the original message so quoted titles keep their case and
accents.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Callable
from datetime import date, time, timedelta

from chatbot.schemas import Priority

logger = logging.getLogger(__name__)

WEEKDAYS: dict[str, int] = {
    "lundi": 0,
    "mardi": 1,
    "mercredi": 2,
    "jeudi": 3,
    "vendredi": 4,
    "samedi": 5,
    "dimanche": 6,
}

MONTHS: dict[str, int] = {
    "janvier": 1,
    "fevrier": 2,
    "mars": 3,
    "avril": 4,
    "mai": 5,
    "juin": 6,
    "juillet": 7,
    "aout": 8,
    "septembre": 9,
    "octobre": 10,
    "novembre": 11,
    "decembre": 12,
}

_WEEKDAY_ALT = "|".join(WEEKDAYS)
_MONTH_ALT = "|".join(MONTHS)

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'", "`": "'"})


def normalize_text(text: str) -> str:
    """Lower-case, fold accents and typographic apostrophes.

    "Créer une tâche aujourd’hui" -> "creer une tache aujourd'hui"
    """
    decomposed = unicodedata.normalize("NFKD", text.translate(_APOSTROPHES))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


# ─────────────────────────────────────────────────────────────────────────────
# Dates
# ─────────────────────────────────────────────────────────────────────────────

DateResolver = Callable[[re.Match[str], date], date | None]


def _next_or_same(today: date, weekday: int) -> date:
    return today + timedelta(days=(weekday - today.weekday()) % 7)


def _strictly_next(today: date, weekday: int) -> date:
    return today + timedelta(days=(weekday - today.weekday()) % 7 or 7)


def _resolve_weekday(match: re.Match[str], today: date) -> date:
    weekday = WEEKDAYS[match.group(1)]
    if match.group(2):
        return _strictly_next(today, weekday)
    return _next_or_same(today, weekday)


def _resolve_day_of_month(match: re.Match[str], today: date) -> date | None:
    """Next date on or after today falling on the given day of the month.

    Months where the day does not exist (31 in a 30-day month, 29-31 in
    February) are skipped instead of clamped.
    """
    day = int(match.group(1))
    if not 1 <= day <= 31:
        return None

    year, month = today.year, today.month
    # Every day 1-31 occurs at least once in any run of three consecutive months.
    for _ in range(3):
        try:
            candidate = date(year, month, day)
        except ValueError:
            logger.debug("Day %s does not exist in %04d-%02d, skipping month", day, year, month)
        else:
            if candidate >= today:
                return candidate
        month += 1
        if month > 12:
            month, year = 1, year + 1
    return None


def _resolve_in_days(match: re.Match[str], today: date) -> date | None:
    days = int(match.group(1))
    try:
        return today + timedelta(days=days)
    except OverflowError:
        logger.debug("Offset of %s days is out of the calendar range", days)
        return None


def _resolve_day_and_month(match: re.Match[str], today: date) -> date | None:
    day = int(match.group(1))
    month = MONTHS[match.group(2)]
    for year in (today.year, today.year + 1):
        try:
            candidate = date(year, month, day)
        except ValueError:
            logger.debug("Invalid calendar date: day %s of month %s", day, month)
            return None
        if candidate >= today:
            return candidate
    return None


DATE_RULES: tuple[tuple[str, re.Pattern[str], DateResolver], ...] = (
    ("today", re.compile(r"\baujourd'?hui\b"), lambda m, today: today),
    ("tomorrow", re.compile(r"\bdemain\b"), lambda m, today: today + timedelta(days=1)),
    (
        "next_week",
        re.compile(r"\bsemaine\s+prochaine\b"),
        lambda m, today: _strictly_next(today, WEEKDAYS["lundi"]),
    ),
    (
        "in_days",
        re.compile(r"\bdans\s+(\d+)\s+jours?\b"),
        _resolve_in_days,
    ),
    (
        "weekday",
        re.compile(rf"\b(?:pour\s+)?({_WEEKDAY_ALT})(\s+prochain)?\b"),
        _resolve_weekday,
    ),
    (
        "day_and_month",
        re.compile(rf"\ble\s+(\d{{1,2}})(?:er)?\s+({_MONTH_ALT})\b"),
        _resolve_day_and_month,
    ),
    (
        "day_of_month",
        # Not "le 14h", and not "le 30 fevrier" once the month-aware rule rejected it.
        re.compile(rf"\ble\s+(\d{{1,2}})(?:er)?\b(?!\s*h)(?!\s+(?:{_MONTH_ALT})\b)"),
        _resolve_day_of_month,
    ),
)


def extract_date(text: str, today: date) -> date | None:
    """Extract a calendar date from normalised text, relative to ``today``."""
    for name, pattern, resolve in DATE_RULES:
        match = pattern.search(text)
        if match is None:
            continue
        resolved = resolve(match, today)
        if resolved is not None:
            logger.debug("Date rule %s matched %r -> %s", name, match.group(0), resolved)
            return resolved
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Times
# ─────────────────────────────────────────────────────────────────────────────


def _resolve_clock(match: re.Match[str]) -> time | None:
    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


TIME_RULES: tuple[tuple[str, re.Pattern[str], Callable[[re.Match[str]], time | None]], ...] = (
    ("clock", re.compile(r"\b(\d{1,2})\s*h\s*(\d{2})?\b"), _resolve_clock),
    # Before "midi", which also matches inside "apres-midi".
    ("afternoon", re.compile(r"\bapres[- ]?midi\b"), lambda m: time(14, 0)),
    ("noon", re.compile(r"\bmidi\b"), lambda m: time(12, 0)),
    ("morning", re.compile(r"\bmatin\b"), lambda m: time(9, 0)),
    ("evening", re.compile(r"\bsoir\b"), lambda m: time(18, 0)),
)


def extract_time(text: str) -> time | None:
    for _name, pattern, resolve in TIME_RULES:
        match = pattern.search(text)
        if match is None:
            continue
        resolved = resolve(match)
        if resolved is not None:
            return resolved
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Priority
# ─────────────────────────────────────────────────────────────────────────────

PRIORITY_RULES: tuple[tuple[re.Pattern[str], Priority], ...] = (
    # Negated urgency first: "pas urgent" also contains "urgent".
    (
        re.compile(
            r"\b(?:pas\s+(?:tres\s+)?urgente?s?|basse\s+priorite|priorite\s+basse|quand\s+possible)\b"
        ),
        Priority.LOW,
    ),
    (
        re.compile(r"\b(?:urgente?s?|urgence|asap|immediatement|critique)\b"),
        Priority.URGENT,
    ),
    (
        re.compile(r"\b(?:importante?s?|prioritaire|haute\s+priorite|priorite\s+haute)\b"),
        Priority.HIGH,
    ),
)


def extract_priority(text: str) -> Priority:
    """Priority stated in the text; MEDIUM when nothing is stated."""
    for pattern, priority in PRIORITY_RULES:
        if pattern.search(text):
            return priority
    return Priority.MEDIUM


# ─────────────────────────────────────────────────────────────────────────────
# Title
# ─────────────────────────────────────────────────────────────────────────────

_QUOTED = re.compile(r"\"([^\"]+)\"|“([^”]+)”|«([^»]+)»")
# A colon inside a clock time ("14:30") is not a title separator.
_AFTER_COLON = re.compile(r"(?<!\d):\s*(.+)$", re.DOTALL)
_EDGE_PUNCTUATION = " \t\r\n,:;.-"


def _quoted_title(message: str) -> str | None:
    match = _QUOTED.search(message)
    if match is None:
        return None
    quoted = next(group for group in match.groups() if group is not None)
    return quoted.strip() or None


def _colon_title(message: str) -> str | None:
    match = _AFTER_COLON.search(message)
    if match is None:
        return None
    return clean_title(match.group(1))


def clean_title(title: str) -> str | None:
    """Trim whitespace and edge punctuation, capitalise the first letter."""
    cleaned = title.strip(_EDGE_PUNCTUATION)
    if not cleaned:
        return None
    return cleaned[0].upper() + cleaned[1:]


TITLE_RULES: tuple[tuple[str, Callable[[str], str | None]], ...] = (
    ("quoted", _quoted_title),
    ("after_colon", _colon_title),
)


def extract_title(message: str) -> str | None:
    """Extract a title from the original (not normalised) message."""
    for _name, rule in TITLE_RULES:
        title = rule(message)
        if title:
            return title
    return None
