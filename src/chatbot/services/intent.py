"""Keyword intent classification.

Rules are evaluated top to bottom on normalised text and the first match wins.
Creation intents come before queries so "ajouter une tache pour la reunion"
creates a task rather than an event, and stats come before the task query
because "combien de taches ... completees" also reads like a task listing.
"""

import re

from chatbot.schemas import Intent

INTENT_RULES: tuple[tuple[re.Pattern[str], Intent], ...] = (
    (
        re.compile(r"\b(?:creer|ajouter|nouvelle?|faire)\s+(?:une?\s+)?taches?\b|\btache\s*:"),
        Intent.CREATE_TASK,
    ),
    (
        re.compile(
            r"\b(?:creer|ajouter|nouvel|nouveau|j'ai)\s+(?:un\s+)?"
            r"(?:rdv|rendez-vous|evenement|reunion|meeting)\b"
            r"|^\s*(?:rdv|rendez-vous|reunion|meeting)\b"
            r"|\b(?:rdv|rendez-vous|reunion|meeting)\s+(?:le|a|avec)\b"
        ),
        Intent.CREATE_EVENT,
    ),
    (
        re.compile(r"\b(?:creer|ajouter|nouvel|nouveau|definir)\s+(?:un\s+)?objectif\b|\bobjectif\s*:"),
        Intent.CREATE_GOAL,
    ),
    (
        re.compile(
            r"\b(?:creer|ajouter|nouvelle?|ecrire)\s+(?:une?\s+)?note\b|\bnote\s*:|\bidee\s*:"
        ),
        Intent.CREATE_NOTE,
    ),
    (
        re.compile(
            r"\b(?:statistiques?|stats?|productivite|bilan|resume)\b"
            r"|\b(?:taches?|objectifs?)\b.*\b(?:complete|termine|fini)"
        ),
        Intent.QUERY_STATS,
    ),
    (
        re.compile(
            r"\b(?:quelles?|combien|liste|lister|affiche|montre|voir)\b.*\b(?:taches?|tasks?)\b"
            r"|\b(?:mes\s+)?taches?\s+(?:du\s+jour|aujourd'?hui|de\s+demain|cette\s+semaine)"
        ),
        Intent.QUERY_TASKS,
    ),
)


def classify_intent(text: str) -> Intent:
    """Classify normalised text; UNKNOWN when no rule matches."""
    for pattern, intent in INTENT_RULES:
        if pattern.search(text):
            return intent
    return Intent.UNKNOWN
