"""LLM-assisted intent parsing.

Asks the language-model backend for a JSON reading of the message and maps it
onto ``ParsedMessage``. Nothing here raises on bad model output: a reply with
no usable JSON object, or a backend error, yields ``None`` so the caller can
fall back to the rule-based parser.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any

import pytz

from chatbot.config import settings
from chatbot.schemas import Intent, ParsedMessage, Priority
from chatbot.services.json_extract import extract_json_object

if TYPE_CHECKING:
    from chatbot.ports import LLMPort
    from chatbot.services.history import ConversationHistoryStore

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8


class LLMIntentParser:
    """Parse chat commands with an LLM backend."""

    def __init__(
        self,
        llm: LLMPort,
        *,
        history: ConversationHistoryStore | None = None,
        timezone: str | None = None,
    ) -> None:
        self.llm = llm
        self.history = history
        self.timezone = pytz.timezone(timezone or settings.user_timezone)

    def parse(
        self,
        message: str,
        user_id: str,
        organization_id: str | None = None,
        today: date | None = None,
    ) -> ParsedMessage | None:
        reference_day = today or datetime.now(self.timezone).date()
        system_prompt = self.build_system_prompt(organization_id, reference_day)
        context = self.history.to_context(user_id) if self.history is not None else ""

        try:
            reply = self.llm.generate(system_prompt, message, context)
        except Exception as exc:
            logger.warning("LLM generation failed: %s", exc)
            return None

        if not reply or not reply.strip():
            logger.warning("LLM returned an empty reply")
            return None

        return self.parse_reply(reply, message)

    def parse_reply(self, reply: str, raw_message: str | None = None) -> ParsedMessage | None:
        """Map a raw model reply onto a ParsedMessage; None if it holds no JSON object."""
        data = extract_json_object(reply)
        if data is None:
            logger.warning("Could not extract a JSON object from LLM reply (%d chars)", len(reply))
            return None

        return ParsedMessage(
            intent=_coerce_intent(data.get("intent")),
            title=_coerce_text(data.get("title")),
            description=_coerce_text(data.get("description")),
            extracted_date=_coerce_date(data.get("date")),
            extracted_time=_coerce_time(data.get("time")),
            priority=_coerce_priority(data.get("priority")),
            confidence=_coerce_confidence(data.get("confidence")),
            raw_message=raw_message,
        )

    def build_system_prompt(self, organization_id: str | None, today: date) -> str:
        tomorrow = today + timedelta(days=1)
        next_monday = today + timedelta(days=(0 - today.weekday()) % 7)

        lines = [
            "Tu es un assistant IA pour une application de gestion de projets et de productivite.",
            "Tu dois analyser les messages des utilisateurs et repondre UNIQUEMENT en JSON valide.",
            "",
            "INTENTS DISPONIBLES:",
            "- CREATE_TASK: Creer une nouvelle tache",
            "- CREATE_EVENT: Creer un evenement ou rendez-vous",
            "- CREATE_GOAL: Creer un objectif",
            "- CREATE_NOTE: Creer une note",
            "- QUERY_TASKS: Lister ou chercher des taches",
            "- QUERY_STATS: Obtenir des statistiques de productivite",
            "- UNKNOWN: Si tu ne comprends pas la demande",
            "",
            "FORMAT DE REPONSE JSON OBLIGATOIRE:",
            "{",
            '  "intent": "CREATE_TASK",',
            '  "title": "Titre extrait du message",',
            '  "description": "Description optionnelle",',
            f'  "date": "{today.isoformat()}",',
            '  "time": "14:00",',
            '  "priority": "HIGH",',
            '  "confidence": 0.95',
            "}",
            "",
            "PRIORITES: URGENT, HIGH, MEDIUM, LOW",
            "DATES: Format ISO (YYYY-MM-DD), ou null si non specifiee",
            "HEURES: Format HH:MM, ou null si non specifiee",
            f"AUJOURD'HUI: {today.isoformat()}",
            "",
            "EXEMPLES:",
            'Message: "Creer une tache urgente pour finir le rapport demain"',
            'Reponse: {"intent":"CREATE_TASK","title":"Finir le rapport","priority":"URGENT",'
            f'"date":"{tomorrow.isoformat()}","confidence":0.95}}',
            "",
            'Message: "J\'ai un rdv avec Marie lundi a 14h"',
            'Reponse: {"intent":"CREATE_EVENT","title":"Rendez-vous avec Marie",'
            f'"date":"{next_monday.isoformat()}","time":"14:00","confidence":0.92}}',
            "",
        ]
        if organization_id is not None:
            lines.append(
                "CONTEXTE: L'utilisateur est dans une organisation. "
                "Les taches et notes seront creees dans cette organisation."
            )
        else:
            lines.append(
                "CONTEXTE: L'utilisateur est dans son espace personnel. "
                "Les objectifs et evenements seront personnels."
            )
        lines.append("")
        lines.append("REPONDS UNIQUEMENT EN JSON VALIDE, SANS TEXTE AVANT OU APRES.")
        return "\n".join(lines)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in ("", "null"))


def _coerce_intent(value: Any) -> Intent:
    if not isinstance(value, str):
        return Intent.UNKNOWN
    try:
        return Intent(value.strip().upper())
    except ValueError:
        return Intent.UNKNOWN


def _coerce_priority(value: Any) -> Priority:
    if not isinstance(value, str):
        return Priority.MEDIUM
    try:
        return Priority(value.strip().upper())
    except ValueError:
        return Priority.MEDIUM


def _coerce_text(value: Any) -> str | None:
    # Lists, objects and booleans are not titles.
    if _is_missing(value) or isinstance(value, bool):
        return None
    if not isinstance(value, (str, int, float)):
        return None
    return str(value).strip()


def _coerce_date(value: Any) -> date | None:
    if _is_missing(value) or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _coerce_time(value: Any) -> time | None:
    if _is_missing(value) or not isinstance(value, str):
        return None
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        return None


def _coerce_confidence(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return DEFAULT_CONFIDENCE
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if confidence != confidence:  # NaN
        return DEFAULT_CONFIDENCE
    # Some models answer on a 0-100 scale.
    if 1.0 < confidence <= 100.0:
        confidence /= 100.0
    return max(0.0, min(1.0, confidence))
