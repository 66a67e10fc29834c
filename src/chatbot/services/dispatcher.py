"""Intent-keyed action dispatch.

Turns a ``ParsedMessage`` into a domain-service call and a French,
user-facing ``ChatbotResponse``. Missing organization context is reported as
a structured error response; exceptions raised by the domain services
propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from typing import Any

import pytz

from chatbot.config import settings
from chatbot.ports import (
    EventService,
    GoalService,
    NoteService,
    ProductivityStatsService,
    TaskService,
)
from chatbot.schemas import (
    ChatbotResponse,
    CreateEventRequest,
    CreateGoalRequest,
    CreateNoteRequest,
    CreateTaskRequest,
    EventRecord,
    ExtractedEntities,
    GoalRecord,
    GoalType,
    Intent,
    ParsedMessage,
    Priority,
    QueryResults,
    QuickAction,
    TaskRecord,
    TaskStatus,
)

logger = logging.getLogger(__name__)

UNKNOWN_TEXT = (
    "Je n'ai pas compris votre demande. Essayez par exemple:\n"
    '- "Creer une tache: finir le rapport"\n'
    '- "J\'ai un rdv demain a 14h avec le client"\n'
    '- "Note: idee pour le projet"\n'
    '- "Quelles sont mes taches aujourd\'hui?"\n'
    '- "Combien de taches j\'ai completees?"'
)

UNKNOWN_QUICK_ACTIONS: tuple[QuickAction, ...] = (
    QuickAction(label="Creer une tache", action="create_task"),
    QuickAction(label="Creer un evenement", action="create_event"),
    QuickAction(label="Voir mes taches", action="query_tasks"),
)

PRIORITY_LABELS: dict[Priority, str] = {
    Priority.URGENT: "Urgente",
    Priority.HIGH: "Haute",
    Priority.MEDIUM: "Moyenne",
    Priority.LOW: "Basse",
}

MAX_LISTED_TASKS = 5
DEFAULT_EVENT_TIME = time(9, 0)
EVENT_DURATION = timedelta(hours=1)
DEFAULT_GOAL_HORIZON = timedelta(weeks=2)


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_datetime(value: datetime) -> str:
    return value.strftime("%d/%m/%Y %H:%M")


def _missing_organization(parsed: ParsedMessage, what: str) -> ChatbotResponse:
    logger.info("Rejected %s: no organization in request", parsed.intent.value)
    return ChatbotResponse(
        intent=parsed.intent,
        entities=_entities(parsed),
        action_executed=False,
        error_message=f"Veuillez selectionner une organisation pour creer {what}.",
    )


def _entities(parsed: ParsedMessage) -> ExtractedEntities:
    return ExtractedEntities(
        title=parsed.title,
        description=parsed.description,
        extracted_date=parsed.extracted_date,
        extracted_time=parsed.extracted_time,
        priority=parsed.priority,
    )


def _title_or(parsed: ParsedMessage, default: str) -> str:
    if parsed.title and parsed.title.strip():
        return parsed.title
    return default


class ActionDispatcher:
    """Executes the action behind a parsed chat command."""

    def __init__(
        self,
        *,
        tasks: TaskService,
        events: EventService,
        goals: GoalService,
        notes: NoteService,
        stats: ProductivityStatsService,
        timezone: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.tasks = tasks
        self.events = events
        self.goals = goals
        self.notes = notes
        self.stats = stats
        self.timezone = pytz.timezone(timezone or settings.user_timezone)
        # Returns a naive datetime in the user's timezone.
        self.clock = clock or self._local_now

    def _local_now(self) -> datetime:
        return datetime.now(self.timezone).replace(tzinfo=None)

    def dispatch(
        self, parsed: ParsedMessage, user_id: str, organization_id: str | None = None
    ) -> ChatbotResponse:
        logger.info("Dispatching %s for user %s", parsed.intent.value, user_id)
        match parsed.intent:
            case Intent.CREATE_TASK:
                return self._create_task(parsed, organization_id, user_id)
            case Intent.CREATE_EVENT:
                return self._create_event(parsed, organization_id, user_id)
            case Intent.CREATE_GOAL:
                return self._create_goal(parsed, organization_id, user_id)
            case Intent.CREATE_NOTE:
                return self._create_note(parsed, organization_id, user_id)
            case Intent.QUERY_TASKS:
                return self._query_tasks(parsed, organization_id, user_id)
            case Intent.QUERY_STATS:
                return self._query_stats(parsed, user_id)
            case Intent.UNKNOWN:
                return self._unknown(parsed)
        raise ValueError(f"Unhandled intent: {parsed.intent!r}")

    # === Creation ===

    def _create_task(
        self, parsed: ParsedMessage, organization_id: str | None, user_id: str
    ) -> ChatbotResponse:
        if organization_id is None:
            return _missing_organization(parsed, "une tache")

        request = CreateTaskRequest(
            title=_title_or(parsed, "Nouvelle tache"),
            description=parsed.description,
            priority=parsed.priority,
            due_date=(
                datetime.combine(parsed.extracted_date, time.min)
                if parsed.extracted_date
                else None
            ),
        )
        task = self.tasks.create_task(request, organization_id, user_id)
        url = f"/org/{organization_id}/tasks"

        return ChatbotResponse(
            intent=Intent.CREATE_TASK,
            entities=_entities(parsed),
            confirmation_text=self._task_confirmation(task),
            action_url=url,
            action_executed=True,
            created_resource_id=task.id,
            quick_actions=[
                QuickAction(label="Voir la tache", action="navigate", url=url),
                QuickAction(label="Creer une autre", action="create_task"),
            ],
        )

    def _create_event(
        self, parsed: ParsedMessage, organization_id: str | None, user_id: str
    ) -> ChatbotResponse:
        if organization_id is None:
            return _missing_organization(parsed, "un evenement")

        start = self._event_start(parsed.extracted_date, parsed.extracted_time)
        request = CreateEventRequest(
            title=_title_or(parsed, "Nouvel evenement"),
            description=parsed.description,
            start_time=start,
            end_time=start + EVENT_DURATION,
        )
        event = self.events.create_event(request, organization_id, user_id)
        url = f"/org/{organization_id}/calendar"

        return ChatbotResponse(
            intent=Intent.CREATE_EVENT,
            entities=_entities(parsed),
            confirmation_text=self._event_confirmation(event),
            action_url=url,
            action_executed=True,
            created_resource_id=event.id,
            quick_actions=[
                QuickAction(label="Voir le calendrier", action="navigate", url=url),
                QuickAction(label="Creer un autre", action="create_event"),
            ],
        )

    def _create_goal(
        self, parsed: ParsedMessage, organization_id: str | None, user_id: str
    ) -> ChatbotResponse:
        if organization_id is None:
            return _missing_organization(parsed, "un objectif")

        request = CreateGoalRequest(
            title=_title_or(parsed, "Nouvel objectif"),
            type=GoalType.SHORT,
            deadline=parsed.extracted_date or (self.clock().date() + DEFAULT_GOAL_HORIZON),
        )
        goal = self.goals.create_goal(request, organization_id, user_id)
        url = f"/org/{organization_id}/goals"

        return ChatbotResponse(
            intent=Intent.CREATE_GOAL,
            entities=_entities(parsed),
            confirmation_text=self._goal_confirmation(goal),
            action_url=url,
            action_executed=True,
            created_resource_id=goal.id,
            quick_actions=[
                QuickAction(label="Voir les objectifs", action="navigate", url=url),
                QuickAction(label="Creer un autre", action="create_goal"),
            ],
        )

    def _create_note(
        self, parsed: ParsedMessage, organization_id: str | None, user_id: str
    ) -> ChatbotResponse:
        # Without an organization the note lands in the user's personal space.
        request = CreateNoteRequest(
            title=_title_or(parsed, "Nouvelle note"),
            content=parsed.description or "",
        )
        note = self.notes.create_note(request, organization_id, user_id)
        url = f"/org/{organization_id}/notes" if organization_id else "/personal/notes"

        return ChatbotResponse(
            intent=Intent.CREATE_NOTE,
            entities=_entities(parsed),
            confirmation_text=f'Note "{note.title}" creee avec succes.',
            action_url=url,
            action_executed=True,
            created_resource_id=note.id,
            quick_actions=[
                QuickAction(label="Voir les notes", action="navigate", url=url),
                QuickAction(label="Creer une autre", action="create_note"),
            ],
        )

    # === Queries ===

    def _query_tasks(
        self, parsed: ParsedMessage, organization_id: str | None, user_id: str
    ) -> ChatbotResponse:
        if organization_id is not None:
            tasks = self.tasks.list_organization_tasks(organization_id)
            url = f"/org/{organization_id}/tasks"
        else:
            tasks = self.tasks.list_user_tasks(user_id)
            url = "/personal/dashboard"

        target = parsed.extracted_date or self.clock().date()
        due = [
            task
            for task in tasks
            if task.due_date is not None
            and task.due_date.date() == target
            and task.status is not TaskStatus.DONE
        ]
        summary = self._tasks_summary(due, target)

        return ChatbotResponse(
            intent=Intent.QUERY_TASKS,
            entities=_entities(parsed),
            confirmation_text=summary,
            action_url=url,
            action_executed=True,
            query_results=QueryResults(
                total_count=len(due),
                items=[self._task_item(task) for task in due],
                summary=summary,
            ),
            quick_actions=[QuickAction(label="Voir toutes les taches", action="navigate", url=url)],
        )

    def _query_stats(self, parsed: ParsedMessage, user_id: str) -> ChatbotResponse:
        stats = self.stats.get_productivity_stats(user_id)
        summary = (
            f"Cette semaine: {stats.tasks_completed_this_week} taches completees "
            f"(score de productivite: {stats.productivity_score}/100). "
            f"Ce mois: {stats.tasks_completed_this_month} taches completees. "
            f"Serie actuelle: {stats.productive_streak} jours."
        )
        item = {
            "tasks_completed_this_week": stats.tasks_completed_this_week,
            "tasks_completed_this_month": stats.tasks_completed_this_month,
            "productivity_score": stats.productivity_score,
            "current_streak": stats.productive_streak,
        }

        return ChatbotResponse(
            intent=Intent.QUERY_STATS,
            entities=_entities(parsed),
            confirmation_text=summary,
            action_url="/personal/dashboard",
            action_executed=True,
            query_results=QueryResults(total_count=1, items=[item], summary=summary),
            quick_actions=[
                QuickAction(label="Voir le dashboard", action="navigate", url="/personal/dashboard")
            ],
        )

    def _unknown(self, parsed: ParsedMessage) -> ChatbotResponse:
        return ChatbotResponse(
            intent=Intent.UNKNOWN,
            entities=_entities(parsed),
            confirmation_text=UNKNOWN_TEXT,
            action_executed=False,
            quick_actions=[action.model_copy() for action in UNKNOWN_QUICK_ACTIONS],
        )

    # === Helpers ===

    def _event_start(self, day: date | None, at: time | None) -> datetime:
        if day is None and at is None:
            return self.clock().replace(second=0, microsecond=0) + timedelta(hours=1)
        return datetime.combine(day or self.clock().date(), at or DEFAULT_EVENT_TIME)

    def _task_confirmation(self, task: TaskRecord) -> str:
        parts = [f'Tache "{task.title}" creee avec succes.']
        if task.due_date is not None:
            parts.append(f"Echeance: {format_date(task.due_date.date())}.")
        if task.priority is not None and task.priority is not Priority.MEDIUM:
            parts.append(f"Priorite: {PRIORITY_LABELS[task.priority]}.")
        return " ".join(parts)

    def _event_confirmation(self, event: EventRecord) -> str:
        text = f'Evenement "{event.title}" cree avec succes.'
        if event.start_time is not None:
            text += f" Date: {format_datetime(event.start_time)}."
        return text

    def _goal_confirmation(self, goal: GoalRecord) -> str:
        text = f'Objectif "{goal.title}" cree avec succes.'
        if goal.deadline is not None:
            text += f" Echeance: {format_date(goal.deadline)}."
        return text

    def _tasks_summary(self, tasks: list[TaskRecord], target: date) -> str:
        if not tasks:
            return f"Aucune tache prevue pour le {format_date(target)}."

        lines = [f"Vous avez {len(tasks)} tache(s) pour le {format_date(target)}:"]
        lines.extend(f"- {task.title}" for task in tasks[:MAX_LISTED_TASKS])
        if len(tasks) > MAX_LISTED_TASKS:
            lines.append(f"... et {len(tasks) - MAX_LISTED_TASKS} autre(s).")
        return "\n".join(lines)

    @staticmethod
    def _task_item(task: TaskRecord) -> dict[str, Any]:
        return {
            "id": task.id,
            "title": task.title,
            "status": task.status.value,
            "priority": (task.priority or Priority.MEDIUM).value,
            "due_date": task.due_date.date().isoformat() if task.due_date else None,
        }
