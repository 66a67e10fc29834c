"""Shared fakes for the interpreter tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from chatbot.ports import (
    EventService,
    GoalService,
    LLMPort,
    NoteService,
    ProductivityStatsService,
    TaskService,
)
from chatbot.schemas import (
    CreateEventRequest,
    CreateGoalRequest,
    CreateNoteRequest,
    CreateTaskRequest,
    EventRecord,
    GoalRecord,
    NoteRecord,
    ProductivityStats,
    TaskRecord,
)

# Wednesday
NOW = datetime(2026, 10, 21, 10, 30)


class FakeLLM(LLMPort):
    def __init__(
        self,
        reply: str | None = None,
        *,
        available: bool = True,
        error: Exception | None = None,
        model: str = "llama3.1",
    ) -> None:
        self.reply = reply
        self.available = available
        self.error = error
        self.model = model
        self.calls: list[tuple[str, str, str]] = []
        self.availability_checks = 0

    def is_available(self) -> bool:
        self.availability_checks += 1
        return self.available

    def model_name(self) -> str:
        return self.model

    def generate(self, system_prompt: str, user_message: str, history: str) -> str:
        self.calls.append((system_prompt, user_message, history))
        if self.error is not None:
            raise self.error
        return self.reply or ""


class FakeTaskService(TaskService):
    def __init__(self, tasks: list[TaskRecord] | None = None) -> None:
        self.tasks = list(tasks or [])
        self.created: list[tuple[CreateTaskRequest, str, str]] = []

    def create_task(self, request, organization_id, user_id):
        self.created.append((request, organization_id, user_id))
        return TaskRecord(
            title=request.title,
            priority=request.priority,
            due_date=request.due_date,
            organization_id=organization_id,
        )

    def list_organization_tasks(self, organization_id):
        return [task for task in self.tasks if task.organization_id == organization_id]

    def list_user_tasks(self, user_id):
        return [task for task in self.tasks if task.assignee_id == user_id]


class FakeEventService(EventService):
    def __init__(self) -> None:
        self.created: list[tuple[CreateEventRequest, str | None, str]] = []

    def create_event(self, request, organization_id, user_id):
        self.created.append((request, organization_id, user_id))
        return EventRecord(
            title=request.title,
            start_time=request.start_time,
            end_time=request.end_time,
            organization_id=organization_id,
        )


class FakeGoalService(GoalService):
    def __init__(self) -> None:
        self.created: list[tuple[CreateGoalRequest, str | None, str]] = []

    def create_goal(self, request, organization_id, user_id):
        self.created.append((request, organization_id, user_id))
        return GoalRecord(
            title=request.title,
            type=request.type,
            deadline=request.deadline,
            organization_id=organization_id,
        )


class FakeNoteService(NoteService):
    def __init__(self) -> None:
        self.created: list[tuple[CreateNoteRequest, str | None, str]] = []

    def create_note(self, request, organization_id, user_id):
        self.created.append((request, organization_id, user_id))
        return NoteRecord(
            title=request.title, content=request.content, organization_id=organization_id
        )


class FakeStatsService(ProductivityStatsService):
    def __init__(self, stats: ProductivityStats | None = None) -> None:
        self.stats = stats or ProductivityStats(
            tasks_completed_this_week=7,
            tasks_completed_this_month=23,
            productivity_score=82,
            productive_streak=4,
        )
        self.requested_for: list[str] = []

    def get_productivity_stats(self, user_id):
        self.requested_for.append(user_id)
        return self.stats


@pytest.fixture
def task_service() -> FakeTaskService:
    return FakeTaskService()


@pytest.fixture
def event_service() -> FakeEventService:
    return FakeEventService()


@pytest.fixture
def goal_service() -> FakeGoalService:
    return FakeGoalService()


@pytest.fixture
def note_service() -> FakeNoteService:
    return FakeNoteService()


@pytest.fixture
def stats_service() -> FakeStatsService:
    return FakeStatsService()


@pytest.fixture
def dispatcher(task_service, event_service, goal_service, note_service, stats_service):
    from chatbot.services.dispatcher import ActionDispatcher

    return ActionDispatcher(
        tasks=task_service,
        events=event_service,
        goals=goal_service,
        notes=note_service,
        stats=stats_service,
        clock=lambda: NOW,
    )
