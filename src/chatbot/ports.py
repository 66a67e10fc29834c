"""Interfaces the command interpreter consumes.

The interpreter never talks to a database or a model server directly. It is
handed implementations of these ports: an LLM backend (see
``chatbot.ollama.client.OllamaClient``) and the domain services that own
tasks, events, goals, notes and productivity statistics.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

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


class LLMPort(ABC):
    """Language-model backend used for the assisted parse."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backend is enabled and answering."""
        ...

    @abstractmethod
    def model_name(self) -> str:
        ...

    @abstractmethod
    def generate(self, system_prompt: str, user_message: str, history: str) -> str:
        """Return the raw model reply. May raise on timeouts or transport errors."""
        ...


class TaskService(ABC):
    @abstractmethod
    def create_task(
        self, request: CreateTaskRequest, organization_id: str, user_id: str
    ) -> TaskRecord: ...

    @abstractmethod
    def list_organization_tasks(self, organization_id: str) -> list[TaskRecord]: ...

    @abstractmethod
    def list_user_tasks(self, user_id: str) -> list[TaskRecord]: ...


class EventService(ABC):
    @abstractmethod
    def create_event(
        self, request: CreateEventRequest, organization_id: str | None, user_id: str
    ) -> EventRecord: ...


class GoalService(ABC):
    @abstractmethod
    def create_goal(
        self, request: CreateGoalRequest, organization_id: str | None, user_id: str
    ) -> GoalRecord: ...


class NoteService(ABC):
    @abstractmethod
    def create_note(
        self, request: CreateNoteRequest, organization_id: str | None, user_id: str
    ) -> NoteRecord: ...


class ProductivityStatsService(ABC):
    @abstractmethod
    def get_productivity_stats(self, user_id: str) -> ProductivityStats: ...
