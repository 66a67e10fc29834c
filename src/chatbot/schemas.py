import uuid
from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Intent(str, Enum):
    CREATE_TASK = "CREATE_TASK"
    CREATE_EVENT = "CREATE_EVENT"
    CREATE_GOAL = "CREATE_GOAL"
    CREATE_NOTE = "CREATE_NOTE"
    QUERY_TASKS = "QUERY_TASKS"
    QUERY_STATS = "QUERY_STATS"
    UNKNOWN = "UNKNOWN"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class GoalType(str, Enum):
    SHORT = "SHORT"
    MEDIUM = "MEDIUM"
    LONG = "LONG"


def generate_id() -> str:
    return str(uuid.uuid4())


class ParsedMessage(BaseModel):
    """Structured reading of one chat message. Built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    intent: Intent
    extracted_date: date | None = None
    extracted_time: time | None = None
    priority: Priority = Priority.MEDIUM
    title: str | None = None
    description: str | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    raw_message: str | None = None


# Requests / responses exposed to the surrounding application


class ChatMessageRequest(BaseModel):
    message: str | None = None
    organization_id: str | None = None


class ExtractedEntities(BaseModel):
    title: str | None = None
    description: str | None = None
    extracted_date: date | None = None
    extracted_time: time | None = None
    priority: Priority | None = None


class QuickAction(BaseModel):
    label: str
    action: str
    url: str | None = None


class QueryResults(BaseModel):
    total_count: int = 0
    items: list[dict[str, Any]] = Field(default_factory=list)
    summary: str | None = None


class ChatbotResponse(BaseModel):
    intent: Intent
    action_executed: bool = False
    created_resource_id: str | None = None
    confirmation_text: str | None = None
    error_message: str | None = None
    action_url: str | None = None
    entities: ExtractedEntities | None = None
    query_results: QueryResults | None = None
    quick_actions: list[QuickAction] = Field(default_factory=list)
    used_ollama: bool = False
    ollama_model: str | None = None


# Payloads exchanged with the domain services


class CreateTaskRequest(BaseModel):
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None


class CreateEventRequest(BaseModel):
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime


class CreateGoalRequest(BaseModel):
    title: str
    type: GoalType = GoalType.SHORT
    deadline: date | None = None


class CreateNoteRequest(BaseModel):
    title: str
    content: str = ""


class TaskRecord(BaseModel):
    id: str = Field(default_factory=generate_id)
    title: str
    status: TaskStatus = TaskStatus.TODO
    priority: Priority | None = Priority.MEDIUM
    due_date: datetime | None = None
    organization_id: str | None = None
    assignee_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class EventRecord(BaseModel):
    id: str = Field(default_factory=generate_id)
    title: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    organization_id: str | None = None


class GoalRecord(BaseModel):
    id: str = Field(default_factory=generate_id)
    title: str
    type: GoalType = GoalType.SHORT
    deadline: date | None = None
    organization_id: str | None = None


class NoteRecord(BaseModel):
    id: str = Field(default_factory=generate_id)
    title: str
    content: str = ""
    organization_id: str | None = None


class ProductivityStats(BaseModel):
    tasks_completed_this_week: int = 0
    tasks_completed_this_month: int = 0
    productivity_score: int = 0  # 0-100
    productive_streak: int = 0
    longest_productive_streak: int = 0
    weekly_completion_rate: float = 0.0
    insight: str | None = None
