# models.py - Pydantic models for agents
# This file defines the data models used for agents, tasks and run results.

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Any, Union
from datetime import datetime, timezone
from enum import Enum
import uuid

def generate_id() -> str:
    return uuid.uuid4().hex[:16]

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class AgentStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ERROR = "error"
    COMPLETED = "completed"

class TaskType(str, Enum):
    COMMAND = "command"
    SCRIPT = "script"
    API = "api"
    FILE = "file"
    WEBHOOK = "webhook"
    CUSTOM = "custom"
    MAIL = "mail"

class MailOperation(str, Enum):
    LIST = "list"
    GET = "get"
    SEND = "send"
    SEARCH = "search"

class BackoffStrategy(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    FIXED = "fixed"

class TaskStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"

class RunStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"

class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

class RetryPolicy(FrozenModel):
    # Bounds are enforced by validation.validate_agent_config, not here,
    # so that violations surface as AgentConfigurationError.
    max_retries: int
    delay: int  # milliseconds
    backoff: BackoffStrategy = BackoffStrategy.EXPONENTIAL
    max_delay: Optional[int] = None

class Schedule(FrozenModel):
    type: str  # cron, interval, once
    value: Union[str, int]
    timezone: Optional[str] = None
    enabled: bool = True

class Task(FrozenModel):
    id: str = Field(default_factory=generate_id)
    name: str
    description: str = ""
    type: TaskType
    config: Dict[str, Any] = Field(default_factory=dict)
    dependencies: List[str] = Field(default_factory=list)  # declared, not enforced
    retry_count: Optional[int] = None
    max_retries: Optional[int] = None

class AgentConfig(FrozenModel):
    tasks: List[Task] = Field(default_factory=list)
    schedule: Optional[Schedule] = None  # inert
    retry_policy: Optional[RetryPolicy] = None  # validated, never consulted by the dispatcher
    timeout: Optional[int] = None  # milliseconds
    environment: Dict[str, str] = Field(default_factory=dict)

class Agent(FrozenModel):
    id: str = Field(default_factory=generate_id)
    name: str
    description: str
    config: AgentConfig = Field(default_factory=AgentConfig)
    status: AgentStatus = AgentStatus.IDLE
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class TaskResult(FrozenModel):
    task_id: str
    status: TaskStatus
    output: Optional[str] = None
    error: Optional[str] = None
    duration: int = 0  # milliseconds
    timestamp: datetime = Field(default_factory=utc_now)
    metadata: Optional[Dict[str, Any]] = None

class AgentResult(FrozenModel):
    agent_id: str
    status: RunStatus
    task_results: List[TaskResult] = Field(default_factory=list)
    duration: int = 0  # milliseconds
    timestamp: datetime = Field(default_factory=utc_now)
    metadata: Optional[Dict[str, Any]] = None

# =========================
# API request/response models
# =========================

class AgentCreateRequest(BaseModel):
    name: str
    description: Optional[str] = None
    timeout: Optional[int] = None
    max_retries: Optional[int] = None
    retry_delay: Optional[int] = None
    retry_backoff: Optional[BackoffStrategy] = None
    tasks: List[Task] = Field(default_factory=list)
    environment: Dict[str, str] = Field(default_factory=dict)

class AgentUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    config: Optional[AgentConfig] = None
    status: Optional[AgentStatus] = None

class TaskPlanEntry(BaseModel):
    position: int
    task_id: str
    name: str
    type: TaskType
    description: str
    dependencies: List[str] = Field(default_factory=list)

class AgentRunPlan(BaseModel):
    agent_id: str
    dry_run: bool = True
    tasks: List[TaskPlanEntry]
