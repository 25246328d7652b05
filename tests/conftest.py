"""Shared pytest fixtures for agent service and llm service tests."""

from typing import List, Optional

import pytest

from services.agent_service.agent_directory import AgentDirectory
from services.agent_service.mail_service import MailMessage, MailService
from services.agent_service.models import Agent, AgentConfig, Task, TaskType
from services.agent_service.storage.memory_store import InMemoryAgentStore
from services.agent_service.task_dispatcher import TaskDispatcher
from services.agent_service.task_types.registry import build_default_registry
from services.llm_service.config import LLMSettings

PROVIDER_KEY_VARS = [
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "MISTRAL_API_KEY",
    "XAI_API_KEY",
    "OPENAI_BASE_URL",
    "LLM_BACKEND",
    "LLM_DEFAULT_PROVIDER",
]


# ============================================================================
# Mail Fixtures
# ============================================================================


class RecordingMailService(MailService):
    """In-memory mail service that records sent messages."""

    def __init__(self, messages: Optional[List[MailMessage]] = None):
        self.messages = messages or []
        self.sent = []
        self.calls = []

    async def list_emails(self, max_results: int = 10, query: str = "") -> List[MailMessage]:
        self.calls.append(("list", max_results, query))
        return self.messages[:max_results]

    async def get_email(self, email_id: str) -> MailMessage:
        self.calls.append(("get", email_id))
        return next(m for m in self.messages if m.id == email_id)

    async def send_email(self, to, subject, body, cc=None, bcc=None) -> None:
        self.calls.append(("send", list(to), subject))
        self.sent.append({"to": to, "subject": subject, "body": body, "cc": cc, "bcc": bcc})

    async def search_emails(self, query: str, max_results: int = 10) -> List[MailMessage]:
        self.calls.append(("search", query, max_results))
        return [m for m in self.messages if query.lower() in m.subject.lower()][:max_results]


@pytest.fixture
def sample_messages() -> List[MailMessage]:
    return [
        MailMessage(
            id="m1",
            thread_id="t1",
            subject="Weekly report",
            sender="alice@example.com",
            to=["ops@example.com"],
            date="2024-05-01T09:00:00Z",
            snippet="Numbers are in",
            body="Numbers are in. See attached.",
        ),
        MailMessage(
            id="m2",
            thread_id="t2",
            subject="Invoice 42",
            sender="billing@example.com",
            to=["ops@example.com"],
            date="2024-05-02T10:30:00Z",
            snippet="Please find the invoice",
        ),
    ]


@pytest.fixture
def mail_service(sample_messages) -> RecordingMailService:
    return RecordingMailService(sample_messages)


# ============================================================================
# Agent Fixtures
# ============================================================================


@pytest.fixture
def registry(mail_service):
    return build_default_registry(mail_service)


@pytest.fixture
def store() -> InMemoryAgentStore:
    return InMemoryAgentStore()


@pytest.fixture
def directory(store, registry) -> AgentDirectory:
    return AgentDirectory(store, registry)


@pytest.fixture
def dispatcher(registry) -> TaskDispatcher:
    return TaskDispatcher(registry)


@pytest.fixture
def list_task() -> Task:
    return Task(
        id="list-inbox",
        name="List inbox",
        type=TaskType.MAIL,
        config={"mail_operation": "list", "max_results": 5},
    )


@pytest.fixture
def command_task() -> Task:
    return Task(id="cmd", name="Run backup", type=TaskType.COMMAND, config={"command": "backup.sh"})


@pytest.fixture
def make_agent():
    """Build a stored-shape agent around the given tasks."""

    def _make(tasks: List[Task], name: str = "mail-bot") -> Agent:
        return Agent(
            id="agent-1",
            name=name,
            description="Agent under test",
            config=AgentConfig(tasks=tasks, timeout=30000),
        )

    return _make


# ============================================================================
# LLM Fixtures
# ============================================================================


@pytest.fixture
def clean_llm_env(monkeypatch):
    """Remove provider credentials inherited from the environment."""
    for var in PROVIDER_KEY_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def llm_settings(clean_llm_env) -> LLMSettings:
    return LLMSettings(_env_file=None, openai_api_key="sk-test", mistral_api_key="ms-test")


@pytest.fixture
def raw_completion() -> dict:
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "model": "gpt-4o-mini-2024-07-18",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello there"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15},
    }
