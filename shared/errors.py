# errors.py - Error taxonomy shared by all services
# This file defines the closed set of structured error kinds raised by the agent and llm services.

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for every structured error. Subclasses set a unique `tag`."""

    tag = "ServiceError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        """Structured context for the error, used by API responses and logs."""
        return {"message": self.message}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.tag, **self.details()}


# =========================
# Agent errors
# =========================

class AgentError(ServiceError):
    tag = "AgentError"


class ValidationError(AgentError):
    tag = "ValidationError"

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value

    def details(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message, "value": self.value}


class AgentConfigurationError(AgentError):
    tag = "AgentConfigurationError"

    def __init__(self, agent_id: str, field: str, message: str):
        super().__init__(message)
        self.agent_id = agent_id
        self.field = field

    def details(self) -> Dict[str, Any]:
        return {"agent_id": self.agent_id, "field": self.field, "message": self.message}


class AgentAlreadyExistsError(AgentError):
    tag = "AgentAlreadyExistsError"

    def __init__(self, agent_id: str):
        super().__init__(f"Agent already exists: {agent_id}")
        self.agent_id = agent_id

    def details(self) -> Dict[str, Any]:
        return {"agent_id": self.agent_id, "message": self.message}


# =========================
# Storage errors
# =========================

class PersistenceError(ServiceError):
    tag = "PersistenceError"


class StorageError(PersistenceError):
    tag = "StorageError"

    def __init__(self, operation: str, path: str, reason: str):
        super().__init__(f"Storage {operation} failed for {path}: {reason}")
        self.operation = operation
        self.path = path
        self.reason = reason

    def details(self) -> Dict[str, Any]:
        return {"operation": self.operation, "path": self.path, "reason": self.reason}


class StorageNotFoundError(PersistenceError):
    tag = "StorageNotFoundError"

    def __init__(self, path: str):
        super().__init__(f"Not found: {path}")
        self.path = path

    def details(self) -> Dict[str, Any]:
        return {"path": self.path, "message": self.message}


# =========================
# Mail errors
# =========================

class MailError(ServiceError):
    tag = "MailError"


class MailAuthenticationError(MailError):
    tag = "MailAuthenticationError"


class MailOperationError(MailError):
    tag = "MailOperationError"


class MailTaskError(MailError):
    tag = "MailTaskError"

    def __init__(self, task_id: str, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.task_id = task_id
        self.cause = cause

    def details(self) -> Dict[str, Any]:
        return {"task_id": self.task_id, "message": self.message}


# =========================
# LLM errors
# =========================

class LLMError(ServiceError):
    tag = "LLMError"

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider

    def details(self) -> Dict[str, Any]:
        return {"provider": self.provider, "message": self.message}


class LLMConfigurationError(LLMError):
    tag = "LLMConfigurationError"


class LLMAuthenticationError(LLMError):
    tag = "LLMAuthenticationError"


class LLMRequestError(LLMError):
    tag = "LLMRequestError"


class LLMRateLimitError(LLMError):
    tag = "LLMRateLimitError"


# =========================
# Tool errors
# =========================

class ToolError(ServiceError):
    tag = "ToolError"


class ToolNotFoundError(ToolError):
    tag = "ToolNotFoundError"

    def __init__(self, tool_name: str):
        super().__init__(f"Tool not found: {tool_name}")
        self.tool_name = tool_name

    def details(self) -> Dict[str, Any]:
        return {"tool_name": self.tool_name, "message": self.message}
