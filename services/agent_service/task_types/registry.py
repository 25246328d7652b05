# registry.py - Task handler registry
# This file maps task types to the handler that validates and executes them.

import logging
from typing import Dict, Iterable, List, Optional

from ..mail_service import MailService, UnconfiguredMailService
from ..models import TaskType
from .base_task import BaseTaskHandler
from .basic_tasks import (
    ApiTaskHandler, CommandTaskHandler, CustomTaskHandler,
    FileTaskHandler, ScriptTaskHandler, WebhookTaskHandler
)
from .mail_task import MailTaskHandler

logger = logging.getLogger(__name__)

class TaskHandlerRegistry:
    def __init__(self, handlers: Iterable[BaseTaskHandler] = ()):
        self._handlers: Dict[TaskType, BaseTaskHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: BaseTaskHandler) -> None:
        """Register a handler, replacing any previous one for the same type."""
        self._handlers[handler.task_type] = handler
        logger.debug(f"Registered task handler for type {handler.task_type.value}")

    def get(self, task_type: TaskType) -> Optional[BaseTaskHandler]:
        return self._handlers.get(task_type)

    def get_executor(self, task_type: TaskType) -> Optional[BaseTaskHandler]:
        handler = self._handlers.get(task_type)
        if handler is None or not handler.executable:
            return None
        return handler

    def task_types(self) -> List[TaskType]:
        return list(self._handlers.keys())

def build_default_registry(mail_service: Optional[MailService] = None) -> TaskHandlerRegistry:
    """Registry with every built-in task type; only mail tasks execute."""
    return TaskHandlerRegistry([
        CommandTaskHandler(),
        ScriptTaskHandler(),
        ApiTaskHandler(),
        FileTaskHandler(),
        WebhookTaskHandler(),
        CustomTaskHandler(),
        MailTaskHandler(mail_service or UnconfiguredMailService()),
    ])
