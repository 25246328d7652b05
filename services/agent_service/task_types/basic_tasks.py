# basic_tasks.py - Placeholder task types
# This file implements config validation for task types that have no executor yet.

from ..models import Task, TaskType
from .base_task import BaseTaskHandler

class CommandTaskHandler(BaseTaskHandler):
    task_type = TaskType.COMMAND

    def validate_config(self, task: Task) -> None:
        self.require_text(task, "command", "Command tasks must have a command specified")

class ScriptTaskHandler(BaseTaskHandler):
    task_type = TaskType.SCRIPT

    def validate_config(self, task: Task) -> None:
        self.require_text(task, "script", "Script tasks must have a script specified")

class ApiTaskHandler(BaseTaskHandler):
    task_type = TaskType.API

    def validate_config(self, task: Task) -> None:
        self.require_text(task, "url", "API tasks must have a URL specified")

class FileTaskHandler(BaseTaskHandler):
    task_type = TaskType.FILE

    def validate_config(self, task: Task) -> None:
        self.require_text(task, "file_path", "File tasks must have a file path specified")

class WebhookTaskHandler(BaseTaskHandler):
    task_type = TaskType.WEBHOOK

class CustomTaskHandler(BaseTaskHandler):
    task_type = TaskType.CUSTOM
