# mail_task.py - Mail task implementation
# This file implements the mail task type: list, get, send and search operations.

import json
import logging
import time
from typing import Any, Awaitable, Dict, List, Optional

from shared.errors import (
    AgentConfigurationError, MailAuthenticationError, MailError, MailTaskError
)
from ..mail_service import MailService
from ..models import MailOperation, Task, TaskResult, TaskStatus, TaskType
from .base_task import BaseTaskHandler

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10

class MailTaskHandler(BaseTaskHandler):
    task_type = TaskType.MAIL
    executable = True

    def __init__(self, mail_service: MailService):
        self.mail_service = mail_service

    def validate_config(self, task: Task) -> None:
        operation = task.config.get("mail_operation")
        if not operation:
            raise AgentConfigurationError(
                agent_id="unknown",
                field=f"task.{task.id}.config.mail_operation",
                message="Mail tasks must have an operation specified",
            )
        if operation not in {op.value for op in MailOperation}:
            raise AgentConfigurationError(
                agent_id="unknown",
                field=f"task.{task.id}.config.mail_operation",
                message=f"Unknown mail operation: {operation}",
            )

    async def execute(self, task: Task) -> TaskResult:
        start_time = time.monotonic()
        operation = task.config.get("mail_operation")
        logger.info(f"Executing mail task {task.id} ({operation})")

        if operation == MailOperation.LIST.value:
            return await self._list_emails(task, start_time)
        elif operation == MailOperation.GET.value:
            return await self._get_email(task, start_time)
        elif operation == MailOperation.SEND.value:
            return await self._send_email(task, start_time)
        elif operation == MailOperation.SEARCH.value:
            return await self._search_emails(task, start_time)

        return self._failure(task, start_time, f"Unknown mail operation: {operation}")

    async def _list_emails(self, task: Task, start_time: float) -> TaskResult:
        max_results = task.config.get("max_results") or DEFAULT_MAX_RESULTS
        query = task.config.get("query") or ""

        emails = await self._call(task, self.mail_service.list_emails(max_results, query))
        summaries = [email.summary() for email in emails]

        return self._success(
            task, start_time,
            output=json.dumps(summaries, indent=2),
            metadata={"email_count": len(emails), "query": query or "inbox"},
        )

    async def _get_email(self, task: Task, start_time: float) -> TaskResult:
        email_id = task.config.get("email_id")
        if not email_id:
            return self._failure(task, start_time, "Email ID is required for get operation")

        email = await self._call(task, self.mail_service.get_email(email_id))

        return self._success(
            task, start_time,
            output=json.dumps(email.model_dump(by_alias=True, exclude_none=True), indent=2),
            metadata={"email_id": email.id, "subject": email.subject},
        )

    async def _send_email(self, task: Task, start_time: float) -> TaskResult:
        to: List[str] = task.config.get("to") or []
        subject = task.config.get("subject") or ""
        body = task.config.get("body") or ""
        cc: Optional[List[str]] = task.config.get("cc") or None
        bcc: Optional[List[str]] = task.config.get("bcc") or None

        if not to or not subject or not body:
            return self._failure(
                task, start_time,
                "Recipients, subject, and body are required for send operation",
            )

        await self._call(task, self.mail_service.send_email(to, subject, body, cc=cc, bcc=bcc))

        return self._success(
            task, start_time,
            output=f"Email sent successfully to {', '.join(to)}",
            metadata={"recipients": len(to), "subject": subject},
        )

    async def _search_emails(self, task: Task, start_time: float) -> TaskResult:
        query = task.config.get("query") or ""
        max_results = task.config.get("max_results") or DEFAULT_MAX_RESULTS

        if not query:
            return self._failure(task, start_time, "Search query is required for search operation")

        emails = await self._call(task, self.mail_service.search_emails(query, max_results))
        summaries = [email.summary() for email in emails]

        return self._success(
            task, start_time,
            output=json.dumps(summaries, indent=2),
            metadata={"email_count": len(emails), "query": query},
        )

    async def _call(self, task: Task, call: Awaitable[Any]) -> Any:
        """Await a mail service call, wrapping provider errors as MailTaskError."""
        try:
            return await call
        except MailAuthenticationError as e:
            raise MailTaskError(task.id, f"Authentication error: {e.message}", e)
        except MailError as e:
            raise MailTaskError(task.id, f"Operation error: {e.message}", e)

    def _success(self, task: Task, start_time: float, output: str,
                 metadata: Dict[str, Any]) -> TaskResult:
        return TaskResult(
            task_id=task.id,
            status=TaskStatus.SUCCESS,
            output=output,
            duration=_elapsed_ms(start_time),
            metadata=metadata,
        )

    def _failure(self, task: Task, start_time: float, error: str) -> TaskResult:
        logger.warning(f"Mail task {task.id} failed: {error}")
        return TaskResult(
            task_id=task.id,
            status=TaskStatus.FAILURE,
            error=error,
            duration=_elapsed_ms(start_time),
        )

def _elapsed_ms(start_time: float) -> int:
    return int((time.monotonic() - start_time) * 1000)
