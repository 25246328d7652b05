# mail_service.py - Mail capability consumed by mail tasks
# This file defines the mail service interface and the normalized message record.

from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel, Field

from shared.errors import MailAuthenticationError

class MailAttachment(BaseModel):
    filename: str
    mime_type: str
    size: int

class MailMessage(BaseModel):
    id: str
    thread_id: str
    subject: str
    sender: str = Field(alias="from")
    to: List[str] = Field(default_factory=list)
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    date: str
    snippet: str = ""
    body: Optional[str] = None
    attachments: Optional[List[MailAttachment]] = None

    model_config = {"populate_by_name": True}

    def summary(self) -> dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "from": self.sender,
            "date": self.date,
            "snippet": self.snippet,
        }

class MailService(ABC):
    """Mail provider capability.

    Implementations raise MailAuthenticationError when credentials are missing or
    rejected and MailOperationError for every other provider failure.
    """

    @abstractmethod
    async def list_emails(self, max_results: int = 10, query: str = "") -> List[MailMessage]:
        pass

    @abstractmethod
    async def get_email(self, email_id: str) -> MailMessage:
        pass

    @abstractmethod
    async def send_email(self, to: List[str], subject: str, body: str,
                         cc: Optional[List[str]] = None,
                         bcc: Optional[List[str]] = None) -> None:
        pass

    @abstractmethod
    async def search_emails(self, query: str, max_results: int = 10) -> List[MailMessage]:
        pass

class UnconfiguredMailService(MailService):
    """Stand-in used when no mail provider is wired into the service."""

    def _fail(self):
        raise MailAuthenticationError("Mail service is not configured")

    async def list_emails(self, max_results: int = 10, query: str = "") -> List[MailMessage]:
        self._fail()

    async def get_email(self, email_id: str) -> MailMessage:
        self._fail()

    async def send_email(self, to, subject, body, cc=None, bcc=None) -> None:
        self._fail()

    async def search_emails(self, query: str, max_results: int = 10) -> List[MailMessage]:
        self._fail()
