# base.py - Abstract base class for completion backends
# This file defines the interface a backend implements to issue one chat completion call.

from abc import ABC, abstractmethod
from typing import Any, Dict

from ..providers import ProviderConfig

class CompletionBackend(ABC):
    """Sends an already-built payload and returns the raw reply as plain data.

    Failures are raised as ordinary exceptions; the gateway classifies them.
    """

    name: str = "base"

    @abstractmethod
    async def complete(self, provider: ProviderConfig, payload: Dict[str, Any]) -> Any:
        pass

    async def aclose(self) -> None:
        pass
