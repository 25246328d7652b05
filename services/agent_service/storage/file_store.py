# file_store.py - JSON file agent store
# This file persists one JSON document per agent under <base_path>/agents/<id>.json.

import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError as ModelValidationError

from shared.errors import StorageError, StorageNotFoundError
from ..models import Agent
from .base import AgentStore

logger = logging.getLogger(__name__)

class FileAgentStore(AgentStore):
    def __init__(self, base_path: str):
        self.base_path = Path(base_path)

    @property
    def agents_dir(self) -> Path:
        return self.base_path / "agents"

    def _agent_path(self, agent_id: str) -> Path:
        return self.agents_dir / f"{agent_id}.json"

    def _ensure_directory(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("mkdir", str(path), f"Failed to create directory: {e}")

    def _read_agent(self, path: Path) -> Agent:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise StorageNotFoundError(str(path))
        except OSError as e:
            raise StorageError("read", str(path), f"Failed to read file: {e}")

        try:
            # Dates are stored as ISO-8601 strings; the model parses them back
            return Agent.model_validate(json.loads(content))
        except (json.JSONDecodeError, ModelValidationError) as e:
            raise StorageError("read", str(path), f"Invalid agent document: {e}")

    async def save_agent(self, agent: Agent) -> None:
        self._ensure_directory(self.agents_dir)
        path = self._agent_path(agent.id)
        try:
            path.write_text(
                json.dumps(agent.model_dump(mode="json"), indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            raise StorageError("write", str(path), f"Failed to write file: {e}")
        logger.debug(f"Saved agent {agent.id} to {path}")

    async def get_agent(self, agent_id: str) -> Agent:
        return self._read_agent(self._agent_path(agent_id))

    async def list_agents(self) -> List[Agent]:
        self._ensure_directory(self.agents_dir)
        try:
            paths = sorted(self.agents_dir.glob("*.json"))
        except OSError as e:
            raise StorageError("list", str(self.agents_dir), f"Failed to list directory: {e}")
        return [self._read_agent(path) for path in paths]

    async def delete_agent(self, agent_id: str) -> None:
        path = self._agent_path(agent_id)
        try:
            path.unlink()
        except FileNotFoundError:
            raise StorageNotFoundError(str(path))
        except OSError as e:
            raise StorageError("delete", str(path), f"Failed to delete file: {e}")
        logger.debug(f"Deleted agent file {path}")

    async def ping(self) -> bool:
        self._ensure_directory(self.agents_dir)
        return True
