# tools.py - Tool registry for conversation runs
# This file defines the tool interface and the registry that describes tools to the model and executes them.

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel, ValidationError as ModelValidationError

from shared.errors import ToolNotFoundError

logger = logging.getLogger(__name__)

class ToolExecutionContext(BaseModel):
    agent_id: str
    conversation_id: Optional[str] = None
    user_id: Optional[str] = None

class ToolExecutionResult(BaseModel):
    success: bool
    result: Any = None
    error: Optional[str] = None

class BaseTool(ABC):
    """A function the model may call.

    When `args_model` is set, arguments are validated against it before `run`
    and its JSON schema is what the model sees. Invalid arguments produce an
    unsuccessful result instead of an exception.
    """

    name: str
    description: str
    args_model: Optional[Type[BaseModel]] = None

    @property
    def parameters(self) -> Dict[str, Any]:
        if self.args_model is None:
            return {"type": "object", "properties": {}}
        return self.args_model.model_json_schema()

    def definition(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    async def execute(self, args: Dict[str, Any], context: ToolExecutionContext) -> ToolExecutionResult:
        if self.args_model is None:
            return await self.run(args, context)

        try:
            parsed = self.args_model.model_validate(args)
        except ModelValidationError as e:
            problems = [
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            ]
            return ToolExecutionResult(success=False, error="; ".join(problems))
        return await self.run(parsed, context)

    @abstractmethod
    async def run(self, args: Any, context: ToolExecutionContext) -> ToolExecutionResult:
        pass

class ToolRegistry:
    def __init__(self, tools: Iterable[BaseTool] = ()):
        self._tools: Dict[str, BaseTool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Register a tool, replacing any previous one with the same name."""
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool {tool.name}")

    def get(self, name: str) -> BaseTool:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def list_tools(self) -> List[str]:
        return list(self._tools.keys())

    def get_definitions(self, names: Optional[Iterable[str]] = None) -> List[Dict[str, Any]]:
        """Definitions for the named tools, or every tool when no names are given."""
        if names is None:
            return [tool.definition() for tool in self._tools.values()]
        return [self.get(name).definition() for name in names]

    async def execute(self, name: str, args: Dict[str, Any],
                      context: ToolExecutionContext) -> ToolExecutionResult:
        tool = self.get(name)
        start_time = time.monotonic()
        try:
            result = await tool.execute(args, context)
        except Exception as e:
            logger.error(
                f"Tool {name} failed for agent {context.agent_id} after "
                f"{int((time.monotonic() - start_time) * 1000)}ms: {str(e)}"
            )
            raise

        logger.info(
            f"Tool {name} executed for agent {context.agent_id} in "
            f"{int((time.monotonic() - start_time) * 1000)}ms (success={result.success})"
        )
        return result
