"""Tests for tool definitions, argument validation and the tool registry."""

import pytest
from pydantic import BaseModel

from services.llm_service.tools import (
    BaseTool, ToolExecutionContext, ToolExecutionResult, ToolRegistry
)
from shared.errors import ToolNotFoundError


class AddArgs(BaseModel):
    a: int
    b: int


class AddTool(BaseTool):
    name = "add"
    description = "Add two integers"
    args_model = AddArgs

    async def run(self, args, context):
        return ToolExecutionResult(success=True, result={"sum": args.a + args.b})


class EchoTool(BaseTool):
    name = "echo"
    description = "Return the arguments unchanged"

    async def run(self, args, context):
        return ToolExecutionResult(success=True, result=args)


class BrokenTool(BaseTool):
    name = "broken"
    description = "Always fails"

    async def run(self, args, context):
        raise RuntimeError("disk on fire")


@pytest.fixture
def tools() -> ToolRegistry:
    return ToolRegistry([AddTool(), EchoTool(), BrokenTool()])


@pytest.fixture
def context() -> ToolExecutionContext:
    return ToolExecutionContext(agent_id="agent-1", conversation_id="conv-1")


def test_list_tools_in_registration_order(tools):
    assert tools.list_tools() == ["add", "echo", "broken"]


def test_register_replaces_same_name(tools):
    replacement = EchoTool()
    replacement.description = "Louder echo"
    tools.register(replacement)

    assert tools.list_tools() == ["add", "echo", "broken"]
    assert tools.get("echo").description == "Louder echo"


def test_get_unknown_tool_raises(tools):
    with pytest.raises(ToolNotFoundError) as exc_info:
        tools.get("rm")

    assert exc_info.value.tool_name == "rm"
    assert exc_info.value.message == "Tool not found: rm"


def test_definition_uses_args_model_schema(tools):
    definition = tools.get("add").definition()

    assert definition["type"] == "function"
    assert definition["function"]["name"] == "add"
    assert definition["function"]["description"] == "Add two integers"
    parameters = definition["function"]["parameters"]
    assert set(parameters["properties"]) == {"a", "b"}
    assert set(parameters["required"]) == {"a", "b"}


def test_definition_without_args_model_is_empty_object(tools):
    parameters = tools.get("echo").definition()["function"]["parameters"]
    assert parameters == {"type": "object", "properties": {}}


def test_get_definitions_filters_by_name(tools):
    names = [d["function"]["name"] for d in tools.get_definitions(["echo", "add"])]
    assert names == ["echo", "add"]

    assert len(tools.get_definitions()) == 3

    with pytest.raises(ToolNotFoundError):
        tools.get_definitions(["add", "nope"])


@pytest.mark.asyncio
async def test_execute_validates_and_runs(tools, context):
    result = await tools.execute("add", {"a": 2, "b": 3}, context)

    assert result.success is True
    assert result.result == {"sum": 5}


@pytest.mark.asyncio
async def test_execute_with_invalid_arguments_is_unsuccessful(tools, context):
    result = await tools.execute("add", {"a": "two"}, context)

    assert result.success is False
    assert "a:" in result.error
    assert "b:" in result.error


@pytest.mark.asyncio
async def test_execute_passes_raw_arguments_without_args_model(tools, context):
    result = await tools.execute("echo", {"anything": [1, 2]}, context)
    assert result.result == {"anything": [1, 2]}


@pytest.mark.asyncio
async def test_execute_propagates_tool_exceptions(tools, context):
    with pytest.raises(RuntimeError, match="disk on fire"):
        await tools.execute("broken", {}, context)


@pytest.mark.asyncio
async def test_execute_unknown_tool_raises(tools, context):
    with pytest.raises(ToolNotFoundError):
        await tools.execute("missing", {}, context)
