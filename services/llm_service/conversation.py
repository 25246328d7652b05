# conversation.py - Tool-calling conversation runner
# This file drives repeated completions, executing requested tools and feeding their results back.

import asyncio
import json
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional

from shared.errors import LLMRateLimitError, ToolNotFoundError
from .gateway import LLMGateway
from .models import (
    ChatCompletionRequest, ChatCompletionResponse, ChatMessage, ConversationResult, ToolCall
)
from .tools import ToolExecutionContext, ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 5
RATE_LIMIT_MAX_RETRIES = 3
RATE_LIMIT_BASE_DELAY = 1.0  # seconds, doubled on every retry

# Rate-limit messages that mean the request itself is too big
CONTEXT_LIMIT_MARKERS = ("request too large", "tokens per min")
REDUCED_CONTEXT_SIZE = 12

def reduce_context(messages: List[ChatMessage], max_messages: int = 10) -> List[ChatMessage]:
    """Keep the first message and the most recent ones, noting how many were dropped."""
    if len(messages) <= max_messages:
        return list(messages)

    first, others = messages[0], messages[1:]
    keep = max_messages - 1
    recent = others[-keep:] if keep > 0 else []
    notice = ChatMessage(
        role="system",
        content=(
            f"[Context reduced: {len(others) - len(recent)} earlier messages "
            f"were removed to fit token limits]"
        ),
    )
    return [first, notice, *recent]

class ConversationRunner:
    """Runs one conversation turn against the gateway, executing tool calls between completions.

    The loop stops at the first completion without tool calls or after
    `max_iterations` completions. Rate-limit errors are retried with
    exponential backoff; every other gateway error propagates.
    """

    def __init__(self, gateway: LLMGateway, tools: Optional[ToolRegistry] = None,
                 max_retries: int = RATE_LIMIT_MAX_RETRIES,
                 retry_delay: float = RATE_LIMIT_BASE_DELAY,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.gateway = gateway
        self.tools = tools or ToolRegistry()
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.sleep = sleep

    async def run(self, provider: str, user_input: str, model: str = "",
                  system_prompt: Optional[str] = None,
                  history: Optional[List[ChatMessage]] = None,
                  tool_names: Optional[List[str]] = None,
                  max_iterations: int = DEFAULT_MAX_ITERATIONS,
                  conversation_id: Optional[str] = None,
                  agent_id: str = "conversation") -> ConversationResult:
        conversation_id = conversation_id or f"conv-{uuid.uuid4().hex[:12]}"
        tool_names = list(tool_names or [])

        missing = [name for name in tool_names if name not in self.tools.list_tools()]
        if missing:
            raise ToolNotFoundError(", ".join(missing))
        definitions = self.tools.get_definitions(tool_names)

        messages: List[ChatMessage] = []
        if system_prompt:
            messages.append(ChatMessage(role="system", content=system_prompt))
        messages.extend(history or [])
        messages.append(ChatMessage(role="user", content=user_input))

        context = ToolExecutionContext(agent_id=agent_id, conversation_id=conversation_id)
        content = ""
        last_tool_calls: Optional[List[ToolCall]] = None
        tool_results: Optional[Dict[str, Any]] = None
        iterations = 0
        finished = False

        for iteration in range(1, max_iterations + 1):
            iterations = iteration
            logger.info(f"Conversation {conversation_id}: completion {iteration}/{max_iterations}")

            completion = await self._complete(provider, model, messages, definitions, conversation_id)
            messages.append(ChatMessage(
                role="assistant", content=completion.content, tool_calls=completion.tool_calls
            ))

            if completion.tool_calls:
                logger.info(
                    f"Conversation {conversation_id}: running tools "
                    f"{[c.function.name for c in completion.tool_calls]}"
                )
                tool_results = {}
                for call in completion.tool_calls:
                    messages.append(await self._run_tool(call, context, tool_results))
                last_tool_calls = completion.tool_calls
                continue

            content = completion.content
            finished = True
            break

        if not finished:
            logger.warning(
                f"Conversation {conversation_id} reached maximum iterations ({max_iterations})"
            )

        return ConversationResult(
            content=content,
            conversation_id=conversation_id,
            tool_calls=last_tool_calls,
            tool_results=tool_results,
            messages=messages,
            iterations=iterations,
        )

    async def _complete(self, provider: str, model: str, messages: List[ChatMessage],
                        definitions: List[Dict[str, Any]],
                        conversation_id: str) -> ChatCompletionResponse:
        messages_to_send = list(messages)
        attempt = 0
        while True:
            request = ChatCompletionRequest(
                model=model,
                messages=messages_to_send,
                tools=definitions or None,
                tool_choice="auto" if definitions else None,
            )
            try:
                return await self.gateway.create_chat_completion(provider, request)
            except LLMRateLimitError as e:
                if attempt >= self.max_retries:
                    raise

                lowered = e.message.lower()
                if any(marker in lowered for marker in CONTEXT_LIMIT_MARKERS):
                    messages_to_send = reduce_context(messages_to_send, REDUCED_CONTEXT_SIZE)
                    logger.warning(
                        f"Conversation {conversation_id}: request too large, retrying with "
                        f"{len(messages_to_send)} messages"
                    )
                else:
                    logger.warning(f"Conversation {conversation_id}: rate limit hit, retrying")

                await self.sleep(self.retry_delay * (2 ** attempt))
                attempt += 1

    async def _run_tool(self, call: ToolCall, context: ToolExecutionContext,
                        tool_results: Dict[str, Any]) -> ChatMessage:
        name = call.function.name
        try:
            parsed = json.loads(call.function.arguments) if call.function.arguments else {}
            args = parsed if isinstance(parsed, dict) else {}
            result = await self.tools.execute(name, args, context)
        except ToolNotFoundError:
            raise
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.error(f"Tool call {call.id} ({name}) failed: {error}")
            tool_results[name] = {"error": error}
            return ChatMessage(role="tool", name=name, content=f"Error: {error}", tool_call_id=call.id)

        if result.success:
            tool_results[name] = result.result
            content = json.dumps(result.result, default=str)
        else:
            tool_results[name] = {"error": result.error}
            content = f"Error: {result.error}"

        return ChatMessage(role="tool", name=name, content=content, tool_call_id=call.id)
