"""Tests for the direct HTTP and delegation completion backends."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest
from openai.types.chat import ChatCompletion

from services.llm_service.backends.delegation_backend import DelegationCompletionBackend
from services.llm_service.backends.http_backend import HttpCompletionBackend, HttpStatusFailure
from services.llm_service.gateway import LLMGateway
from services.llm_service.models import ChatCompletionRequest, ChatMessage
from services.llm_service.providers import PROVIDER_CATALOG, ProviderConfig
from shared.errors import LLMAuthenticationError, LLMRateLimitError, LLMRequestError


@pytest.fixture
def provider() -> ProviderConfig:
    spec = PROVIDER_CATALOG["openai"]
    return ProviderConfig(name="openai", base_url=spec.base_url, api_key="sk-test", spec=spec)


@pytest.fixture
def tool_reply() -> dict:
    """Reply carrying both tool-call representations."""
    return {
        "id": "chatcmpl-tools",
        "object": "chat.completion",
        "created": 1714550400,
        "model": "gpt-4o-2024-08-06",
        "choices": [{
            "index": 0,
            "finish_reason": "tool_calls",
            "message": {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {"id": "call_b", "type": "function",
                     "function": {"name": "weather", "arguments": '{"city": "Oslo"}'}},
                    {"id": "call_a", "type": "function",
                     "function": {"name": "time", "arguments": '{"tz": "CET"}'}},
                ],
                "function_call": {"name": "legacy", "arguments": "{}"},
            },
        }],
        "usage": {"prompt_tokens": 40, "completion_tokens": 18, "total_tokens": 58},
    }


def http_backend_replying(status_code: int, body, seen: list) -> HttpCompletionBackend:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if isinstance(body, dict):
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, text=body)

    return HttpCompletionBackend(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def delegation_backend_replying(completion) -> DelegationCompletionBackend:
    client = SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=AsyncMock(return_value=completion))),
        close=AsyncMock(),
    )
    return DelegationCompletionBackend(client_factory=lambda provider: client)


# ============================================================================
# Direct HTTP backend
# ============================================================================


@pytest.mark.asyncio
async def test_http_backend_posts_payload(provider, raw_completion):
    seen = []
    backend = http_backend_replying(200, raw_completion, seen)
    payload = {"model": "gpt-4o-mini", "messages": [{"role": "user", "content": "hi"}]}

    reply = await backend.complete(provider, payload)

    assert reply == raw_completion
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert json.loads(request.content) == payload
    await backend.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code,expected",
    [
        (401, LLMAuthenticationError),
        (403, LLMAuthenticationError),
        (429, LLMRateLimitError),
        (500, LLMRequestError),
        (400, LLMRequestError),
    ],
)
async def test_http_status_failures_are_classified(llm_settings, status_code, expected):
    backend = http_backend_replying(status_code, "upstream said no", [])
    gateway = LLMGateway(llm_settings, backend=backend)
    request = ChatCompletionRequest(messages=[ChatMessage(role="user", content="hi")])

    with pytest.raises(expected) as exc_info:
        await gateway.create_chat_completion("openai", request)

    assert f"HTTP {status_code}" in exc_info.value.message
    assert "upstream said no" in exc_info.value.message
    await gateway.aclose()


def test_http_status_failure_message():
    failure = HttpStatusFailure(429, "slow down")

    assert failure.status_code == 429
    assert str(failure) == "rate limit exceeded (HTTP 429): slow down"


# ============================================================================
# Delegation backend
# ============================================================================


@pytest.mark.asyncio
async def test_delegation_backend_reuses_one_client_per_provider(provider, raw_completion):
    created = []

    def factory(config):
        client = SimpleNamespace(
            chat=SimpleNamespace(completions=SimpleNamespace(
                create=AsyncMock(return_value=raw_completion))),
            close=AsyncMock(),
        )
        created.append(client)
        return client

    backend = DelegationCompletionBackend(client_factory=factory)
    payload = {"model": "gpt-4o-mini", "messages": [{"role": "user", "content": "hi"}]}

    await backend.complete(provider, payload)
    await backend.complete(provider, payload)

    assert len(created) == 1
    assert created[0].chat.completions.create.await_count == 2
    created[0].chat.completions.create.assert_awaited_with(**payload)

    await backend.aclose()
    created[0].close.assert_awaited_once()


@pytest.mark.asyncio
async def test_delegation_failures_are_classified(llm_settings):
    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(
        create=AsyncMock(side_effect=RuntimeError("Error code: 429 - Rate limit reached")))))
    backend = DelegationCompletionBackend(client_factory=lambda provider: client)
    gateway = LLMGateway(llm_settings, backend=backend)
    request = ChatCompletionRequest(messages=[ChatMessage(role="user", content="hi")])

    with pytest.raises(LLMRateLimitError):
        await gateway.create_chat_completion("openai", request)


# ============================================================================
# Interchangeability
# ============================================================================


@pytest.mark.asyncio
async def test_backends_produce_identical_responses(llm_settings, tool_reply):
    request = ChatCompletionRequest(
        messages=[
            ChatMessage(role="system", content="Use tools"),
            ChatMessage(role="user", content="Weather and time in Oslo?"),
        ],
        tools=[{"type": "function", "function": {"name": "weather", "parameters": {}}}],
        temperature=0.2,
    )

    seen = []
    http_gateway = LLMGateway(llm_settings, backend=http_backend_replying(200, tool_reply, seen))
    delegation_backend = delegation_backend_replying(ChatCompletion.model_validate(tool_reply))
    delegation_gateway = LLMGateway(llm_settings, backend=delegation_backend)

    http_response = await http_gateway.create_chat_completion("openai", request)
    delegation_response = await delegation_gateway.create_chat_completion("openai", request)

    assert http_response == delegation_response
    assert http_response.model_dump_json() == delegation_response.model_dump_json()
    assert [c.id for c in http_response.tool_calls] == ["call_b", "call_a"]
    assert http_response.content == ""

    # Both backends were sent the same payload
    delegated_payload = delegation_backend._clients["openai"].chat.completions.create.call_args.kwargs
    assert json.loads(seen[0].content) == delegated_payload

    await http_gateway.aclose()
    await delegation_gateway.aclose()


@pytest.mark.asyncio
async def test_backends_agree_on_legacy_function_call(llm_settings, tool_reply):
    tool_reply["choices"][0]["message"]["tool_calls"] = None
    request = ChatCompletionRequest(messages=[ChatMessage(role="user", content="hi")])

    http_gateway = LLMGateway(llm_settings, backend=http_backend_replying(200, tool_reply, []))
    delegation_gateway = LLMGateway(
        llm_settings,
        backend=delegation_backend_replying(ChatCompletion.model_validate(tool_reply)),
    )

    http_response = await http_gateway.create_chat_completion("openai", request)
    delegation_response = await delegation_gateway.create_chat_completion("openai", request)

    assert http_response == delegation_response
    assert len(http_response.tool_calls) == 1
    assert http_response.tool_calls[0].function.name == "legacy"

    await http_gateway.aclose()
    await delegation_gateway.aclose()
