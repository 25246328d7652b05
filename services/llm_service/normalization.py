# normalization.py - Request translation, reply normalization and error classification
# This file is shared by both completion backends: same request and raw reply, same payload and response.

import hashlib
import json
import logging
from typing import Any, Dict, List, Optional

from shared.errors import (
    LLMAuthenticationError, LLMError, LLMRateLimitError, LLMRequestError
)
from .models import (
    ChatCompletionRequest, ChatCompletionResponse, ChatMessage, TokenUsage,
    ToolCall, ToolCallFunction
)

logger = logging.getLogger(__name__)

# Roles passed through as-is; anything else is folded into an assistant message
SUPPORTED_ROLES = ("system", "user", "assistant")

AUTHENTICATION_MARKERS = ("authentication", "api key")
RATE_LIMIT_MARKERS = ("rate limit", "quota")


# =========================
# Request side
# =========================

def resolve_model(provider: str, model: str, default_model: str) -> str:
    """Pick the model id to send, dropping a "<provider>/" prefix if present."""
    resolved = model or default_model
    prefix = f"{provider.lower()}/"
    if resolved.lower().startswith(prefix):
        resolved = resolved[len(prefix):]
    return resolved

def to_backend_message(message: ChatMessage) -> Dict[str, Any]:
    if message.role not in SUPPORTED_ROLES:
        # Lossy: the tool role is not carried on this path
        return {"role": "assistant", "content": message.content}

    converted: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.name:
        converted["name"] = message.name
    return converted

def build_payload(request: ChatCompletionRequest, model: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "model": model,
        "messages": [to_backend_message(m) for m in request.messages],
    }
    if request.temperature is not None:
        payload["temperature"] = request.temperature
    if request.max_tokens is not None:
        payload["max_tokens"] = request.max_tokens
    if request.tools:
        payload["tools"] = list(request.tools)
    if request.tool_choice is not None:
        payload["tool_choice"] = request.tool_choice
    return payload


# =========================
# Response side
# =========================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def _arguments_text(arguments: Any) -> Optional[str]:
    if isinstance(arguments, str):
        return arguments
    if isinstance(arguments, (dict, list)):
        return json.dumps(arguments)
    return None

def _parse_tool_calls(raw: Any) -> List[ToolCall]:
    if not isinstance(raw, list):
        return []

    tool_calls = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
            continue
        function = entry.get("function")
        if not isinstance(function, dict) or not isinstance(function.get("name"), str):
            continue
        arguments = _arguments_text(function.get("arguments"))
        if arguments is None:
            continue
        tool_calls.append(ToolCall(
            id=entry["id"],
            function=ToolCallFunction(name=function["name"], arguments=arguments),
        ))
    return tool_calls

def legacy_tool_call_id(name: str, arguments: str) -> str:
    """Deterministic id for a tool call synthesized from a legacy function_call."""
    digest = hashlib.sha256(f"{name}\x00{arguments}".encode("utf-8")).hexdigest()
    return f"call_{digest[:24]}"

def _parse_function_call(raw: Any) -> List[ToolCall]:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        return []
    arguments = _arguments_text(raw.get("arguments"))
    if arguments is None:
        return []
    return [ToolCall(
        id=legacy_tool_call_id(raw["name"], arguments),
        function=ToolCallFunction(name=raw["name"], arguments=arguments),
    )]

def _parse_usage(raw: Any) -> Optional[TokenUsage]:
    if not isinstance(raw, dict):
        return None
    counts = [raw.get("prompt_tokens"), raw.get("completion_tokens"), raw.get("total_tokens")]
    if not all(_is_number(c) for c in counts):
        return None
    return TokenUsage(
        prompt_tokens=int(counts[0]),
        completion_tokens=int(counts[1]),
        total_tokens=int(counts[2]),
    )

def parse_completion(raw: Any, requested_model: str) -> ChatCompletionResponse:
    """Normalize a raw chat completion reply, trusting no field's shape."""
    if not isinstance(raw, dict):
        logger.warning(f"Unexpected completion reply type: {type(raw).__name__}")
        raw = {}

    response_id = raw.get("id") if isinstance(raw.get("id"), str) else ""
    model = raw.get("model") if isinstance(raw.get("model"), str) and raw.get("model") else requested_model

    choices = raw.get("choices") if isinstance(raw.get("choices"), list) else []
    first_choice = choices[0] if choices and isinstance(choices[0], dict) else {}
    message = first_choice.get("message") if isinstance(first_choice.get("message"), dict) else {}

    content = message.get("content") if isinstance(message.get("content"), str) else ""

    # The tool_calls array wins; function_call is only read when it yields nothing
    tool_calls = _parse_tool_calls(message.get("tool_calls"))
    if not tool_calls:
        tool_calls = _parse_function_call(message.get("function_call"))

    return ChatCompletionResponse(
        id=response_id,
        model=model,
        content=content,
        tool_calls=tool_calls or None,
        usage=_parse_usage(raw.get("usage")),
    )


# =========================
# Errors
# =========================

def classify_error(provider: str, error: Exception) -> LLMError:
    """Map a backend failure to an LLM error kind by matching its message text.

    Matching is case-insensitive on English substrings, so a backend that
    rewords its messages changes the classification.
    """
    if isinstance(error, LLMError):
        return error

    message = str(error) or type(error).__name__
    lowered = message.lower()

    if any(marker in lowered for marker in AUTHENTICATION_MARKERS):
        return LLMAuthenticationError(provider, message)
    if any(marker in lowered for marker in RATE_LIMIT_MARKERS):
        return LLMRateLimitError(provider, message)
    return LLMRequestError(provider, message)
