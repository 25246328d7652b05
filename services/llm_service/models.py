# models.py - Chat completion request/response models
# This file defines the provider-agnostic contract shared by every completion backend.

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional, Union

class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

class ToolCallFunction(FrozenModel):
    name: str
    arguments: str  # JSON-encoded

class ToolCall(FrozenModel):
    id: str
    type: Literal["function"] = "function"
    function: ToolCallFunction

class ChatMessage(FrozenModel):
    role: Literal["system", "user", "assistant", "tool"]
    content: str = ""
    name: Optional[str] = None
    tool_call_id: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None

class ChatCompletionRequest(FrozenModel):
    model: str = ""  # empty means the provider's default model
    messages: List[ChatMessage]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    tools: Optional[List[Dict[str, Any]]] = None
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None
    stream: bool = False

class TokenUsage(FrozenModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

class ChatCompletionResponse(FrozenModel):
    id: str = ""
    model: str
    content: str = ""
    tool_calls: Optional[List[ToolCall]] = None
    usage: Optional[TokenUsage] = None

class ProviderDescriptor(FrozenModel):
    name: str
    default_model: str
    supported_models: List[str] = Field(default_factory=list)
    supports_tool_calling: bool = True
    supports_streaming: bool = False
    supports_vision: bool = False
    configured: bool = False

class CompletionRequestBody(ChatCompletionRequest):
    """HTTP body for /llm/chat/completions; provider falls back to the gateway default."""
    provider: Optional[str] = None

    def to_request(self) -> ChatCompletionRequest:
        return ChatCompletionRequest(**self.model_dump(exclude={"provider"}))

# =========================
# Conversation models
# =========================

class ConversationResult(FrozenModel):
    content: str = ""
    conversation_id: str
    tool_calls: Optional[List[ToolCall]] = None
    tool_results: Optional[Dict[str, Any]] = None
    messages: List[ChatMessage] = Field(default_factory=list)
    iterations: int = 0

class ConversationRequestBody(BaseModel):
    """HTTP body for /llm/conversations."""
    input: str
    provider: Optional[str] = None
    model: str = ""
    system_prompt: Optional[str] = None
    history: List[ChatMessage] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    max_iterations: int = Field(default=5, ge=1, le=20)
    conversation_id: Optional[str] = None
    agent_id: str = "conversation"
