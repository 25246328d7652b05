# completions.py - LLM provider and chat completion endpoints
# This file defines the API endpoints for listing providers and requesting completions.

from fastapi import APIRouter, HTTPException, Depends, Request
from typing import List
import logging

from shared.errors import (
    LLMAuthenticationError, LLMConfigurationError, LLMError, LLMRateLimitError, ToolNotFoundError
)
from ..conversation import ConversationRunner
from ..gateway import LLMGateway
from ..models import (
    ChatCompletionResponse, CompletionRequestBody, ConversationRequestBody, ConversationResult,
    ProviderDescriptor
)
from ..tools import ToolRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/llm", tags=["llm"])

def get_gateway(request: Request) -> LLMGateway:
    if not hasattr(request.app.state, "gateway"):
        raise HTTPException(status_code=500, detail="LLM gateway not initialized")
    return request.app.state.gateway

def get_tools(request: Request) -> ToolRegistry:
    return getattr(request.app.state, "tools", None) or ToolRegistry()

def to_http_error(error: LLMError) -> HTTPException:
    if isinstance(error, LLMConfigurationError):
        status_code = 404
    elif isinstance(error, LLMAuthenticationError):
        status_code = 401
    elif isinstance(error, LLMRateLimitError):
        status_code = 429
    else:
        status_code = 502
    return HTTPException(status_code=status_code, detail=error.to_dict())

@router.get("/providers", response_model=List[str])
async def list_providers(gateway: LLMGateway = Depends(get_gateway)):
    """List providers that have credentials configured."""
    return gateway.list_providers()

@router.get("/providers/{provider_name}", response_model=ProviderDescriptor)
async def get_provider(provider_name: str, gateway: LLMGateway = Depends(get_gateway)):
    """Describe one provider."""
    try:
        return gateway.get_provider(provider_name)
    except LLMError as e:
        raise to_http_error(e)

@router.post("/chat/completions", response_model=ChatCompletionResponse)
async def create_chat_completion(
    body: CompletionRequestBody,
    gateway: LLMGateway = Depends(get_gateway)
):
    """Request one chat completion from the given (or default) provider."""
    provider_name = body.provider or gateway.default_provider
    try:
        return await gateway.create_chat_completion(provider_name, body.to_request())
    except LLMError as e:
        logger.error(f"Chat completion request failed: {e.message}")
        raise to_http_error(e)

@router.post("/conversations", response_model=ConversationResult)
async def run_conversation(
    body: ConversationRequestBody,
    gateway: LLMGateway = Depends(get_gateway),
    tools: ToolRegistry = Depends(get_tools)
):
    """Run a tool-calling conversation until the model answers or the iteration cap is hit."""
    runner = ConversationRunner(gateway, tools)
    try:
        return await runner.run(
            provider=body.provider or gateway.default_provider,
            user_input=body.input,
            model=body.model,
            system_prompt=body.system_prompt,
            history=body.history,
            tool_names=body.tools,
            max_iterations=body.max_iterations,
            conversation_id=body.conversation_id,
            agent_id=body.agent_id,
        )
    except ToolNotFoundError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except LLMError as e:
        logger.error(f"Conversation failed: {e.message}")
        raise to_http_error(e)
