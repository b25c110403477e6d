"""Chat API routes."""

import logging

from fastapi import APIRouter, HTTPException

from agents import process_message
from client import LLMClientError, UnsupportedProviderError, summarize_with_llm
from common.types import AgentResponse

from ..models.chat import ChatRequest, SummarizeRequest, SummarizeResponse

logger = logging.getLogger(__name__)

chat_router = APIRouter()


@chat_router.post("/chat", response_model=AgentResponse, response_model_exclude_none=True)
async def chat(chat_request: ChatRequest) -> AgentResponse:
    """Run one copilot turn.

    Failures are reported in the response content rather than as HTTP errors,
    so the frontend can show them inline.
    """
    logger.info(
        f"Chat turn: provider={chat_request.llm_config.provider}, "
        f"history={len(chat_request.history)}, "
        f"approved={chat_request.approved_action.tool_name if chat_request.approved_action else None}"
    )

    response = await process_message(
        chat_request.message,
        chat_request.aep_config,
        chat_request.llm_config,
        history=chat_request.history,
        auto_mode=chat_request.auto_mode,
        approved_action=chat_request.approved_action,
    )

    logger.info(
        f"Chat turn done: tools={response.tools_used}, "
        f"requires_approval={bool(response.requires_approval)}"
    )
    return response


@chat_router.post("/summarize", response_model=SummarizeResponse)
async def summarize(request: SummarizeRequest) -> SummarizeResponse:
    """Summarize arbitrary text with the configured provider."""
    try:
        summary = await summarize_with_llm(request.llm_config, request.text)
    except UnsupportedProviderError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LLMClientError as e:
        logger.error(f"Summarize failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return SummarizeResponse(summary=summary)
