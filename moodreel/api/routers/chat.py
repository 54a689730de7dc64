"""Conversational search endpoint.

One request runs one model call and at most one TMDB discover query.
"""

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from moodreel.api.dependencies.rate_limit import check_rate_limit
from moodreel.api.dependencies.services import ChatDep
from moodreel.api.schemas import ChatRequest, ChatResponse
from moodreel.etl.tmdb.client import TMDBClientError
from moodreel.services.chat.search import ChatQueryError
from moodreel.services.llm.llm_service import LLMServiceError
from moodreel.utils.logger import setup_logger

logger = setup_logger("api.routers.chat")

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    dependencies=[Depends(check_rate_limit)],
)


@router.post(
    "",
    response_model=ChatResponse,
    summary="Chat with MoodReel",
    description="Describe what you want to watch and get matching TMDB movies.",
)
def chat(request: ChatRequest, service: ChatDep) -> ChatResponse:
    """Synchronous chat endpoint.

    Args:
        request: Conversation, oldest message first.
        service: Chat search service.

    Returns:
        Assistant reply and the movies found.

    Raises:
        HTTPException: 502 if the model or TMDB produced an unusable answer.
    """
    messages = [message.model_dump() for message in request.messages]
    try:
        result = service.handle(messages)
    except ChatQueryError as e:
        logger.warning(f"Unusable tool call: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The assistant produced an invalid search",
        ) from None
    except LLMServiceError as e:
        logger.error(f"LLM failure: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Language model unavailable",
        ) from None
    except (TMDBClientError, httpx.HTTPError) as e:
        logger.error(f"TMDB search failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="TMDB search failed",
        ) from None

    return ChatResponse(
        reply=result.reply,
        filters=result.arguments.to_discover_filters() if result.arguments else None,
        movies=result.movies,
        total_results=result.total_results,
    )
