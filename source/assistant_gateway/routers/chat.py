"""
Роутер stateless-чата: один запрос к chat/completions с системным промптом.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import ValidationError

from assistant_gateway import config
from assistant_gateway.dependencies import get_openai_service
from assistant_gateway.responses import passthrough
from assistant_gateway.schemas import ChatRequest, ChatCompletionResponse
from assistant_gateway.services.openai_svc import OpenAIService, RemoteError

router = APIRouter(prefix="/api/mentalhealth", tags=["chat"])
logger = logging.getLogger(__name__)


def _text(role: str, text: str) -> dict:
    return {"role": role, "content": [{"type": "text", "text": text}]}


@router.post("/chat", response_model=ChatCompletionResponse)
async def chat(
    request: ChatRequest,
    openai_service: OpenAIService = Depends(get_openai_service),
):
    """
    Один ход диалога без треда.
    """
    result = await openai_service.create_chat_completion(
        [_text("system", config.CHAT_SYSTEM_PROMPT), _text("user", request.prompt)],
        model=config.CHAT_MODEL,
        temperature=config.CHAT_TEMPERATURE,
        max_tokens=config.CHAT_MAX_TOKENS,
        top_p=config.CHAT_TOP_P,
        frequency_penalty=config.CHAT_FREQUENCY_PENALTY,
        presence_penalty=config.CHAT_PRESENCE_PENALTY,
    )
    if isinstance(result, RemoteError):
        return passthrough(result)
    try:
        return ChatCompletionResponse.model_validate_json(result.body)
    except ValidationError as e:
        logger.error(f"Не удалось разобрать ответ chat/completions: {e}")
        return Response(content=result.body, status_code=502, media_type=result.content_type)
