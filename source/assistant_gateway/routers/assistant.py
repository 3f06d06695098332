"""
API роутеры для ассистентов, тредов и запусков.
"""
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from assistant_gateway.dependencies import get_openai_service, get_run_orchestrator
from assistant_gateway.responses import passthrough
from assistant_gateway.schemas import CreateAssistantRequest, AddMessageRequest, RunRequest
from assistant_gateway.services.openai_svc import OpenAIService
from assistant_gateway.services.run_orchestrator import (
    RunOrchestrator, RunCompleted, StepFailed, RunNotCompleted, RunTimedOut, RunAborted, Outcome
)

router = APIRouter(prefix="/api/assistant", tags=["assistant"])
logger = logging.getLogger(__name__)

CLIENT_CLOSED_REQUEST = 499


def outcome_response(outcome: Outcome) -> Response:
    if isinstance(outcome, RunCompleted):
        return passthrough(outcome.messages)
    if isinstance(outcome, StepFailed):
        logger.error(f"Шаг {outcome.step.value} завершился ошибкой {outcome.error.status_code}")
        return passthrough(outcome.error)
    if isinstance(outcome, RunNotCompleted):
        return JSONResponse(status_code=502, content={
            "error": {
                "type": "run_not_completed",
                "run_id": outcome.run_id,
                "status": outcome.status,
            },
            "run": json.loads(outcome.body),
        })
    if isinstance(outcome, RunTimedOut):
        return JSONResponse(status_code=504, content={
            "error": {
                "type": "run_timeout",
                "run_id": outcome.run_id,
                "status": outcome.status,
                "polls": outcome.polls,
            },
        })
    if isinstance(outcome, RunAborted):
        return JSONResponse(status_code=CLIENT_CLOSED_REQUEST, content={
            "error": {"type": "run_aborted", "run_id": outcome.run_id},
        })
    raise TypeError(f"Неизвестный результат оркестрации: {outcome!r}")


@router.post("/create-assistant")
async def create_assistant(
    request: CreateAssistantRequest,
    openai_service: OpenAIService = Depends(get_openai_service),
):
    """
    Создание ассистента.
    """
    result = await openai_service.create_assistant(
        request.name, request.instructions, request.tools, request.model
    )
    return passthrough(result)


@router.post("/create-thread")
async def create_thread(openai_service: OpenAIService = Depends(get_openai_service)):
    """
    Создание нового треда.
    """
    return passthrough(await openai_service.create_thread())


@router.post("/add-message")
async def add_message(
    request: AddMessageRequest,
    openai_service: OpenAIService = Depends(get_openai_service),
):
    """
    Добавление сообщения пользователя в тред.
    """
    result = await openai_service.append_message(request.thread_id, "user", request.prompt)
    return passthrough(result)


@router.post("/create-run")
async def create_run(
    request: RunRequest,
    http_request: Request,
    orchestrator: RunOrchestrator = Depends(get_run_orchestrator),
):
    """
    Сообщение -> запуск -> ожидание завершения -> список сообщений треда.
    """
    outcome = await orchestrator.execute(
        request.thread_id,
        request.assistant_id,
        request.user_prompt,
        instructions=request.instructions,
        is_cancelled=http_request.is_disconnected,
    )
    return outcome_response(outcome)
