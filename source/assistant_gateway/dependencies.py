"""
Зависимости FastAPI: общий клиент OpenAI и оркестратор запусков.
"""
from fastapi import Depends, Request

from assistant_gateway import config
from assistant_gateway.services.openai_svc import OpenAIService
from assistant_gateway.services.run_orchestrator import RunOrchestrator


def get_openai_service(request: Request) -> OpenAIService:
    return request.app.state.openai_service


def get_run_orchestrator(
    openai_service: OpenAIService = Depends(get_openai_service),
) -> RunOrchestrator:
    return RunOrchestrator(
        openai_service,
        poll_interval=config.RUN_POLL_INTERVAL,
        run_timeout=config.RUN_TIMEOUT,
    )
