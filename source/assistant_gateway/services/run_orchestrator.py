"""
Оркестратор запусков ассистента.

Порядок шагов строго последовательный: сообщение пользователя -> запуск ->
опрос статуса запуска -> список сообщений треда. Первая ошибка любого шага
прерывает цепочку и возвращается как есть; уже сделанное на стороне OpenAI
не откатывается и не повторяется.
"""
import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from assistant_gateway.schemas import Run
from assistant_gateway.services.openai_svc import (
    OpenAIService, RemoteError, RemoteResponse, TRANSPORT_ERROR_STATUS
)

logger = logging.getLogger(__name__)

RUNNING_STATUSES = frozenset({"queued", "in_progress", "cancelling"})
COMPLETED = "completed"


class Step(str, Enum):
    APPEND_MESSAGE = "append_message"
    START_RUN = "start_run"
    POLL_RUN = "poll_run"
    LIST_MESSAGES = "list_messages"


class _Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)


class StepFailed(_Outcome):
    step: Step
    error: RemoteError


class RunNotCompleted(_Outcome):
    """Запуск завершился, но не со статусом completed."""
    run_id: str
    status: str
    body: str


class RunTimedOut(_Outcome):
    run_id: str
    status: str
    polls: int


class RunAborted(_Outcome):
    """Вызывающая сторона отменила ожидание (например, клиент отключился)."""
    run_id: str
    polls: int


class RunCompleted(_Outcome):
    run_id: str
    polls: int
    messages: RemoteResponse


Outcome = Union[RunCompleted, StepFailed, RunNotCompleted, RunTimedOut, RunAborted]
CancelCheck = Callable[[], Awaitable[bool]]


def _parse_run(response: RemoteResponse) -> Optional[Run]:
    try:
        return Run.model_validate_json(response.body)
    except ValidationError:
        return None


def _malformed(response: RemoteResponse) -> RemoteError:
    return RemoteError(
        status_code=TRANSPORT_ERROR_STATUS, body=response.body, content_type=response.content_type
    )


class RunOrchestrator:
    """Выполняет запуск ассистента на треде и дожидается его завершения."""
    def __init__(
        self,
        openai_service: OpenAIService,
        poll_interval: float = 2.0,
        run_timeout: float = 300.0,
        max_polls: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.openai_service = openai_service
        self.poll_interval = poll_interval
        self.run_timeout = run_timeout
        self.max_polls = max_polls
        self.sleep = sleep
        self.clock = clock

    async def execute(
        self,
        thread_id: str,
        assistant_id: str,
        user_prompt: str,
        instructions: Optional[str] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> Outcome:
        appended = await self.openai_service.append_message(thread_id, "user", user_prompt)
        if isinstance(appended, RemoteError):
            return StepFailed(step=Step.APPEND_MESSAGE, error=appended)

        started = await self.openai_service.start_run(thread_id, assistant_id, instructions)
        if isinstance(started, RemoteError):
            return StepFailed(step=Step.START_RUN, error=started)
        run = _parse_run(started)
        if run is None:
            logger.error(f"OpenAI вернул запуск без id для треда {thread_id}")
            return StepFailed(step=Step.START_RUN, error=_malformed(started))

        logger.info(f"Запуск {run.id} создан для треда {thread_id}")
        try:
            waited = await self._poll_run_status(thread_id, run, is_cancelled)
        except asyncio.CancelledError:
            logger.warning(f"Ожидание запуска {run.id} для треда {thread_id} отменено")
            raise
        if not isinstance(waited, int):
            return waited

        messages = await self.openai_service.list_messages(thread_id)
        if isinstance(messages, RemoteError):
            return StepFailed(step=Step.LIST_MESSAGES, error=messages)
        return RunCompleted(run_id=run.id, polls=waited, messages=messages)

    async def _poll_run_status(
        self, thread_id: str, run: Run, is_cancelled: Optional[CancelCheck]
    ) -> Union[int, StepFailed, RunNotCompleted, RunTimedOut, RunAborted]:
        """Возвращает число опросов, если запуск завершился со статусом completed."""
        polls = 0
        status = run.status
        deadline = self.clock() + self.run_timeout
        while True:
            if self._exhausted(polls, deadline):
                logger.warning(f"Запуск {run.id} не завершился за {polls} опросов, статус {status}")
                await self._cancel_remote_run(thread_id, run.id)
                return RunTimedOut(run_id=run.id, status=status, polls=polls)
            await self.sleep(self.poll_interval)
            if is_cancelled is not None and await is_cancelled():
                logger.info(f"Ожидание запуска {run.id} прервано вызывающей стороной")
                await self._cancel_remote_run(thread_id, run.id)
                return RunAborted(run_id=run.id, polls=polls)

            fetched = await self.openai_service.get_run(thread_id, run.id)
            polls += 1
            if isinstance(fetched, RemoteError):
                return StepFailed(step=Step.POLL_RUN, error=fetched)
            current = _parse_run(fetched)
            if current is None:
                return StepFailed(step=Step.POLL_RUN, error=_malformed(fetched))
            status = current.status
            if status not in RUNNING_STATUSES:
                break

        if status != COMPLETED:
            logger.warning(f"Запуск {run.id} для треда {thread_id} завершился со статусом {status}")
            return RunNotCompleted(run_id=run.id, status=status, body=fetched.body)
        return polls

    def _exhausted(self, polls: int, deadline: float) -> bool:
        if self.max_polls is not None and polls >= self.max_polls:
            return True
        return polls > 0 and self.clock() >= deadline

    async def _cancel_remote_run(self, thread_id: str, run_id: str) -> None:
        result = await self.openai_service.cancel_run(thread_id, run_id)
        if isinstance(result, RemoteError):
            logger.error(f"Ошибка при отмене запуска {run_id} для треда {thread_id}: {result.body}")
