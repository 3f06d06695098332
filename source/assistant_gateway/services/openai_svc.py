"""
Сервис для работы с OpenAI API.

Каждый вызов - один HTTP-обмен без повторов. Результат всегда размечен:
RemoteResponse для 2xx или RemoteError с кодом и телом ответа как есть.
"""
import json
import logging
from typing import Dict, Any, Optional, List, Union

import httpx
import openai
from openai import APIConnectionError, APIStatusError
from pydantic import BaseModel, ConfigDict

from assistant_gateway import config

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_STATUS = 502


def _content_type(response: httpx.Response) -> str:
    return response.headers.get("content-type", "application/json")


class RemoteResponse(BaseModel):
    """Успешный ответ OpenAI, тело не изменяется."""
    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str
    content_type: str = "application/json"

    def payload(self) -> Any:
        return json.loads(self.body)


class RemoteError(BaseModel):
    """Ответ OpenAI с кодом не 2xx или ошибка транспорта."""
    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str
    content_type: str = "application/json"

    @classmethod
    def transport(cls, message: str) -> "RemoteError":
        body = json.dumps({"error": {"type": "transport_error", "message": message}})
        return cls(status_code=TRANSPORT_ERROR_STATUS, body=body)


RemoteResult = Union[RemoteResponse, RemoteError]


class OpenAIService:
    """Класс для работы с OpenAI API.

    Держит один пул соединений (AsyncOpenAI поверх httpx) на весь процесс;
    создаётся при старте приложения и закрывается при остановке.
    """
    def __init__(self, client: Optional[openai.AsyncOpenAI] = None, beta: str = config.OPENAI_BETA):
        self.client = client or openai.AsyncOpenAI(
            api_key=config.OPENAI_API_KEY,
            organization=(config.OPENAI_ORG_ID or None),
            base_url=config.OPENAI_BASE_URL,
            timeout=config.OPENAI_TIMEOUT,
            max_retries=0,
        )
        self.beta_headers = {"OpenAI-Beta": beta} if beta else {}

    async def close(self) -> None:
        await self.client.close()

    async def _request(
        self, method: str, path: str, body: Optional[Dict[str, Any]] = None, beta: bool = True
    ) -> RemoteResult:
        options = {"headers": self.beta_headers} if beta else {}
        try:
            if method == "GET":
                response = await self.client.get(path, cast_to=httpx.Response, options=options)
            else:
                response = await self.client.post(
                    path, cast_to=httpx.Response, body=body, options=options
                )
        except APIStatusError as e:
            logger.error(f"OpenAI вернул {e.status_code} на {method} {path}")
            return RemoteError(
                status_code=e.status_code, body=e.response.text, content_type=_content_type(e.response)
            )
        except APIConnectionError as e:
            logger.error(f"Ошибка соединения с OpenAI на {method} {path}: {e}")
            return RemoteError.transport(str(e))
        return RemoteResponse(
            status_code=response.status_code, body=response.text, content_type=_content_type(response)
        )

    async def create_assistant(
        self, name: str, instructions: str, tools: List[str], model: str
    ) -> RemoteResult:
        return await self._request("POST", "/assistants", {
            "instructions": instructions,
            "name": name,
            "tools": [{"type": tool} for tool in tools],
            "model": model,
        })

    async def create_thread(self) -> RemoteResult:
        return await self._request("POST", "/threads", {})

    async def append_message(self, thread_id: str, role: str, content: str) -> RemoteResult:
        return await self._request(
            "POST", f"/threads/{thread_id}/messages", {"role": role, "content": content}
        )

    async def start_run(
        self, thread_id: str, assistant_id: str, instructions: Optional[str] = None
    ) -> RemoteResult:
        body = {"assistant_id": assistant_id}
        if instructions is not None:
            body["instructions"] = instructions
        return await self._request("POST", f"/threads/{thread_id}/runs", body)

    async def get_run(self, thread_id: str, run_id: str) -> RemoteResult:
        return await self._request("GET", f"/threads/{thread_id}/runs/{run_id}")

    async def cancel_run(self, thread_id: str, run_id: str) -> RemoteResult:
        return await self._request("POST", f"/threads/{thread_id}/runs/{run_id}/cancel")

    async def list_messages(self, thread_id: str) -> RemoteResult:
        return await self._request("GET", f"/threads/{thread_id}/messages")

    async def create_chat_completion(
        self, messages: List[Dict[str, Any]], model: str, **params: Any
    ) -> RemoteResult:
        body = {"model": model, "messages": messages}
        body.update(params)
        return await self._request("POST", "/chat/completions", body, beta=False)
