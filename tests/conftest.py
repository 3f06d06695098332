from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

import httpx
import openai
import pytest

from assistant_gateway.services.openai_svc import OpenAIService

BASE_URL = "https://api.test/v1"
API_KEY = "sk-test"


class RemoteStub:
    """Scripted stand-in for the OpenAI HTTP API.

    Responses are queued per (method, path); the last queued response for a
    route keeps being returned once the queue is down to one item.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/v1"):]
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"error": {"message": f"no stub for {request.method} {path}"}})
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == "/v1" + path]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def remote() -> RemoteStub:
    return RemoteStub()


@pytest.fixture
def openai_service(remote: RemoteStub) -> OpenAIService:
    client = openai.AsyncOpenAI(
        api_key=API_KEY,
        base_url=BASE_URL,
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(remote)),
    )
    return OpenAIService(client=client, beta="assistants=v2")
