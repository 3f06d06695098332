"""
Ответы шлюза, повторяющие ответ OpenAI.
"""
from typing import Union

from fastapi.responses import Response

from assistant_gateway.services.openai_svc import RemoteError, RemoteResponse


def passthrough(result: Union[RemoteResponse, RemoteError]) -> Response:
    """Отдаёт ответ OpenAI без изменений: тот же код и то же тело."""
    return Response(
        content=result.body, status_code=result.status_code, media_type=result.content_type
    )
