"""
Основной файл шлюза OpenAI Assistants.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from assistant_gateway import __version__, config
from assistant_gateway.routers import assistant, chat
from assistant_gateway.services.openai_svc import OpenAIService

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class CaseInsensitiveApiPaths:
    """Пути /api/... сопоставляются без учёта регистра: /api/MentalHealth/chat == /api/mentalhealth/chat."""
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"].lower().startswith("/api/"):
            scope = dict(scope)
            scope["path"] = scope["path"].lower()
        await self.app(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not config.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY environment variable not set")
    logger.info("Запуск шлюза OpenAI Assistants")
    app.state.openai_service = OpenAIService()
    try:
        yield
    finally:
        logger.info("Остановка шлюза OpenAI Assistants")
        await app.state.openai_service.close()


app = FastAPI(
    title="OpenAI Assistants Gateway",
    description="Шлюз к OpenAI: ассистенты, треды, запуски и stateless-чат",
    version=__version__,
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url=None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None,
    lifespan=lifespan,
)

app.add_middleware(CaseInsensitiveApiPaths)

app.include_router(assistant.router)
app.include_router(chat.router)


@app.get("/")
async def root():
    return {"message": "OpenAI Assistants Gateway", "version": app.version}


def run() -> None:
    import uvicorn
    uvicorn.run(
        "assistant_gateway.main:app",
        host=config.HOST,
        port=config.PORT,
    )


if __name__ == "__main__":
    run()
