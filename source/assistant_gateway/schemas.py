"""
Схемы данных для шлюза OpenAI Assistants.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List


class CamelModel(BaseModel):
    """Принимает и camelCase (как в исходном API), и snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateAssistantRequest(CamelModel):
    instructions: str
    name: str
    tools: List[str] = Field(default_factory=list)
    model: str


class AddMessageRequest(CamelModel):
    thread_id: str
    prompt: str


class RunRequest(CamelModel):
    thread_id: str
    assistant_id: str
    instructions: Optional[str] = None
    user_prompt: str


class ChatRequest(CamelModel):
    prompt: str


class Run(BaseModel):
    """Запуск в том виде, в каком его вернул OpenAI; лишние поля сохраняются."""
    model_config = ConfigDict(extra="allow")

    id: str
    status: str
    instructions: Optional[str] = None


class ChatMessage(BaseModel):
    role: str
    content: Optional[str] = None


class Choice(BaseModel):
    message: ChatMessage
    index: int
    finish_reason: Optional[str] = None


class Usage(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatCompletionResponse(BaseModel):
    id: str
    object: str
    created: int
    choices: List[Choice]
    usage: Optional[Usage] = None
