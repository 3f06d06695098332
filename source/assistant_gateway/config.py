"""
Конфигурационный файл для шлюза OpenAI Assistants.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# OpenAI API
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_ORG_ID = os.environ.get("OPENAI_ORG_ID", "")
OPENAI_BASE_URL = os.environ.get("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_BETA = os.environ.get("OPENAI_BETA", "assistants=v2")  # заголовок OpenAI-Beta для threads/runs/assistants
OPENAI_TIMEOUT = float(os.environ.get("OPENAI_TIMEOUT", "60"))  # секунды на один HTTP-запрос

# Опрос запусков (runs)
RUN_POLL_INTERVAL = float(os.environ.get("RUN_POLL_INTERVAL", "2"))  # секунды между проверками статуса
RUN_TIMEOUT = float(os.environ.get("RUN_TIMEOUT", "300"))  # максимальное время ожидания запуска

# Параметры stateless-чата
CHAT_MODEL = os.environ.get("CHAT_MODEL", "gpt-4")
CHAT_SYSTEM_PROMPT = os.environ.get(
    "CHAT_SYSTEM_PROMPT", "You are a Psychiatrist who can identify mental health"
)
CHAT_TEMPERATURE = float(os.environ.get("CHAT_TEMPERATURE", "1"))
CHAT_MAX_TOKENS = int(os.environ.get("CHAT_MAX_TOKENS", "256"))
CHAT_TOP_P = float(os.environ.get("CHAT_TOP_P", "1"))
CHAT_FREQUENCY_PENALTY = float(os.environ.get("CHAT_FREQUENCY_PENALTY", "0"))
CHAT_PRESENCE_PENALTY = float(os.environ.get("CHAT_PRESENCE_PENALTY", "0"))

# Настройки сервера
ENABLE_DOCS = os.environ.get("ENABLE_DOCS", "1").lower() in ("1", "true", "yes")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
