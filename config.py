import os
import logging
import secrets
from pathlib import Path
from dotenv import load_dotenv

log = logging.getLogger("config")

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH, override=True)

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").strip().lower()
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1")

GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

# local OpenAI-compatible server (Ollama)
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "http://localhost:11434/v1")
DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "qwen2.5:7b-instruct")

ADVANCE_DELAY_MS = int(os.getenv("ADVANCE_DELAY_MS", "500"))

# live web quizzes kept in memory; least recently used are evicted
WEB_MAX_SESSIONS = int(os.getenv("WEB_MAX_SESSIONS", "500"))

WEB_SESSION_SECRET = os.getenv("WEB_SESSION_SECRET", "") or secrets.token_urlsafe(32)
ENV = os.getenv("ENV", "").lower()
IS_PROD = ENV == "prod"

DISCORD_TOKEN = os.getenv("DISCORD_TOKEN", "")
GUILD_ID = int(os.getenv("GUILD_ID", "0"))

log.debug("BASE_DIR=%s", BASE_DIR)
log.debug("ENV_PATH=%s exists=%s", ENV_PATH, ENV_PATH.exists())
log.debug("LLM_PROVIDER=%s", LLM_PROVIDER)
log.debug("GEMINI_MODEL=%s KEY_LEN=%s", GEMINI_MODEL, len(GEMINI_API_KEY or ""))
log.debug("OPENAI_BASE_URL=%s DEFAULT_MODEL=%s", OPENAI_BASE_URL, DEFAULT_MODEL)
log.debug("ADVANCE_DELAY_MS=%s WEB_MAX_SESSIONS=%s", ADVANCE_DELAY_MS, WEB_MAX_SESSIONS)
log.debug("TOKEN_LEN=%s GUILD_ID=%s", len(DISCORD_TOKEN or ""), GUILD_ID)

if not os.getenv("WEB_SESSION_SECRET"):
    log.debug("WEB_SESSION_SECRET not set, using a per-process random secret")
