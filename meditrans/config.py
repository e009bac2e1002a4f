import os

from dotenv import load_dotenv

load_dotenv()

# Groq exposes an OpenAI-compatible chat completions endpoint
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_API_URL = os.getenv("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
MODEL_ID = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")


def _safe_temp(name, default):
    try:
        t = float(os.getenv(name, str(default)))
    except ValueError:
        t = default
    return max(0.0, min(t, 2.0))
TRANSLATE_TEMPERATURE = _safe_temp("TRANSLATE_TEMPERATURE", 0.3)
SUMMARY_TEMPERATURE = _safe_temp("SUMMARY_TEMPERATURE", 0.5)


def _timeout():
    raw = os.getenv("LLM_TIMEOUT")
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None
LLM_TIMEOUT = _timeout()

FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:8501")
API_URL = os.getenv("MEDITRANS_API_URL", "http://localhost:8813")
DATA_DIR = os.getenv("MEDITRANS_DATA_DIR", ".meditrans")
PORT = int(os.getenv("PORT", "8813"))
