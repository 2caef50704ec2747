import os
import secrets

from dotenv import load_dotenv

# Project root directory (infinytix/)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

load_dotenv(os.path.join(BASE_DIR, ".env"))


def env_flag(name, default=False):
    """Read a boolean environment variable (1/true/yes/on)."""
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name, default):
    """Read an integer environment variable, keeping the default on garbage."""
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# Application log files
LOG_DIR = os.getenv("INFINYTIX_LOG_DIR", os.path.join(BASE_DIR, "logs"))

# Session signing key; a random key logs everyone out on restart
SECRET_KEY = os.getenv("SECRET_KEY") or secrets.token_hex(32)

# Generative model used for stock data and opinions
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
AI_ENABLED = env_flag("AI_ENABLED", default=bool(GEMINI_API_KEY))
AI_TIMEOUT_SECONDS = env_int("AI_TIMEOUT_SECONDS", 30)

# Dashboard defaults
DEFAULT_TICKER = os.getenv("DEFAULT_TICKER", "RELIANCE").strip().upper()
CURRENCY_SYMBOL = "₹"
STOCK_FETCH_WORKERS = env_int("STOCK_FETCH_WORKERS", 4)

# Optional account created at startup for local demos
DEMO_USER_EMAIL = os.getenv("DEMO_USER_EMAIL", "")
DEMO_USER_PASSWORD = os.getenv("DEMO_USER_PASSWORD", "")
DEMO_USER_NAME = os.getenv("DEMO_USER_NAME", "Demo User")

# Web server binding for main.py
HOST = os.getenv("INFINYTIX_HOST", "127.0.0.1")
PORT = env_int("INFINYTIX_PORT", 5000)

# Ensure required local directories exist
os.makedirs(LOG_DIR, exist_ok=True)
