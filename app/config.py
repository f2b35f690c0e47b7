import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(__file__))


def _flag(name, default="false"):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # storage
    DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'db.sqlite')}")
    SESSION_TTL_SECONDS = int(os.environ.get("SESSION_TTL_SECONDS", 60 * 60 * 24 * 180))  # 180 days

    # UI
    PERSIST_DEBOUNCE_SECONDS = float(os.environ.get("PERSIST_DEBOUNCE_SECONDS", 1.0))
    RECENT_SESSIONS_LIMIT = int(os.environ.get("RECENT_SESSIONS_LIMIT", 10))

    # auth (optional)
    WITH_AUTH = _flag("WITH_AUTH")
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID")
    GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET")

config = Config()
