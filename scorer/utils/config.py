import os
from dotenv import load_dotenv

load_dotenv(override=False)


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v not in (None, "", "null", "None") else default


SUPABASE_URL = _env("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = _env("SUPABASE_SERVICE_ROLE_KEY")

SUBMISSIONS_BUCKET = _env("SUBMISSIONS_BUCKET", "submissions")
ANSWER_KEYS_BUCKET = _env("ANSWER_KEYS_BUCKET", "answer-keys")


HOST = _env("HOST", "0.0.0.0")
PORT = int(_env("PORT", "8080") or "8080")


PROCESS_PENDING_LIMIT = int(_env("PROCESS_PENDING_LIMIT", "10") or "10")
AUTO_PROCESS_INTERVAL = float(_env("AUTO_PROCESS_INTERVAL", "30") or "30")


DEFAULT_DAILY_SUBMISSION_LIMIT = 5
DEFAULT_TOTAL_SUBMISSION_LIMIT = 50
DEFAULT_MAX_FILE_SIZE_MB = 10


def backend_api_key() -> str | None:
    return _env("BACKEND_API_KEY")
