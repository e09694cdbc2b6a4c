"""Application configuration and constants."""
import os


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def backend_api_url() -> str:
    """Get the REST backend base URL."""
    url = os.environ.get("BACKEND_API_URL")
    if not url:
        raise RuntimeError("BACKEND_API_URL environment variable is not defined")
    return url.rstrip("/")


# Backend
BACKEND_TIMEOUT_SECONDS = _parse_int_env("BACKEND_TIMEOUT_SECONDS", 30)

# Candidate links
PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://127.0.0.1:8000").rstrip("/")

# Session lifetimes
HANDOFF_TTL_SECONDS = _parse_int_env("HANDOFF_TTL_SECONDS", 30 * 60)
SESSION_IDLE_TTL_SECONDS = _parse_int_env("SESSION_IDLE_TTL_SECONDS", 4 * 60 * 60)
AUTH_IDLE_TTL_SECONDS = _parse_int_env("AUTH_IDLE_TTL_SECONDS", 12 * 60 * 60)

# Question bank
BUILDER_QUESTION_LIMIT = _parse_int_env("BUILDER_QUESTION_LIMIT", 1000)
DEFAULT_PER_PAGE = _parse_int_env("DEFAULT_PER_PAGE", 10)
MAX_UPLOAD_BYTES = _parse_int_env("MAX_UPLOAD_BYTES", 5 * 1024 * 1024)

# Server
PORTAL_HOST = os.environ.get("PORTAL_HOST", "127.0.0.1")
PORTAL_PORT = _parse_int_env("PORTAL_PORT", 8000)

# Constants
MAIN_CATEGORY_MARKER = "Main Category"
DIFFICULTIES = ("Easy", "Medium", "Hard")
DEFAULT_DIFFICULTY = "Medium"
OPTION_KEYS = ("a", "b", "c", "d")
CREATOR_ROLE = "Creator"
