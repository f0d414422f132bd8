import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from openai import AsyncOpenAI
from supabase import Client, create_client

# Load environment variables from a local .env file if present.
load_dotenv()

# Base directory for package assets.
BASE_DIR = Path(__file__).resolve().parent

# Browser UI served from the same app.
STATIC_DIR = Path(os.getenv("LOGO_STATIC_DIR", BASE_DIR / "static"))
API_PREFIX = "/api"

# Model choices can be overridden via environment variables if desired.
ANALYSIS_MODEL = os.getenv("LOGO_ANALYSIS_MODEL", "gpt-4.1")
CONCEPT_MODEL = os.getenv("LOGO_CONCEPT_MODEL", "gpt-4.1")
ANALYSIS_MAX_TOKENS = int(os.getenv("LOGO_ANALYSIS_MAX_TOKENS", "2048"))
CONCEPT_MAX_TOKENS = int(os.getenv("LOGO_CONCEPT_MAX_TOKENS", "8192"))

# Retry policy for outbound model calls.
MAX_ATTEMPTS = int(os.getenv("LOGO_MAX_ATTEMPTS", "3"))
RETRY_DELAY_SECONDS = float(os.getenv("LOGO_RETRY_DELAY_SECONDS", "1.0"))

RECENT_PROJECTS_LIMIT = int(os.getenv("LOGO_RECENT_PROJECTS_LIMIT", "20"))

LOG_LEVEL = os.getenv("LOGO_LOG_LEVEL", "INFO").upper()


def get_env(name: str, default: str = "", required: bool = False) -> str:
    val = os.getenv(name, default)
    if required and not val:
        raise RuntimeError(f"Missing required env var: {name}")
    return val


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_openai_client() -> AsyncOpenAI:
    """Build the model backend client; the SDK reads OPENAI_API_KEY itself."""
    return AsyncOpenAI()


def create_supabase_client() -> Client:
    """Build the store client, preferring the service role key over the anon key."""
    url = get_env("SUPABASE_URL", required=True)
    key = get_env("SUPABASE_SERVICE_ROLE_KEY") or get_env("SUPABASE_ANON_KEY")
    if not key:
        raise RuntimeError("Missing required env var: SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY")
    return create_client(url, key)
