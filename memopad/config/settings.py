# memopad/config/settings.py

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Expose BASE_DIR for other modules
BASE_DIR = Path(__file__).resolve().parents[2]
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)

DEFAULT_TABLE = "memos"
DEFAULT_LOG_DIR = BASE_DIR / "memopad" / "logs"


@dataclass
class Settings:
    # Hosted data service (PostgREST / Supabase style)
    store_url: str
    store_key: str

    # Table holding memo rows
    table: str = DEFAULT_TABLE

    # None = wait for the response, however long it takes
    timeout_seconds: Optional[float] = None


def _strip_outer_quotes(s: str) -> str:
    """
    Users sometimes put MEMOPAD_STORE_URL="https://..." including quotes.
    This removes a single pair of matching outer quotes.
    """
    s2 = (s or "").strip()
    if len(s2) >= 2 and ((s2[0] == s2[-1]) and s2[0] in ("'", '"')):
        return s2[1:-1].strip()
    return s2


def _first_env(*names: str) -> str:
    for name in names:
        raw = _strip_outer_quotes(os.getenv(name, ""))
        if raw:
            return raw
    return ""


def _parse_optional_float_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
        return value if value > 0 else default
    except ValueError:
        return default


def normalize_store_url(raw: str) -> str:
    """
    Validate the scheme and drop trailing slashes so paths can be joined safely.
    """
    base = _strip_outer_quotes(raw)
    if not (base.startswith("http://") or base.startswith("https://")):
        raise RuntimeError(f"MEMOPAD_STORE_URL is invalid (missing scheme): {base!r}")
    while base.endswith("/"):
        base = base[:-1]
    return base


def load_settings() -> Settings:
    """
    Load configuration from environment variables (and defaults).
    Raises a RuntimeError if required settings are missing.
    """
    # --- Required: store location + key ---
    store_url = _first_env("MEMOPAD_STORE_URL", "SUPABASE_URL")
    if not store_url:
        raise RuntimeError("MEMOPAD_STORE_URL is not set in .env or environment")

    store_key = _first_env("MEMOPAD_STORE_KEY", "SUPABASE_ANON_KEY")
    if not store_key:
        raise RuntimeError("MEMOPAD_STORE_KEY is not set in .env or environment")

    table = os.getenv("MEMOPAD_TABLE", DEFAULT_TABLE).strip() or DEFAULT_TABLE

    timeout_seconds = _parse_optional_float_env("MEMOPAD_TIMEOUT_SECONDS", None)

    return Settings(
        store_url=normalize_store_url(store_url),
        store_key=store_key,
        table=table,
        timeout_seconds=timeout_seconds,
    )
