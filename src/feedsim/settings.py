"""Environment-driven configuration.

Values are read from ``os.environ`` on every call so tests can patch the
environment without reloading modules.  ``.env`` is loaded by the package
``__init__``.
"""

import os

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
DEFAULT_EMBEDDING_DIM = 128
DEFAULT_MUTED_KEYWORD_THRESHOLD = 0.85

_TRUTHY = {"1", "true", "yes", "on"}


def _get_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def get_api_key() -> str | None:
    return os.environ.get("API_KEY")


def get_embedding_model() -> str:
    return os.environ.get("FEEDSIM_EMBEDDING_MODEL") or DEFAULT_EMBEDDING_MODEL


def get_embedding_dim() -> int:
    return _get_int("FEEDSIM_EMBEDDING_DIM", DEFAULT_EMBEDDING_DIM)


def get_muted_keyword_threshold() -> float:
    return _get_float("FEEDSIM_MUTED_KEYWORD_THRESHOLD", DEFAULT_MUTED_KEYWORD_THRESHOLD)


def warmup_on_startup() -> bool:
    return os.environ.get("FEEDSIM_WARMUP_ON_STARTUP", "").strip().lower() in _TRUTHY


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()
