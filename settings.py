# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-02-03
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import Any, Dict


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Segmentation + change detection
# -----------------------------------------------------------------------------
SEGMENT_MAX_WORDS = _env_int("VNV_SEGMENT_MAX_WORDS", 300)
SEGMENT_OVERLAP_WORDS = _env_int("VNV_SEGMENT_OVERLAP_WORDS", 50)
CHANGE_THRESHOLD = _env_float("VNV_CHANGE_THRESHOLD", 0.2)


# -----------------------------------------------------------------------------
# Search defaults
# -----------------------------------------------------------------------------
SEARCH_DEFAULTS: Dict[str, Any] = {
    "limit": _env_int("VNV_SEARCH_LIMIT", 10),
    "threshold": _env_float("VNV_SEARCH_THRESHOLD", 0.7),
    "preview_chars": _env_int("VNV_PREVIEW_CHARS", 200),
}


# -----------------------------------------------------------------------------
# Embedding model + vector collection
# -----------------------------------------------------------------------------
EMBEDDING_MODEL = _env("VNV_EMBEDDING_MODEL", "text-embedding-3-small")

VECTOR_COLLECTION_NAME = _env("VNV_VECTOR_COLLECTION", "voice_notes_v1")

METADATA_DB_PATH = _env("VNV_METADATA_DB_PATH", "./data/embeddings.sqlite3")

# Applies to both the embedding provider and the vector store
PROVIDER_TIMEOUT_SECONDS = _env_float("VNV_PROVIDER_TIMEOUT_SECONDS", 30.0)

NORMALIZE_EMBEDDINGS = _env_bool("VNV_NORMALIZE_EMBEDDINGS", True)


# -----------------------------------------------------------------------------
# Background jobs
# -----------------------------------------------------------------------------
JOB_DEFAULTS: Dict[str, Any] = {
    "max_attempts": _env_int("VNV_JOB_MAX_ATTEMPTS", 3),
    "backoff_base_seconds": _env_float("VNV_JOB_BACKOFF_BASE_SECONDS", 120.0),
    "backoff_cap_seconds": _env_float("VNV_JOB_BACKOFF_CAP_SECONDS", 600.0),
}


# -----------------------------------------------------------------------------
# Sanity checks
# -----------------------------------------------------------------------------
if not VECTOR_COLLECTION_NAME:
    raise RuntimeError("VECTOR_COLLECTION_NAME resolved to empty value")

if not EMBEDDING_MODEL:
    raise RuntimeError("EMBEDDING_MODEL resolved to empty value")
