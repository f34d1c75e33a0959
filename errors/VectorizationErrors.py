# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-12
# Description: VectorizationErrors
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


class VectorizationError(Exception):
    """
    Base error for the vectorization core.

    Every error carries a `kind` and the `key` it relates to (note_id,
    recording_id, point_id ...) so job runners can classify it for retry
    without parsing messages.
    """

    kind: str = "VectorizationError"
    retryable: bool = False

    def __init__(self, message: str, *, key: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.key: Dict[str, Any] = dict(key or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "key": self.key,
            "retryable": self.retryable,
        }

    def __str__(self) -> str:
        if not self.key:
            return f"[{self.kind}] {self.message}"
        key_str = ", ".join(f"{k}={v}" for k, v in self.key.items())
        return f"[{self.kind}] {self.message} ({key_str})"


class EmptyInputError(VectorizationError):
    """Text to embed (or the search query) is blank."""
    kind = "EmptyInput"


class ProviderFailureError(VectorizationError):
    """Embedding call failed or timed out."""
    kind = "ProviderFailure"
    retryable = True


class StoreFailureError(VectorizationError):
    """Vector upsert/search/delete failed or timed out."""
    kind = "StoreFailure"
    retryable = True


class NotFoundError(VectorizationError):
    """Referenced note, recording or embedding is absent."""
    kind = "NotFound"


class NoEmbeddingError(NotFoundError):
    """The note has no note-level embedding yet; vectorize it first."""
    kind = "NoEmbedding"


class ConfigError(VectorizationError):
    """Invalid configuration (segmentation parameters, credentials, dimensions)."""
    kind = "ConfigError"


class InvalidKeyError(VectorizationError):
    """A chunk-level key that would classify as note-level."""
    kind = "InvalidKey"
