# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-15
# Updated: 2026-01-15
# Description: NoteVectorStore
# -----------------------------------------------------------------------------
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from embedding.EmbeddingRecord import EmbeddingKind, classify_kind


@dataclass
class ScoredPoint:
    """One search hit: point id, similarity score (higher is closer) and decoded payload."""
    id: str
    score: float
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def note_id(self) -> Optional[str]:
        return self.payload.get("note_id")

    @property
    def recording_id(self) -> Optional[str]:
        return self.payload.get("recording_id")

    @property
    def segment_ids(self) -> List[str]:
        return list(self.payload.get("segment_ids") or [])

    @property
    def kind(self) -> EmbeddingKind:
        return classify_kind(self.recording_id, self.segment_ids)


@runtime_checkable
class NoteVectorStore(Protocol):
    def test_connection(self) -> bool:
        ...

    def upsert(
            self,
            collection: str,
            point_id: str,
            vector: Sequence[float],
            payload: Dict[str, Any],
    ) -> None:
        ...

    def search(
            self,
            collection: str,
            vector: Sequence[float],
            limit: int,
            score_threshold: Optional[float] = None,
            where: Optional[Dict[str, Any]] = None,
    ) -> List[ScoredPoint]:
        ...

    def delete(self, collection: str, point_ids: Sequence[str]) -> None:
        ...

    def get_vector(self, collection: str, point_id: str) -> Optional[np.ndarray]:
        ...

    def count(self, collection: str) -> int:
        ...


# -----------------------------------------------------------------------------
# Payload codec
# -----------------------------------------------------------------------------
# Scalar-only metadata stores (Chroma) cannot hold lists or None, so
# segment_ids travels as a JSON string and None values are dropped.

def encode_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in payload.items():
        if v is None:
            continue
        if k == "segment_ids":
            out[k] = json.dumps(list(v))
        elif isinstance(v, (list, tuple, dict)):
            out[k] = json.dumps(v)
        else:
            out[k] = v
    return out


def decode_payload(metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    md = dict(metadata or {})
    raw_ids = md.get("segment_ids")
    if isinstance(raw_ids, str):
        try:
            md["segment_ids"] = list(json.loads(raw_ids))
        except ValueError:
            md["segment_ids"] = [raw_ids] if raw_ids else []
    elif raw_ids is None:
        md["segment_ids"] = []
    md.setdefault("recording_id", None)
    return md
