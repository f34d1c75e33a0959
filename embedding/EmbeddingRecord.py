# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-01-14
# Description: EmbeddingRecord
# -----------------------------------------------------------------------------
import hashlib
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union


@dataclass(frozen=True)
class NoteLevel:
    """Whole-note aggregate: no recording, no segments."""

    @property
    def label(self) -> str:
        return "note-level"


@dataclass(frozen=True)
class ChunkLevel:
    """Per-recording segment; at least one of the two fields is set."""
    recording_id: Optional[str]
    segment_ids: tuple = ()

    @property
    def label(self) -> str:
        return "chunk-level"


EmbeddingKind = Union[NoteLevel, ChunkLevel]


def classify_kind(recording_id: Optional[str], segment_ids: Optional[Sequence[str]]) -> EmbeddingKind:
    """
    The single classification rule shared by records and search hits:
    note-level iff recording_id is null and segment_ids is empty.
    """
    ids = tuple(segment_ids or ())
    if recording_id is None and not ids:
        return NoteLevel()
    return ChunkLevel(recording_id=recording_id, segment_ids=ids)


def content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class EmbeddingRecord:
    """Local metadata for one vector point: which note/recording/text it came from."""
    note_id: str
    source_text: str
    embedding_model: str
    recording_id: Optional[str] = None
    segment_ids: List[str] = field(default_factory=list)
    segment_index: int = 0
    full_text: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    vector_point_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    text_hash: str = ""
    created_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self) -> None:
        if not self.text_hash:
            self.text_hash = content_hash(self.source_text)
        if not self.full_text:
            self.full_text = self.source_text

    @property
    def kind(self) -> EmbeddingKind:
        return classify_kind(self.recording_id, self.segment_ids)

    @property
    def is_note_level(self) -> bool:
        return isinstance(self.kind, NoteLevel)

    def to_payload(self) -> dict:
        """Payload stored next to the vector. `kind` lets the store filter by level."""
        return {
            "record_id": self.id,
            "note_id": self.note_id,
            "kind": self.kind.label,
            "recording_id": self.recording_id,
            "segment_ids": list(self.segment_ids),
            "segment_index": self.segment_index,
            "source_text": self.source_text,
            "embedding_model": self.embedding_model,
            "created_at": self.created_at,
        }
