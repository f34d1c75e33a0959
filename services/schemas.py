# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-17
# Description: schemas.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, computed_field


class IndexResult(BaseModel):
    status: Literal["indexed", "skipped"]
    kind: Literal["chunk-level", "note-level"]
    note_id: str
    recording_id: Optional[str] = None
    reason: Optional[str] = None

    vectors_created: int = 0
    segments_attempted: int = 0
    segments_included: int = 0
    record_ids: List[str] = Field(default_factory=list)

    # per-segment errors (ErrorKind dicts); non-empty with vectors_created > 0 means partial
    failures: List[Dict[str, Any]] = Field(default_factory=list)
    previous_records_removed: int = 0
    previous_store_failures: int = 0

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @computed_field
    @property
    def partial(self) -> bool:
        return self.vectors_created > 0 and bool(self.failures)


class DeletionReport(BaseModel):
    note_id: Optional[str] = None
    recording_id: Optional[str] = None
    records_removed: int = 0
    store_failures: int = 0
    failed_point_ids: List[str] = Field(default_factory=list)


class SegmentPreview(BaseModel):
    point_id: str
    score: float
    recording_id: Optional[str] = None
    segment_index: Optional[int] = None
    segment_ids: List[str] = Field(default_factory=list)
    preview: str = ""


class ChunkSearchResult(BaseModel):
    note_id: str
    max_score: float
    recording_ids: List[str] = Field(default_factory=list)
    segments: List[SegmentPreview] = Field(default_factory=list)


class NoteSearchResult(BaseModel):
    note_id: str
    score: float
    point_id: str
    preview: str = ""


class SearchResponse(BaseModel):
    query: str
    limit: int
    threshold: float
    chunk_results: List[ChunkSearchResult] = Field(default_factory=list)
    note_results: List[NoteSearchResult] = Field(default_factory=list)
    raw_hits: int = 0

    @computed_field
    @property
    def total_chunk_results(self) -> int:
        return len(self.chunk_results)

    @computed_field
    @property
    def total_note_results(self) -> int:
        return len(self.note_results)

    @computed_field
    @property
    def total_found(self) -> int:
        return self.total_chunk_results + self.total_note_results


class SimilarNotesResponse(BaseModel):
    source_note_id: str
    limit: int
    threshold: float
    similar_notes: List[NoteSearchResult] = Field(default_factory=list)

    @computed_field
    @property
    def total_found(self) -> int:
        return len(self.similar_notes)
