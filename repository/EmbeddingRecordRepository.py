# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-16
# Description: EmbeddingRecordRepository
# -----------------------------------------------------------------------------
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from embedding.EmbeddingRecord import EmbeddingRecord


@runtime_checkable
class EmbeddingRecordRepository(Protocol):
    """Local metadata table for embedding records."""

    def add(self, record: EmbeddingRecord) -> None:
        ...

    def get(self, record_id: str) -> Optional[EmbeddingRecord]:
        ...

    def find_chunk_level(self, note_id: str, recording_id: Optional[str]) -> List[EmbeddingRecord]:
        ...

    def find_note_level(self, note_id: str) -> List[EmbeddingRecord]:
        ...

    def find_by_note(self, note_id: str) -> List[EmbeddingRecord]:
        ...

    def find_by_recording(self, recording_id: str) -> List[EmbeddingRecord]:
        ...

    def delete_ids(self, record_ids: Sequence[str]) -> int:
        ...

    def stats(self) -> Dict[str, object]:
        ...
