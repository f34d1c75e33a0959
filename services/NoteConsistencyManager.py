# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-17
# Description: NoteConsistencyManager.py
# -----------------------------------------------------------------------------
import logging
from typing import List, Optional, Sequence

from embedding.EmbeddingRecord import EmbeddingRecord
from repository.EmbeddingRecordRepository import EmbeddingRecordRepository
from services.schemas import DeletionReport
from utility.logging_utils import get_class_logger
from vectorstore.NoteVectorStore import NoteVectorStore


class NoteConsistencyManager:
    """
    Removes embedding records together with their vector points.

    Point deletion is best-effort: a failed store delete is logged and counted,
    and the metadata row is removed anyway. Orphaned points are left for an
    out-of-band sweep.
    """

    def __init__(
        self,
        *,
        store: NoteVectorStore,
        repository: EmbeddingRecordRepository,
        collection_name: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.repository = repository
        self.collection_name = collection_name
        self.logger = logger or get_class_logger(self.__class__)

    def delete_by_note(self, note_id: str) -> DeletionReport:
        """Delete every record (note-level and chunk-level) owned by the note."""
        records = self.repository.find_by_note(note_id)
        report = self.delete_records(records, note_id=note_id)
        self.logger.info(
            "Vectors deleted for note '%s': records_removed=%d store_failures=%d",
            note_id,
            report.records_removed,
            report.store_failures,
        )
        return report

    def delete_by_recording(self, recording_id: str) -> DeletionReport:
        """Delete chunk-level records for the recording; note-level records are untouched."""
        records = [r for r in self.repository.find_by_recording(recording_id) if not r.is_note_level]
        report = self.delete_records(records, recording_id=recording_id)
        self.logger.info(
            "Vectors deleted for recording '%s': records_removed=%d store_failures=%d",
            recording_id,
            report.records_removed,
            report.store_failures,
        )
        return report

    def delete_records(
        self,
        records: Sequence[EmbeddingRecord],
        *,
        note_id: Optional[str] = None,
        recording_id: Optional[str] = None,
    ) -> DeletionReport:
        failed_point_ids: List[str] = []

        for record in records:
            try:
                self.store.delete(self.collection_name, [record.vector_point_id])
            except Exception as e:
                failed_point_ids.append(record.vector_point_id)
                self.logger.warning(
                    "Failed to delete vector point '%s' (record '%s', note '%s'): %s",
                    record.vector_point_id,
                    record.id,
                    record.note_id,
                    e,
                )

        removed = self.repository.delete_ids([r.id for r in records])

        return DeletionReport(
            note_id=note_id,
            recording_id=recording_id,
            records_removed=removed,
            store_failures=len(failed_point_ids),
            failed_point_ids=failed_point_ids,
        )
