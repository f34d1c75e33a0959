# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-18
# Description: NoteEmbeddingIndex.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Type

from chunking.NoteSegmenter import NoteSegmenter
from detection.ChangeDetector import ChangeDetector
from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.EmbeddingRecord import EmbeddingRecord
from errors.VectorizationErrors import (
    EmptyInputError,
    InvalidKeyError,
    ProviderFailureError,
    StoreFailureError,
    VectorizationError,
)
from repository.EmbeddingRecordRepository import EmbeddingRecordRepository
from services.NoteConsistencyManager import NoteConsistencyManager
from services.schemas import DeletionReport, IndexResult
from utility.logging_utils import get_class_logger
from vectorstore.NoteVectorStore import NoteVectorStore


def _as_error(
    e: Exception,
    default_cls: Type[VectorizationError],
    message: str,
    key: dict,
) -> VectorizationError:
    if isinstance(e, VectorizationError):
        if not e.key:
            e.key = dict(key)
        return e
    err = default_cls(f"{message}: {e}", key=key)
    err.__cause__ = e
    return err


class NoteEmbeddingIndex:
    """
    Keeps the two kinds of embedding records for a note current:
      - chunk-level: one vector per segment of a (note, recording) text
      - note-level: one vector for the note's whole aggregated text

    Re-embedding is replace-before-insert: records (and points) for the key are
    removed before the new ones are written, so a text that shrinks from five
    segments to two leaves exactly two records. Callers must not run two
    indexing operations for the same key concurrently.
    """

    def __init__(
        self,
        *,
        segmenter: NoteSegmenter,
        change_detector: ChangeDetector,
        provider: EmbeddingProvider,
        store: NoteVectorStore,
        repository: EmbeddingRecordRepository,
        consistency: NoteConsistencyManager,
        collection_name: str,
        embedding_model: Optional[str] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.segmenter = segmenter
        self.change_detector = change_detector
        self.provider = provider
        self.store = store
        self.repository = repository
        self.consistency = consistency
        self.collection_name = collection_name
        self.embedding_model = embedding_model or getattr(provider, "model", "unknown")
        self.logger = logger or get_class_logger(self.__class__)

    # -------------------------------------------------------------------------
    # Chunk-level
    # -------------------------------------------------------------------------

    def index_chunk_text(
        self,
        note_id: str,
        recording_id: Optional[str],
        text: str,
        segment_ids: Optional[Sequence[str]] = None,
    ) -> IndexResult:
        segment_ids = list(segment_ids or [])
        key = {"note_id": note_id, "recording_id": recording_id}

        if not text or not text.strip():
            self.logger.warning("Empty text provided for vectorization (note=%s recording=%s)", note_id, recording_id)
            raise EmptyInputError("Empty text content", key=key)

        if recording_id is None and not segment_ids:
            raise InvalidKeyError(
                "Chunk-level text needs a recording_id or at least one segment id",
                key=key,
            )

        existing = self.repository.find_chunk_level(note_id, recording_id)
        if existing and not self.change_detector.should_reembed(existing[0].full_text, text):
            self.logger.info(
                "Text has not changed significantly, skipping re-embedding (note=%s recording=%s)",
                note_id,
                recording_id,
            )
            return IndexResult(
                status="skipped",
                kind="chunk-level",
                note_id=note_id,
                recording_id=recording_id,
                reason="No significant change",
            )

        segments = self.segmenter.segment(text)
        self.logger.info(
            "Text segmented (note=%s recording=%s): segments=%d chars=%d",
            note_id,
            recording_id,
            len(segments),
            len(text),
        )

        previous = self._remove_previous(existing, note_id=note_id, recording_id=recording_id)

        created: List[EmbeddingRecord] = []
        errors: List[VectorizationError] = []
        for index, segment in enumerate(segments):
            record = EmbeddingRecord(
                note_id=note_id,
                recording_id=recording_id,
                segment_ids=segment_ids,
                segment_index=index,
                source_text=segment,
                full_text=text,
                embedding_model=self.embedding_model,
            )
            ok, err = self._embed_and_store(record)
            if ok:
                created.append(record)
            else:
                errors.append(err)

        if not created:
            first = errors[0]
            self.logger.error(
                "Vectorization failed for every segment (note=%s recording=%s segments=%d): %s",
                note_id,
                recording_id,
                len(segments),
                first,
            )
            raise type(first)(
                f"Failed to create any vectors for {len(segments)} segments: {first.message}",
                key=key,
            ) from first

        if errors:
            self.logger.warning(
                "Partial vectorization (note=%s recording=%s): created=%d attempted=%d",
                note_id,
                recording_id,
                len(created),
                len(segments),
            )
        else:
            self.logger.info(
                "Content vectorization completed (note=%s recording=%s): vectors_created=%d",
                note_id,
                recording_id,
                len(created),
            )

        return IndexResult(
            status="indexed",
            kind="chunk-level",
            note_id=note_id,
            recording_id=recording_id,
            vectors_created=len(created),
            segments_attempted=len(segments),
            segments_included=len(segment_ids),
            record_ids=[r.id for r in created],
            failures=[e.to_dict() for e in errors],
            previous_records_removed=previous.records_removed,
            previous_store_failures=previous.store_failures,
        )

    # -------------------------------------------------------------------------
    # Note-level
    # -------------------------------------------------------------------------

    def index_note_text(
        self,
        note_id: str,
        aggregate_text: str,
        source_segment_ids: Optional[Sequence[str]] = None,
    ) -> IndexResult:
        """
        Embed the note's aggregated text as a single vector (never segmented).

        `aggregate_text` must already be the note's chunk texts in ascending
        chunk order; see NoteTextAggregator.
        """
        source_segment_ids = list(source_segment_ids or [])
        key = {"note_id": note_id, "recording_id": None}

        if not aggregate_text or not aggregate_text.strip():
            self.logger.info("No content to vectorize for note '%s'", note_id)
            return IndexResult(
                status="skipped",
                kind="note-level",
                note_id=note_id,
                reason="No content in note",
            )

        existing = self.repository.find_note_level(note_id)
        if existing and not self.change_detector.should_reembed(existing[0].full_text, aggregate_text):
            self.logger.info("Note content has not changed significantly, skipping re-embedding (note=%s)", note_id)
            return IndexResult(
                status="skipped",
                kind="note-level",
                note_id=note_id,
                reason="No significant change",
            )

        previous = self._remove_previous(existing, note_id=note_id, recording_id=None)

        record = EmbeddingRecord(
            note_id=note_id,
            recording_id=None,
            segment_ids=[],
            segment_index=0,
            source_text=aggregate_text,
            full_text=aggregate_text,
            embedding_model=self.embedding_model,
        )
        ok, err = self._embed_and_store(record)
        if not ok:
            self.logger.error("Note-level vectorization failed (note=%s): %s", note_id, err)
            raise err

        self.logger.info(
            "Note-level vectorization completed (note=%s): record=%s segments_included=%d chars=%d",
            note_id,
            record.id,
            len(source_segment_ids),
            len(aggregate_text),
        )
        return IndexResult(
            status="indexed",
            kind="note-level",
            note_id=note_id,
            vectors_created=1,
            segments_attempted=1,
            segments_included=len(source_segment_ids),
            record_ids=[record.id],
            previous_records_removed=previous.records_removed,
            previous_store_failures=previous.store_failures,
        )

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def delete(self, note_id: str) -> DeletionReport:
        return self.consistency.delete_by_note(note_id)

    def delete_by_recording(self, recording_id: str) -> DeletionReport:
        return self.consistency.delete_by_recording(recording_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _remove_previous(
        self,
        existing: Sequence[EmbeddingRecord],
        *,
        note_id: str,
        recording_id: Optional[str],
    ) -> DeletionReport:
        if not existing:
            return DeletionReport(note_id=note_id, recording_id=recording_id)

        report = self.consistency.delete_records(existing, note_id=note_id, recording_id=recording_id)
        if report.store_failures:
            self.logger.warning(
                "Replaced records for note=%s recording=%s left %d orphaned vector points",
                note_id,
                recording_id,
                report.store_failures,
            )
        return report

    def _embed_and_store(self, record: EmbeddingRecord) -> Tuple[bool, Optional[VectorizationError]]:
        """
        Embed one record's text, upsert the point, then persist the metadata row.

        Point and row are created as a pair: if the row cannot be written the
        point is removed again and the repository error propagates.
        """
        key = {
            "note_id": record.note_id,
            "recording_id": record.recording_id,
            "segment_index": record.segment_index,
        }

        try:
            vector = self.provider.embed(record.source_text)
        except Exception as e:
            err = _as_error(e, ProviderFailureError, "Embedding failed", key)
            self.logger.warning("Failed to embed segment %d (note=%s): %s", record.segment_index, record.note_id, err)
            return False, err

        try:
            self.store.upsert(self.collection_name, record.vector_point_id, vector, record.to_payload())
        except Exception as e:
            err = _as_error(e, StoreFailureError, "Vector upsert failed", key)
            self.logger.warning("Failed to store segment %d (note=%s): %s", record.segment_index, record.note_id, err)
            return False, err

        try:
            self.repository.add(record)
        except Exception:
            self.logger.error(
                "Failed to persist metadata for point '%s'; removing point", record.vector_point_id, exc_info=True
            )
            try:
                self.store.delete(self.collection_name, [record.vector_point_id])
            except Exception as cleanup_error:
                self.logger.warning("Orphaned vector point '%s': %s", record.vector_point_id, cleanup_error)
            raise

        return True, None
