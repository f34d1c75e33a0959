# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-19
# Description: NoteSearchAggregator.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.EmbeddingRecord import ChunkLevel, NoteLevel
from errors.VectorizationErrors import (
    EmptyInputError,
    NoEmbeddingError,
    ProviderFailureError,
    StoreFailureError,
    VectorizationError,
)
from repository.EmbeddingRecordRepository import EmbeddingRecordRepository
from services.schemas import (
    ChunkSearchResult,
    NoteSearchResult,
    SearchResponse,
    SegmentPreview,
    SimilarNotesResponse,
)
from utility.logging_utils import get_class_logger
from vectorstore.NoteVectorStore import NoteVectorStore, ScoredPoint

# Over-fetch factor: retrieval is kind-agnostic, so both lists are cut from one result set
OVERFETCH_FACTOR = 3
NOTE_LEVEL_KIND = NoteLevel().label


def _preview(text: Optional[str], n: int) -> str:
    if not text:
        return ""
    return text[:n]


class NoteSearchAggregator:
    """
    Semantic search that keeps chunk-level and note-level hits apart.

    One query embedding, one kind-agnostic vector search, then:
      - chunk-level hits grouped per note, ranked by the note's best segment
      - note-level hits ranked by score
    Both lists are thresholded and cut to `limit` independently.
    """

    def __init__(
        self,
        *,
        provider: EmbeddingProvider,
        store: NoteVectorStore,
        repository: EmbeddingRecordRepository,
        collection_name: str,
        default_limit: int = 10,
        default_threshold: float = 0.7,
        preview_chars: int = 200,
        logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.repository = repository
        self.collection_name = collection_name
        self.default_limit = default_limit
        self.default_threshold = default_threshold
        self.preview_chars = preview_chars
        self.logger = logger or get_class_logger(self.__class__)

    # -------------------------------------------------------------------------
    # Query search
    # -------------------------------------------------------------------------

    def search(
        self,
        query_text: str,
        limit: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> SearchResponse:
        limit = self.default_limit if limit is None else limit
        threshold = self.default_threshold if threshold is None else threshold

        if not query_text or not query_text.strip():
            raise EmptyInputError("Empty query")

        if limit <= 0:
            return SearchResponse(query=query_text, limit=limit, threshold=threshold)

        try:
            query_vector = self.provider.embed(query_text)
        except VectorizationError:
            raise
        except Exception as e:
            raise ProviderFailureError(f"Failed to generate embedding for search query: {e}") from e

        points = self._search_points(query_vector, limit * OVERFETCH_FACTOR)

        chunk_points: List[ScoredPoint] = []
        note_points: List[ScoredPoint] = []
        for point in points:
            if point.score < threshold or not point.note_id:
                continue
            if isinstance(point.kind, NoteLevel):
                note_points.append(point)
            else:
                chunk_points.append(point)

        response = SearchResponse(
            query=query_text,
            limit=limit,
            threshold=threshold,
            chunk_results=self._group_chunk_hits(chunk_points, limit),
            note_results=self._rank_note_hits(note_points, limit),
            raw_hits=len(points),
        )

        self.logger.info(
            "Dual-level search completed: query_chars=%d raw=%d chunk_results=%d note_results=%d threshold=%.2f",
            len(query_text),
            len(points),
            response.total_chunk_results,
            response.total_note_results,
            threshold,
        )
        return response

    # -------------------------------------------------------------------------
    # Note-to-note similarity
    # -------------------------------------------------------------------------

    def find_similar_notes(
        self,
        note_id: str,
        limit: int = 5,
        threshold: Optional[float] = None,
    ) -> SimilarNotesResponse:
        threshold = self.default_threshold if threshold is None else threshold

        records = self.repository.find_note_level(note_id)
        if not records:
            raise NoEmbeddingError(
                "Note has no vector embedding. Run vectorization first.",
                key={"note_id": note_id},
            )
        record = records[0]

        if limit <= 0:
            return SimilarNotesResponse(source_note_id=note_id, limit=limit, threshold=threshold)

        vector = self._source_vector(record.vector_point_id, record.source_text, note_id)

        # note-level points only; the source note's own chunks would otherwise fill the window
        # +1: the source note is always its own nearest neighbour
        points = self._search_points(vector, limit * OVERFETCH_FACTOR + 1, where={"kind": NOTE_LEVEL_KIND})

        candidates = [
            p for p in points
            if isinstance(p.kind, NoteLevel)
            and p.note_id
            and p.note_id != note_id
            and p.score >= threshold
        ]

        response = SimilarNotesResponse(
            source_note_id=note_id,
            limit=limit,
            threshold=threshold,
            similar_notes=self._rank_note_hits(candidates, limit),
        )
        self.logger.info(
            "Found similar notes: source=%s found=%d threshold=%.2f",
            note_id,
            response.total_found,
            threshold,
        )
        return response

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _search_points(
        self,
        vector: Sequence[float],
        limit: int,
        where: Optional[Dict[str, str]] = None,
    ) -> List[ScoredPoint]:
        try:
            return self.store.search(self.collection_name, vector, limit, where=where)
        except VectorizationError:
            raise
        except Exception as e:
            raise StoreFailureError(
                f"Vector search failed: {e}",
                key={"collection": self.collection_name},
            ) from e

    def _source_vector(self, point_id: str, source_text: str, note_id: str) -> np.ndarray:
        try:
            vector = self.store.get_vector(self.collection_name, point_id)
        except VectorizationError:
            raise
        except Exception as e:
            raise StoreFailureError(
                f"Failed to fetch stored vector: {e}",
                key={"note_id": note_id, "point_id": point_id},
            ) from e

        if vector is not None:
            return vector

        self.logger.warning(
            "Stored vector for point '%s' (note=%s) not found; re-embedding note text",
            point_id,
            note_id,
        )
        if not source_text:
            raise NoEmbeddingError("Note-level record has neither a stored vector nor text", key={"note_id": note_id})
        try:
            return self.provider.embed(source_text)
        except VectorizationError:
            raise
        except Exception as e:
            raise ProviderFailureError(f"Failed to re-embed note text: {e}", key={"note_id": note_id}) from e

    def _group_chunk_hits(self, points: Sequence[ScoredPoint], limit: int) -> List[ChunkSearchResult]:
        groups: Dict[str, ChunkSearchResult] = {}

        for point in points:
            kind = point.kind
            recording_id = kind.recording_id if isinstance(kind, ChunkLevel) else None

            group = groups.get(point.note_id)
            if group is None:
                group = ChunkSearchResult(note_id=point.note_id, max_score=point.score)
                groups[point.note_id] = group
            else:
                group.max_score = max(group.max_score, point.score)

            if recording_id and recording_id not in group.recording_ids:
                group.recording_ids.append(recording_id)

            group.segments.append(
                SegmentPreview(
                    point_id=point.id,
                    score=point.score,
                    recording_id=recording_id,
                    segment_index=point.payload.get("segment_index"),
                    segment_ids=point.segment_ids,
                    preview=_preview(point.payload.get("source_text"), self.preview_chars),
                )
            )

        ranked = sorted(groups.values(), key=lambda g: g.max_score, reverse=True)[:limit]
        for group in ranked:
            group.segments.sort(key=lambda s: s.score, reverse=True)
        return ranked

    def _rank_note_hits(self, points: Sequence[ScoredPoint], limit: int) -> List[NoteSearchResult]:
        best: Dict[str, ScoredPoint] = {}
        for point in points:
            current = best.get(point.note_id)
            if current is None or point.score > current.score:
                best[point.note_id] = point

        ranked = sorted(best.values(), key=lambda p: p.score, reverse=True)[:limit]
        return [
            NoteSearchResult(
                note_id=p.note_id,
                score=p.score,
                point_id=p.id,
                preview=_preview(p.payload.get("source_text"), self.preview_chars),
            )
            for p in ranked
        ]
