# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-21
# Updated: 2026-01-20
# Description: VectorStatsService.py
# -----------------------------------------------------------------------------

import logging
from typing import Any, Dict

from repository.EmbeddingRecordRepository import EmbeddingRecordRepository
from utility.logging_utils import get_class_logger
from vectorstore.NoteVectorStore import NoteVectorStore


class VectorStatsService:
    """
    Index statistics for monitoring.

    Responsibilities:
      - count records by kind / model from the metadata table
      - report vector store reachability and point count
      - flag drift between metadata rows and stored points
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

    def get_stats(self) -> Dict[str, Any]:
        self.logger.info("Stats for collection='%s'", self.collection_name)

        stats: Dict[str, Any] = dict(self.repository.stats())
        total = int(stats.get("total_records", 0))
        unique_notes = int(stats.get("unique_notes", 0))
        stats["average_records_per_note"] = round(total / unique_notes, 2) if unique_notes > 0 else 0

        # --- Vector store side ---
        reachable = False
        point_count = None
        try:
            reachable = self.store.test_connection()
            if reachable:
                point_count = self.store.count(self.collection_name)
        except Exception as e:
            self.logger.error("Failed to read vector store status for '%s': %s", self.collection_name, e)
            reachable = False

        stats["vector_store"] = {
            "collection_name": self.collection_name,
            "reachable": reachable,
            "point_count": point_count,
            # positive: points without metadata (orphans from best-effort deletes)
            "point_drift": (point_count - total) if point_count is not None else None,
        }
        return stats
