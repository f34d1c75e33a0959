# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-16
# Description: SqliteEmbeddingRecordRepository
# -----------------------------------------------------------------------------
"""
Embedding metadata stored in SQLite.

One row per vector point. Vectors themselves live in the vector store; this
table is the source of truth for which points belong to which note and
recording, and what text they were built from.

Note-level rows are stored with recording_id NULL and segment_ids_json '[]'.
"""
import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from embedding.EmbeddingRecord import EmbeddingRecord
from utility.logging_utils import get_class_logger

_NOTE_LEVEL_SQL = "recording_id IS NULL AND segment_ids_json = '[]'"
_CHUNK_LEVEL_SQL = "(recording_id IS NOT NULL OR segment_ids_json != '[]')"


class SqliteEmbeddingRecordRepository:
    """
    SQLite-backed EmbeddingRecordRepository.

    The connection is shared across worker threads and guarded by a lock.
    Pass ":memory:" for a throwaway database.
    """

    def __init__(self, db_path: str | Path, logger: logging.Logger | None = None):
        self._db_path = str(db_path)
        self._lock = threading.RLock()
        self._conn: Optional[sqlite3.Connection] = None
        self.logger = logger or get_class_logger(self.__class__)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the SQLite database."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

        with self._lock:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS embedding_records (
                    id TEXT PRIMARY KEY,
                    note_id TEXT NOT NULL,
                    recording_id TEXT,
                    segment_ids_json TEXT NOT NULL DEFAULT '[]',
                    segment_index INTEGER NOT NULL DEFAULT 0,
                    vector_point_id TEXT NOT NULL UNIQUE,
                    source_text TEXT NOT NULL,
                    full_text TEXT NOT NULL,
                    embedding_model TEXT NOT NULL,
                    text_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            self._conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_embedding_records_note
                ON embedding_records(note_id)
            """)
            self._conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_embedding_records_recording
                ON embedding_records(recording_id)
            """)
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> EmbeddingRecord:
        return EmbeddingRecord(
            id=row["id"],
            note_id=row["note_id"],
            recording_id=row["recording_id"],
            segment_ids=json.loads(row["segment_ids_json"]),
            segment_index=row["segment_index"],
            vector_point_id=row["vector_point_id"],
            source_text=row["source_text"],
            full_text=row["full_text"],
            embedding_model=row["embedding_model"],
            text_hash=row["text_hash"],
            created_at=row["created_at"],
        )

    def _select(self, where: str, params: tuple) -> List[EmbeddingRecord]:
        with self._lock:
            rows = self._conn.execute(
                f"SELECT * FROM embedding_records WHERE {where} ORDER BY segment_index, created_at",
                params,
            ).fetchall()
        return [self._row_to_record(r) for r in rows]

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def add(self, record: EmbeddingRecord) -> None:
        with self._lock:
            self._conn.execute("""
                INSERT INTO embedding_records
                (id, note_id, recording_id, segment_ids_json, segment_index, vector_point_id,
                 source_text, full_text, embedding_model, text_hash, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                record.id,
                record.note_id,
                record.recording_id,
                json.dumps(list(record.segment_ids)),
                record.segment_index,
                record.vector_point_id,
                record.source_text,
                record.full_text,
                record.embedding_model,
                record.text_hash,
                record.created_at,
            ))
            self._conn.commit()

    def delete_ids(self, record_ids: Sequence[str]) -> int:
        ids = list(dict.fromkeys(record_ids))
        if not ids:
            return 0
        placeholders = ",".join("?" for _ in ids)
        with self._lock:
            cursor = self._conn.execute(
                f"DELETE FROM embedding_records WHERE id IN ({placeholders})",
                tuple(ids),
            )
            self._conn.commit()
        return cursor.rowcount

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def get(self, record_id: str) -> Optional[EmbeddingRecord]:
        found = self._select("id = ?", (record_id,))
        return found[0] if found else None

    def find_chunk_level(self, note_id: str, recording_id: Optional[str]) -> List[EmbeddingRecord]:
        if recording_id is None:
            return self._select(
                f"note_id = ? AND recording_id IS NULL AND {_CHUNK_LEVEL_SQL}",
                (note_id,),
            )
        return self._select("note_id = ? AND recording_id = ?", (note_id, recording_id))

    def find_note_level(self, note_id: str) -> List[EmbeddingRecord]:
        return self._select(f"note_id = ? AND {_NOTE_LEVEL_SQL}", (note_id,))

    def find_by_note(self, note_id: str) -> List[EmbeddingRecord]:
        return self._select("note_id = ?", (note_id,))

    def find_by_recording(self, recording_id: str) -> List[EmbeddingRecord]:
        return self._select("recording_id = ?", (recording_id,))

    def stats(self) -> Dict[str, object]:
        with self._lock:
            total = self._conn.execute("SELECT COUNT(*) FROM embedding_records").fetchone()[0]
            note_level = self._conn.execute(
                f"SELECT COUNT(*) FROM embedding_records WHERE {_NOTE_LEVEL_SQL}"
            ).fetchone()[0]
            with_recording = self._conn.execute(
                "SELECT COUNT(*) FROM embedding_records WHERE recording_id IS NOT NULL"
            ).fetchone()[0]
            unique_notes = self._conn.execute(
                "SELECT COUNT(DISTINCT note_id) FROM embedding_records"
            ).fetchone()[0]
            model_rows = self._conn.execute(
                "SELECT embedding_model, COUNT(*) AS n FROM embedding_records GROUP BY embedding_model"
            ).fetchall()

        return {
            "total_records": total,
            "note_level_records": note_level,
            "chunk_level_records": total - note_level,
            "records_with_recording": with_recording,
            "unique_notes": unique_notes,
            "embedding_models": {r["embedding_model"]: r["n"] for r in model_rows},
        }
