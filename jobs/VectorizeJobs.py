# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-21
# Description: VectorizeJobs.py
# -----------------------------------------------------------------------------
"""
Background vectorization jobs.

The queue transport is external; these wrappers give each delivery the
retry contract the index relies on:
  - bounded attempts with capped exponential backoff
  - only retryable errors (provider / store failures) are retried
  - one job per key at a time within this process (KeyedLocks)
Re-delivering a job that already succeeded is a no-op because the index
skips unchanged text.
"""
from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from errors.VectorizationErrors import VectorizationError
from services.NoteEmbeddingIndex import NoteEmbeddingIndex
from services.schemas import IndexResult
from utility.logging_utils import get_class_logger


class KeyedLocks:
    """Per-key mutual exclusion; unrelated keys never block each other."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._refs: Dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._refs[key] = self._refs.get(key, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._refs[key] -= 1
                if self._refs[key] == 0:
                    del self._refs[key]
                    del self._locks[key]

    def active_keys(self) -> List[str]:
        with self._guard:
            return list(self._locks)


@dataclass(frozen=True)
class BackoffPolicy:
    max_attempts: int = 3
    base_seconds: float = 120.0
    cap_seconds: float = 600.0

    def delay(self, attempt: int) -> float:
        """Delay after the given (1-based) failed attempt: base, 2*base, 4*base ... capped."""
        return min(self.cap_seconds, self.base_seconds * (2 ** (attempt - 1)))


@dataclass
class VectorizeChunkJob:
    note_id: str
    recording_id: Optional[str]
    content: str
    segment_ids: List[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        if self.recording_id:
            return f"note:{self.note_id}:recording:{self.recording_id}"
        return f"note:{self.note_id}"

    @property
    def tags(self) -> List[str]:
        tags = ["vectorization", f"note:{self.note_id}"]
        if self.recording_id:
            tags.append(f"recording:{self.recording_id}")
        if self.segment_ids:
            tags.append(f"segments:{len(self.segment_ids)}")
        return tags

    def run(self, index: NoteEmbeddingIndex) -> IndexResult:
        return index.index_chunk_text(self.note_id, self.recording_id, self.content, self.segment_ids)


@dataclass
class VectorizeNoteJob:
    note_id: str
    aggregate_text: str
    source_segment_ids: List[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"note:{self.note_id}"

    @property
    def tags(self) -> List[str]:
        return ["vectorization", "note-level", f"note:{self.note_id}"]

    def run(self, index: NoteEmbeddingIndex) -> IndexResult:
        return index.index_note_text(self.note_id, self.aggregate_text, self.source_segment_ids)


VectorizeJob = Union[VectorizeChunkJob, VectorizeNoteJob]


@dataclass
class JobOutcome:
    status: str  # "succeeded" | "failed"
    attempts: int
    result: Optional[IndexResult] = None
    error: Optional[Dict[str, Any]] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


class JobRunner:
    def __init__(
        self,
        *,
        index: NoteEmbeddingIndex,
        policy: BackoffPolicy | None = None,
        locks: KeyedLocks | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self.index = index
        self.policy = policy or BackoffPolicy()
        self.locks = locks or KeyedLocks()
        self.sleep = sleep
        self.logger = logger or get_class_logger(self.__class__)

    def run(self, job: VectorizeJob) -> JobOutcome:
        self.logger.info("Job started: key=%s tags=%s", job.key, job.tags)

        last_error: Dict[str, Any] = {}
        for attempt in range(1, self.policy.max_attempts + 1):
            try:
                with self.locks.hold(job.key):
                    result = job.run(self.index)
            except VectorizationError as e:
                last_error = e.to_dict()
                if not e.retryable:
                    self.logger.error("Job failed with non-retryable error: key=%s error=%s", job.key, e)
                    return JobOutcome(status="failed", attempts=attempt, error=last_error)
                self.logger.warning("Job attempt %d/%d failed: key=%s error=%s",
                                    attempt, self.policy.max_attempts, job.key, e)
            except Exception as e:
                last_error = {"kind": type(e).__name__, "message": str(e), "key": {"job": job.key}, "retryable": True}
                self.logger.error("Job attempt %d/%d raised: key=%s",
                                  attempt, self.policy.max_attempts, job.key, exc_info=True)
            else:
                self.logger.info(
                    "Job completed: key=%s status=%s vectors_created=%d attempts=%d",
                    job.key,
                    result.status,
                    result.vectors_created,
                    attempt,
                )
                return JobOutcome(status="succeeded", attempts=attempt, result=result)

            if attempt < self.policy.max_attempts:
                delay = self.policy.delay(attempt)
                self.logger.info("Retrying job key=%s in %.0fs", job.key, delay)
                self.sleep(delay)

        self.logger.error(
            "Job permanently failed: key=%s attempts=%d error=%s",
            job.key,
            self.policy.max_attempts,
            last_error,
        )
        return JobOutcome(status="failed", attempts=self.policy.max_attempts, error=last_error)
