# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-01-21
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from typing import Optional

from chunking.NoteSegmenter import NoteSegmenter
from config.Config import Config
from detection.ChangeDetector import ChangeDetector
from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.NoteEmbedder import NoteEmbedder
from jobs.VectorizeJobs import BackoffPolicy, JobRunner, KeyedLocks
from repository.EmbeddingRecordRepository import EmbeddingRecordRepository
from repository.SqliteEmbeddingRecordRepository import SqliteEmbeddingRecordRepository
from services.NoteConsistencyManager import NoteConsistencyManager
from services.NoteEmbeddingIndex import NoteEmbeddingIndex
from services.NoteSearchAggregator import NoteSearchAggregator
from services.NoteTextAggregator import NoteTextAggregator
from services.VectorStatsService import VectorStatsService
from utility.logging_utils import get_class_logger
from vectorstore.ChromaNoteVectorStore import ChromaNoteVectorStore
from vectorstore.NoteVectorStore import NoteVectorStore


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.

    Build one per process (or per test) and pass its services to whatever
    hosts them. Provider, store and repository can be injected; anything not
    injected is built from `cfg`.
    """

    def __init__(
        self,
        cfg: Optional[Config] = None,
        *,
        provider: Optional[EmbeddingProvider] = None,
        store: Optional[NoteVectorStore] = None,
        repository: Optional[EmbeddingRecordRepository] = None,
        locks: Optional[KeyedLocks] = None,
        sleep=None,
    ) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.cfg.vector.validate()
        vs = self.cfg.vector
        self.collection_name = vs.vector_collection_name

        # Core infrastructure
        self.provider = provider or NoteEmbedder(cfg=self.cfg)
        self.store = store or ChromaNoteVectorStore(cfg=self.cfg)
        self.repository = repository or SqliteEmbeddingRecordRepository(vs.metadata_db_path)

        # Pure components
        self.segmenter = NoteSegmenter(max_words=vs.segment_max_words, overlap_words=vs.segment_overlap_words)
        self.change_detector = ChangeDetector(threshold=vs.change_threshold)
        self.text_aggregator = NoteTextAggregator()

        self.consistency = NoteConsistencyManager(
            store=self.store,
            repository=self.repository,
            collection_name=self.collection_name,
        )

        self.index = NoteEmbeddingIndex(
            segmenter=self.segmenter,
            change_detector=self.change_detector,
            provider=self.provider,
            store=self.store,
            repository=self.repository,
            consistency=self.consistency,
            collection_name=self.collection_name,
            embedding_model=getattr(self.provider, "model", None) or vs.embedding_model,
        )

        self.search = NoteSearchAggregator(
            provider=self.provider,
            store=self.store,
            repository=self.repository,
            collection_name=self.collection_name,
            default_limit=vs.search_limit,
            default_threshold=vs.search_threshold,
            preview_chars=vs.preview_chars,
        )

        self.stats = VectorStatsService(
            store=self.store,
            repository=self.repository,
            collection_name=self.collection_name,
        )

        runner_kwargs = {}
        if sleep is not None:
            runner_kwargs["sleep"] = sleep
        self.job_runner = JobRunner(
            index=self.index,
            policy=BackoffPolicy(
                max_attempts=vs.job_max_attempts,
                base_seconds=vs.job_backoff_base_seconds,
                cap_seconds=vs.job_backoff_cap_seconds,
            ),
            locks=locks or KeyedLocks(),
            **runner_kwargs,
        )

        self.logger.info("Container ready: %s", self.cfg.summary())
