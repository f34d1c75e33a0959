# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-01-18
# Description: conftest.py
# -----------------------------------------------------------------------------

import sys
from pathlib import Path

import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from chunking.NoteSegmenter import NoteSegmenter  # noqa: E402
from detection.ChangeDetector import ChangeDetector  # noqa: E402
from fakes import COLLECTION, FakeEmbeddingProvider, InMemoryVectorStore  # noqa: E402
from repository.SqliteEmbeddingRecordRepository import SqliteEmbeddingRecordRepository  # noqa: E402
from services.NoteConsistencyManager import NoteConsistencyManager  # noqa: E402
from services.NoteEmbeddingIndex import NoteEmbeddingIndex  # noqa: E402
from services.NoteSearchAggregator import NoteSearchAggregator  # noqa: E402


@pytest.fixture
def provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def store():
    return InMemoryVectorStore()


@pytest.fixture
def repository():
    repo = SqliteEmbeddingRecordRepository(":memory:")
    yield repo
    repo.close()


@pytest.fixture
def consistency(store, repository):
    return NoteConsistencyManager(store=store, repository=repository, collection_name=COLLECTION)


@pytest.fixture
def index(provider, store, repository, consistency):
    return NoteEmbeddingIndex(
        segmenter=NoteSegmenter(max_words=300, overlap_words=50),
        change_detector=ChangeDetector(threshold=0.2),
        provider=provider,
        store=store,
        repository=repository,
        consistency=consistency,
        collection_name=COLLECTION,
    )


@pytest.fixture
def search(provider, store, repository):
    return NoteSearchAggregator(
        provider=provider,
        store=store,
        repository=repository,
        collection_name=COLLECTION,
    )
