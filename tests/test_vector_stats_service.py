# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-20
# Description: test_vector_stats_service.py
# -----------------------------------------------------------------------------
import pytest

from fakes import COLLECTION
from services.VectorStatsService import VectorStatsService


@pytest.fixture
def stats_service(store, repository):
    return VectorStatsService(store=store, repository=repository, collection_name=COLLECTION)


def test_empty_index(stats_service):
    stats = stats_service.get_stats()

    assert stats["total_records"] == 0
    assert stats["average_records_per_note"] == 0
    assert stats["vector_store"]["reachable"] is True
    assert stats["vector_store"]["point_count"] == 0
    assert stats["vector_store"]["point_drift"] == 0


def test_counts_by_kind(index, stats_service):
    index.index_chunk_text("n1", "r1", " ".join(f"w{i}" for i in range(400)))
    index.index_note_text("n1", "whole note")
    index.index_note_text("n2", "another note")

    stats = stats_service.get_stats()

    assert stats["total_records"] == 4
    assert stats["chunk_level_records"] == 2
    assert stats["note_level_records"] == 2
    assert stats["records_with_recording"] == 2
    assert stats["unique_notes"] == 2
    assert stats["average_records_per_note"] == 2.0
    assert stats["embedding_models"] == {"fake-embed": 4}
    assert stats["vector_store"]["point_count"] == 4


def test_orphaned_points_show_as_drift(index, store, stats_service):
    index.index_note_text("n1", "whole note")
    store.fail_ops["delete"] = 1
    index.delete("n1")

    stats = stats_service.get_stats()

    assert stats["total_records"] == 0
    assert stats["vector_store"]["point_drift"] == 1


def test_store_failure_degrades_to_unreachable(store, stats_service):
    store.fail_ops["count"] = 1

    stats = stats_service.get_stats()

    assert stats["vector_store"]["reachable"] is False
    assert stats["vector_store"]["point_count"] is None


def test_unreachable_store(store, stats_service):
    store.reachable = False
    assert stats_service.get_stats()["vector_store"]["reachable"] is False
