# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-17
# Description: test_note_consistency_manager.py
# -----------------------------------------------------------------------------
from fakes import COLLECTION
from embedding.EmbeddingRecord import EmbeddingRecord


def _store_record(store, repository, **kwargs):
    record = EmbeddingRecord(embedding_model="m", **kwargs)
    store.upsert(COLLECTION, record.vector_point_id, [1.0, 0.0], record.to_payload())
    repository.add(record)
    return record


def test_delete_by_note_removes_points_and_rows(store, repository, consistency):
    _store_record(store, repository, note_id="n1", recording_id="r1", source_text="a")
    _store_record(store, repository, note_id="n1", source_text="note")
    keep = _store_record(store, repository, note_id="n2", source_text="other")

    report = consistency.delete_by_note("n1")

    assert report.records_removed == 2
    assert report.store_failures == 0
    assert repository.find_by_note("n1") == []
    assert list(store.collections[COLLECTION]) == [keep.vector_point_id]


def test_store_failure_still_removes_metadata(store, repository, consistency):
    record = _store_record(store, repository, note_id="n1", recording_id="r1", source_text="a")
    store.fail_ops["delete"] = 1

    report = consistency.delete_by_note("n1")

    assert report.records_removed == 1
    assert report.store_failures == 1
    assert report.failed_point_ids == [record.vector_point_id]
    assert repository.find_by_note("n1") == []
    # orphaned point is left behind
    assert store.count(COLLECTION) == 1


def test_delete_by_recording_keeps_note_level_records(store, repository, consistency):
    _store_record(store, repository, note_id="n1", recording_id="r1", source_text="a")
    _store_record(store, repository, note_id="n1", recording_id="r1", source_text="b", segment_index=1)
    _store_record(store, repository, note_id="n1", recording_id="r2", source_text="c")
    note = _store_record(store, repository, note_id="n1", source_text="whole note")

    report = consistency.delete_by_recording("r1")

    assert report.records_removed == 2
    assert report.recording_id == "r1"
    remaining = repository.find_by_note("n1")
    assert {r.recording_id for r in remaining} == {"r2", None}
    assert repository.find_note_level("n1")[0].id == note.id


def test_deleting_unknown_note_is_a_noop(consistency):
    report = consistency.delete_by_note("nope")
    assert report.records_removed == 0
    assert report.store_failures == 0
