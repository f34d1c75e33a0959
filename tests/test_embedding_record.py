# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-14
# Description: test_embedding_record.py
# -----------------------------------------------------------------------------
import hashlib

from embedding.EmbeddingRecord import ChunkLevel, EmbeddingRecord, NoteLevel, classify_kind
from vectorstore.NoteVectorStore import ScoredPoint, decode_payload, encode_payload


def test_classification_rule():
    assert isinstance(classify_kind(None, []), NoteLevel)
    assert isinstance(classify_kind(None, None), NoteLevel)
    assert classify_kind("rec-1", []) == ChunkLevel(recording_id="rec-1", segment_ids=())
    assert classify_kind(None, ["s1"]) == ChunkLevel(recording_id=None, segment_ids=("s1",))


def test_record_defaults():
    record = EmbeddingRecord(note_id="n1", source_text="hello there", embedding_model="m")

    assert record.is_note_level
    assert record.kind.label == "note-level"
    assert record.full_text == "hello there"
    assert record.text_hash == hashlib.sha256(b"hello there").hexdigest()
    assert record.id != record.vector_point_id


def test_chunk_record_payload_classifies_the_same_after_codec():
    record = EmbeddingRecord(
        note_id="n1",
        recording_id="rec-9",
        segment_ids=["s1", "s2"],
        segment_index=1,
        source_text="segment text",
        embedding_model="m",
    )
    metadata = encode_payload(record.to_payload())

    # scalar-only metadata: lists are strings, None is dropped
    assert metadata["segment_ids"] == '["s1", "s2"]'
    assert metadata["kind"] == "chunk-level"
    assert all(not isinstance(v, (list, dict)) and v is not None for v in metadata.values())

    point = ScoredPoint(id=record.vector_point_id, score=0.5, payload=decode_payload(metadata))
    assert point.kind == record.kind
    assert point.segment_ids == ["s1", "s2"]


def test_note_level_payload_drops_null_recording():
    record = EmbeddingRecord(note_id="n1", source_text="note text", embedding_model="m")
    metadata = encode_payload(record.to_payload())

    assert "recording_id" not in metadata
    assert metadata["kind"] == "note-level"
    decoded = decode_payload(metadata)
    assert decoded["recording_id"] is None
    assert decoded["segment_ids"] == []
    assert isinstance(ScoredPoint(id="p", score=1.0, payload=decoded).kind, NoteLevel)


def test_decode_payload_handles_missing_metadata():
    assert decode_payload(None) == {"segment_ids": [], "recording_id": None}
