# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-19
# Description: test_note_text_aggregator.py
# -----------------------------------------------------------------------------
from services.NoteTextAggregator import ChunkText, NoteTextAggregator


def test_chunks_joined_in_order_using_active_version():
    chunks = [
        ChunkText(chunk_id="c3", chunk_order=3, active_version="edited", dictation_text="raw", edited_text=" third "),
        ChunkText(chunk_id="c1", chunk_order=1, dictation_text="first"),
        ChunkText(chunk_id="c2", chunk_order=2, active_version="ai", dictation_text="raw two", ai_text="second"),
    ]

    text, ids = NoteTextAggregator().aggregate(chunks)

    assert text == "first second third"
    assert ids == ["c1", "c2", "c3"]


def test_blank_chunks_are_skipped():
    chunks = [
        ChunkText(chunk_id="c1", chunk_order=1, dictation_text="   "),
        ChunkText(chunk_id="c2", chunk_order=2, active_version="edited", dictation_text="ignored"),
        ChunkText(chunk_id="c3", chunk_order=3, dictation_text="kept"),
    ]

    text, ids = NoteTextAggregator().aggregate(chunks)

    assert text == "kept"
    assert ids == ["c3"]


def test_no_chunks_gives_empty_text():
    assert NoteTextAggregator().aggregate([]) == ("", [])
