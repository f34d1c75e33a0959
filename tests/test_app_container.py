# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-21
# Description: test_app_container.py
# -----------------------------------------------------------------------------
import pytest

from config.Config import Config, VectorSettings
from container.AppContainer import AppContainer
from errors.VectorizationErrors import ConfigError
from jobs.VectorizeJobs import VectorizeChunkJob, VectorizeNoteJob
from services.NoteTextAggregator import ChunkText


@pytest.fixture
def container(provider, store, repository):
    return AppContainer(
        Config(openai_api_key="sk-test"),
        provider=provider,
        store=store,
        repository=repository,
        sleep=lambda _: None,
    )


def test_wiring_uses_injected_components(container, provider, store, repository):
    assert container.index.provider is provider
    assert container.search.store is store
    assert container.stats.repository is repository
    assert container.collection_name == "voice_notes_v1"
    assert container.job_runner.policy.max_attempts == 3
    assert container.job_runner.policy.base_seconds == 120


def test_end_to_end_vectorize_and_search(container, provider):
    chunks = [
        ChunkText(chunk_id="c1", chunk_order=1, dictation_text="call the plumber about the leak"),
        ChunkText(chunk_id="c2", chunk_order=2, dictation_text="and book the van for friday"),
    ]
    for chunk in chunks:
        outcome = container.job_runner.run(
            VectorizeChunkJob(
                note_id="n1",
                recording_id=f"rec-{chunk.chunk_id}",
                content=chunk.active_text(),
                segment_ids=[chunk.chunk_id],
            )
        )
        assert outcome.succeeded

    text, ids = container.text_aggregator.aggregate(chunks)
    outcome = container.job_runner.run(VectorizeNoteJob(note_id="n1", aggregate_text=text, source_segment_ids=ids))
    assert outcome.result.segments_included == 2

    # identical text has cosine 1.0 with its own vector
    response = container.search.search(text, threshold=0.99)
    assert [r.note_id for r in response.note_results] == ["n1"]

    stats = container.stats.get_stats()
    assert stats["note_level_records"] == 1
    assert stats["unique_notes"] == 1

    report = container.index.delete("n1")
    assert report.store_failures == 0
    assert container.stats.get_stats()["total_records"] == 0


def test_invalid_settings_fail_fast(provider, store, repository):
    cfg = Config(vector=VectorSettings(segment_max_words=10, segment_overlap_words=10))
    with pytest.raises(ConfigError):
        AppContainer(cfg, provider=provider, store=store, repository=repository)
