# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-15
# Description: test_note_embedder.py
# -----------------------------------------------------------------------------
from types import SimpleNamespace

import numpy as np
import pytest

from config.Config import Config
from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.NoteEmbedder import NoteEmbedder
from errors.VectorizationErrors import ConfigError, EmptyInputError, ProviderFailureError


class _FakeEmbeddings:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def create(self, model, input):
        self.requests.append({"model": model, "input": input})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return SimpleNamespace(data=[SimpleNamespace(embedding=v) for v in item])


def _embedder(*responses, **kwargs):
    client = SimpleNamespace(embeddings=_FakeEmbeddings(responses))
    cfg = Config(openai_api_key="sk-test")
    return NoteEmbedder(cfg, client=client, retry_delay=0, **kwargs), client.embeddings


def test_satisfies_provider_protocol():
    embedder, _ = _embedder()
    assert isinstance(embedder, EmbeddingProvider)
    assert embedder.model == "text-embedding-3-small"


def test_embed_returns_normalised_float32():
    embedder, api = _embedder([[3.0, 4.0]])

    vec = embedder.embed("hello")

    assert vec.dtype == np.float32
    assert np.allclose(vec, [0.6, 0.8], atol=1e-6)
    assert api.requests == [{"model": "text-embedding-3-small", "input": ["hello"]}]


def test_transient_error_is_retried():
    embedder, api = _embedder(RuntimeError("429"), [[1.0, 0.0]])

    vec = embedder.embed("hello")

    assert np.allclose(vec, [1.0, 0.0])
    assert len(api.requests) == 2


def test_exhausted_retries_raise_provider_failure():
    embedder, _ = _embedder(RuntimeError("boom"), RuntimeError("boom"))

    with pytest.raises(ProviderFailureError) as exc_info:
        embedder.embed("hello")
    assert exc_info.value.retryable


def test_blank_text_is_rejected_without_a_request():
    embedder, api = _embedder()

    with pytest.raises(EmptyInputError):
        embedder.embed("  ")
    assert api.requests == []


def test_dimension_change_is_a_config_error():
    embedder, _ = _embedder([[1.0, 0.0]], [[1.0, 0.0, 0.0]])

    embedder.embed("first")
    with pytest.raises(ConfigError):
        embedder.embed("second")


def test_wrong_vector_count_is_a_provider_failure():
    embedder, _ = _embedder([[1.0, 0.0], [0.0, 1.0]])

    with pytest.raises(ProviderFailureError):
        embedder.embed("one text")
