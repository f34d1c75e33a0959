# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-01-15
# Description: NoteEmbedder
# -----------------------------------------------------------------------------
import time
from typing import List, Optional

import numpy as np
from openai import AzureOpenAI, OpenAI

from config.Config import Config
from errors.VectorizationErrors import ConfigError, EmptyInputError, ProviderFailureError
from utility.logging_utils import get_class_logger


class NoteEmbedder:
    """
    EmbeddingProvider backed by the OpenAI embeddings API (direct or Azure).

    One request per call, bounded by `timeout_seconds`. A timeout is reported
    like any other provider failure.
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client=None,
            normalize: Optional[bool] = None,
            timeout_seconds: Optional[float] = None,
            max_retries: int = 2,
            retry_delay: float = 0.8,
            logger=None,
    ):
        self.cfg = cfg
        self.normalize = cfg.vector.normalize_embeddings if normalize is None else normalize
        self.timeout_seconds = timeout_seconds or cfg.vector.provider_timeout_seconds
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.logger = logger or get_class_logger(self.__class__)

        if cfg.uses_azure:
            self.model = cfg.openai_azure_embed_deployment or cfg.vector.embedding_model
        else:
            self.model = cfg.vector.embedding_model

        self.client = client or self._init_client()
        self.dimension: Optional[int] = None
        self.logger.info(
            "Embedder initialized model='%s' azure=%s normalize=%s timeout=%.1fs",
            self.model,
            cfg.uses_azure,
            self.normalize,
            self.timeout_seconds,
        )

    def _init_client(self):
        # SDK-level retries are disabled; retries happen in _create below
        if self.cfg.uses_azure:
            return AzureOpenAI(
                api_key=self.cfg.openai_azure_api_key,
                azure_endpoint=self.cfg.openai_azure_endpoint.rstrip("/"),
                api_version=self.cfg.openai_azure_api_version,
                timeout=self.timeout_seconds,
                max_retries=0,
            )

        kwargs = {
            "api_key": self.cfg.openai_api_key,
            "timeout": self.timeout_seconds,
            "max_retries": 0,
        }
        if self.cfg.openai_base_url:
            kwargs["base_url"] = self.cfg.openai_base_url
        return OpenAI(**kwargs)

    def _create(self, texts: List[str]) -> np.ndarray:
        delay = self.retry_delay
        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.client.embeddings.create(model=self.model, input=texts)
                return np.asarray([d.embedding for d in resp.data], dtype=np.float32)
            except Exception as e:
                self.logger.warning(
                    "Embedding request failed (attempt %d/%d): %s", attempt, self.max_retries, e
                )
                if attempt == self.max_retries:
                    raise ProviderFailureError(
                        f"Embedding request failed after {attempt} attempts: {e}",
                        key={"model": self.model},
                    ) from e
                time.sleep(delay)
                delay *= 1.7  # backoff

        # Unreachable and include for type checkers
        return np.empty((0, 0), dtype=np.float32)

    def _check_dimension(self, dim: int) -> None:
        if self.dimension is None:
            self.dimension = dim
            self.logger.info("Embedding dimension for model '%s' is %d", self.model, dim)
        elif dim != self.dimension:
            raise ConfigError(
                f"Embedding dimension changed from {self.dimension} to {dim}",
                key={"model": self.model},
            )

    def embed_texts(self, texts: List[str]) -> np.ndarray:
        if any(not t or not t.strip() for t in texts):
            raise EmptyInputError("Cannot embed blank text", key={"model": self.model})

        arr = self._create(texts)
        if arr.ndim != 2 or arr.shape[0] != len(texts):
            raise ProviderFailureError(
                f"Provider returned {arr.shape[0] if arr.ndim else 0} vectors for {len(texts)} inputs",
                key={"model": self.model},
            )
        self._check_dimension(int(arr.shape[1]))

        # Normalize vectors (cosine-friendly)
        if self.normalize:
            norms = np.linalg.norm(arr, axis=1, keepdims=True) + 1e-12
            arr = arr / norms
        return arr.astype(np.float32)

    def embed(self, text: str) -> np.ndarray:
        return self.embed_texts([text])[0]
