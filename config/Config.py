# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-01-14
# Description: Config
# -----------------------------------------------------------------------------

import importlib
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv, find_dotenv

# Load .env once globally; settings reads VNV_* at import, so this comes first
load_dotenv(find_dotenv(usecwd=True), override=True)

import settings  # noqa: E402
from errors.VectorizationErrors import ConfigError  # noqa: E402


def reload_env() -> None:
    """Re-read .env (searched from the current directory) and the settings derived from it."""
    load_dotenv(find_dotenv(usecwd=True), override=True)
    importlib.reload(settings)


@dataclass(frozen=True)
class VectorSettings:
    """Tunables for segmentation, change detection, search and jobs."""
    segment_max_words: int = 300
    segment_overlap_words: int = 50
    change_threshold: float = 0.2
    search_limit: int = 10
    search_threshold: float = 0.7
    preview_chars: int = 200
    embedding_model: str = "text-embedding-3-small"
    vector_collection_name: str = "voice_notes_v1"
    metadata_db_path: str = "./data/embeddings.sqlite3"
    provider_timeout_seconds: float = 30.0
    normalize_embeddings: bool = True
    job_max_attempts: int = 3
    job_backoff_base_seconds: float = 120.0
    job_backoff_cap_seconds: float = 600.0

    @staticmethod
    def from_settings() -> "VectorSettings":
        return VectorSettings(
            segment_max_words=settings.SEGMENT_MAX_WORDS,
            segment_overlap_words=settings.SEGMENT_OVERLAP_WORDS,
            change_threshold=settings.CHANGE_THRESHOLD,
            search_limit=settings.SEARCH_DEFAULTS["limit"],
            search_threshold=settings.SEARCH_DEFAULTS["threshold"],
            preview_chars=settings.SEARCH_DEFAULTS["preview_chars"],
            embedding_model=settings.EMBEDDING_MODEL,
            vector_collection_name=settings.VECTOR_COLLECTION_NAME,
            metadata_db_path=settings.METADATA_DB_PATH,
            provider_timeout_seconds=settings.PROVIDER_TIMEOUT_SECONDS,
            normalize_embeddings=settings.NORMALIZE_EMBEDDINGS,
            job_max_attempts=settings.JOB_DEFAULTS["max_attempts"],
            job_backoff_base_seconds=settings.JOB_DEFAULTS["backoff_base_seconds"],
            job_backoff_cap_seconds=settings.JOB_DEFAULTS["backoff_cap_seconds"],
        )

    def validate(self) -> None:
        """Raise ConfigError for values that would break segmentation or search."""
        if self.segment_max_words <= 0 or self.segment_overlap_words <= 0:
            raise ConfigError(
                f"segment_max_words ({self.segment_max_words}) and segment_overlap_words "
                f"({self.segment_overlap_words}) must be positive"
            )
        # guard against bad config that can cause infinite loops
        if self.segment_overlap_words >= self.segment_max_words:
            raise ConfigError(
                f"segment_overlap_words ({self.segment_overlap_words}) must be < "
                f"segment_max_words ({self.segment_max_words})"
            )
        if not 0.0 < self.change_threshold < 1.0:
            raise ConfigError(f"change_threshold must be in (0, 1), got {self.change_threshold}")
        if self.search_limit <= 0:
            raise ConfigError(f"search_limit must be positive, got {self.search_limit}")
        if self.provider_timeout_seconds <= 0:
            raise ConfigError("provider_timeout_seconds must be positive")
        if self.job_max_attempts <= 0:
            raise ConfigError("job_max_attempts must be positive")
        if not self.embedding_model:
            raise ConfigError("embedding_model must not be empty")
        if not self.vector_collection_name:
            raise ConfigError("vector_collection_name must not be empty")


@dataclass(frozen=True)
class Config:
    # OpenAI (direct)
    openai_base_url: str = ""
    openai_api_key: str = ""

    # Azure OpenAI (takes precedence when endpoint is set)
    openai_azure_api_key: str = ""
    openai_azure_endpoint: str = ""
    openai_azure_embed_deployment: str = ""
    openai_azure_api_version: str = "2024-10-21"

    # Chroma Vector Database
    chroma_endpoint: str = ""
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""

    vector: VectorSettings = field(default_factory=VectorSettings)

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # OpenAI direct
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. https://api.openai.com/v1
        "openai_api_key": "OPENAI_API_KEY",

        # Azure OpenAI
        "openai_azure_api_key": "AZURE_OPENAI_API_KEY",
        "openai_azure_endpoint": "AZURE_OPENAI_ENDPOINT",
        "openai_azure_embed_deployment": "AZURE_OPENAI_EMBED_DEPLOYMENT",
        "openai_azure_api_version": "AZURE_OPENAI_API_VERSION",

        # Chroma
        "chroma_endpoint": "CHROMA_ENDPOINT",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
    }

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables."""
        kwargs = {
            field_name: os.getenv(env_name, "")
            for field_name, env_name in Config.ENV_VARS.items()
            if os.getenv(env_name)
        }
        return Config(vector=VectorSettings.from_settings(), **kwargs)

    @property
    def uses_azure(self) -> bool:
        return bool(self.openai_azure_endpoint)

    @property
    def uses_chroma_cloud(self) -> bool:
        return bool(self.chroma_api_key and self.chroma_tenant)

    def validate(self) -> None:
        """
        Fail fast on settings that can never work.

        Kept separate from __post_init__ so tests and offline tools can build a
        Config without credentials.
        """
        self.vector.validate()

        if self.uses_azure:
            missing = [
                self.ENV_VARS[f]
                for f in ("openai_azure_api_key", "openai_azure_embed_deployment")
                if not getattr(self, f)
            ]
        else:
            missing = [] if self.openai_api_key else [self.ENV_VARS["openai_api_key"]]

        if missing:
            raise ConfigError(f"Missing required environment variables: {missing}")

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url,
            "openai_azure_endpoint": self.openai_azure_endpoint,
            "openai_azure_embed_deployment": self.openai_azure_embed_deployment,
            "chroma_endpoint": self.chroma_endpoint,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "embedding_model": self.vector.embedding_model,
            "vector_collection_name": self.vector.vector_collection_name,
            "segment_max_words": self.vector.segment_max_words,
            "segment_overlap_words": self.vector.segment_overlap_words,
            "change_threshold": self.vector.change_threshold,
        }
