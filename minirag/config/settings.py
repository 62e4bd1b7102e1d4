"""Application settings loaded via pydantic-settings.

Sources, highest priority first:

1. Explicit keyword arguments (tests, CLI overrides)
2. Environment variables, e.g. ``COHERE_API_KEY=...``
3. ``.env`` file in the working directory
4. ``config/config.yaml``, static defaults checked into the repo
5. Field defaults below

Field names map to upper-cased environment variables automatically.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from minirag.models.rag import DistanceMetric

DEFAULT_CONFIG_PATH = "config/config.yaml"


class Settings(BaseSettings):
    """minirag settings.

    Environment variables override YAML defaults.  Empty API keys mean
    "not configured"; the factories in :mod:`minirag.main` use that to pick
    providers.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file=DEFAULT_CONFIG_PATH,
        extra="ignore",
    )

    # === Embedding ===
    embedding_provider: str = "cohere"  # "cohere" or "openai"
    cohere_api_key: str = ""
    cohere_base_url: str = "https://api.cohere.com/v1"
    cohere_embed_model: str = "embed-english-v3.0"
    cohere_rerank_model: str = "rerank-english-v3.0"
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_embedding_model: str = ""
    embedding_dimension: int = Field(default=1024, gt=0)
    embed_batch_size: int = Field(default=96, gt=0)
    embed_max_concurrency: int = Field(default=4, gt=0)

    # === Vector store ===
    vector_store_provider: str = "qdrant"  # "qdrant" or "chromadb"
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str = ""
    chromadb_persist_dir: str = "./data/chromadb"
    collection_name: str = "mini_rag_docs"
    distance_metric: DistanceMetric = DistanceMetric.COSINE
    # Block on upserts until the store has indexed them; False trades
    # read-after-write visibility for lower ingestion latency.
    upsert_wait: bool = True

    # === Completion (OpenAI-compatible; Groq by default) ===
    groq_api_key: str = ""
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model: str = "llama3-8b-8192"
    llm_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=1024, gt=0)

    # === Pipeline ===
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=150, gt=0)
    max_chunks: int = Field(default=90, gt=0)
    max_document_chars: int = Field(default=100_000, gt=0)
    rag_top_k: int = Field(default=5, gt=0)
    rag_overfetch: int = Field(default=16, gt=0)
    rerank_enabled: bool = True
    provider_timeout_seconds: float = Field(default=30.0, gt=0)

    # === App ===
    app_env: str = "development"
    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML sits below .env and the environment.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _check_pipeline_bounds(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        if self.rag_overfetch <= self.rag_top_k:
            raise ValueError(
                f"rag_overfetch ({self.rag_overfetch}) must exceed rag_top_k ({self.rag_top_k})"
            )
        return self

    def get_available_providers(self) -> dict[str, bool]:
        """Return which external providers have credentials configured."""
        return {
            "cohere": bool(self.cohere_api_key),
            "openai": bool(self.openai_api_key),
            "groq": bool(self.groq_api_key),
            "qdrant": bool(self.qdrant_url),
        }
