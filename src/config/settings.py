"""Application settings loaded from environment variables via pydantic-settings.

Values come from (highest priority first):

  1. Environment variables, e.g. ``GEMINI_API_KEY=...``
  2. A ``.env`` file in the working directory
  3. The defaults below

Field ``gemini_api_key`` maps to env var ``GEMINI_API_KEY`` and so on.
The three credential fields default to ``""`` so the settings object can
always be built (tests, ``--help``); :meth:`Settings.validate_required`
is what refuses to start the service without them.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.utils.errors import ConfigurationError


class Settings(BaseSettings):
    """newsrag application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Required credentials ===
    gemini_api_key: str = ""
    news_api_key: str = ""
    jina_api_key: str = ""

    # === Generation ===
    gemini_model: str = "gemini-2.0-flash-001"

    # === Embeddings ===
    jina_model: str = "jina-embeddings-v3"
    jina_base_url: str = "https://api.jina.ai/v1"
    embedding_dimension: int = 1024

    # === Article feed ===
    news_api_base_url: str = "https://newsapi.org/v2"
    default_news_query: str = "technology"
    news_page_size: int = 50
    news_language: str = "en"

    # === Vector store ===
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_collection: str = "news_articles"

    # === Chunking / retrieval ===
    chunk_size: int = 1000  # characters
    chunk_overlap: int = 200  # characters
    retrieval_top_k: int = 5
    ingest_concurrency: int = 1

    # === Session history ===
    session_db_path: str = "data/sessions.db"
    session_ttl_hours: int = 24

    # === App Config ===
    http_timeout: float = 30.0
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"

    def missing_required(self) -> list[str]:
        """Return the env var names of required credentials that are empty."""
        required = {
            "GEMINI_API_KEY": self.gemini_api_key,
            "NEWS_API_KEY": self.news_api_key,
            "JINA_API_KEY": self.jina_api_key,
        }
        return [name for name, value in required.items() if not value.strip()]

    def validate_required(self) -> None:
        """Raise :class:`ConfigurationError` if any required credential is missing."""
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                message=f"Missing required environment variables: {', '.join(missing)}"
            )
