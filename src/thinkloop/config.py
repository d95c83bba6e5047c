"""Configuration settings for the application."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pydantic settings class for the application."""

    # Define the settings with default values and types
    # These will be loaded from environment variables or a .env file if not provided
    LOG_LEVEL: str = "info"  # Options: debug, info, warning, error, critical

    # LLM Configuration
    LLM_BACKEND: str = "vertex"  # Options: vertex, tgi, openai, anthropic
    MODEL: str | None = None  # Backend default when unset
    API_ENDPOINT: str = "us-central1-aiplatform.googleapis.com"
    GCP_PROJECT_ID: str | None = None
    API_KEY: str | None = None  # Bearer token for the Vertex endpoint
    TGI_ENDPOINT: str = "http://tgi:8080/generate"
    OPENAI_API_KEY: str | None = None
    ANTHROPIC_API_KEY: str | None = None

    # Sampling parameters
    MAX_TOKENS: int = 1024
    TEMPERATURE: float = 0.2
    TOP_K: int = 40
    TOP_P: float = 0.9

    # Agent loop
    MAX_ITERATIONS: int | None = 25  # None = unbounded
    TIMEOUT: float | None = None  # Seconds per agent run, None = no deadline
    REQUEST_TIMEOUT: float = 30.0  # Seconds per backend HTTP request

    class Config:
        """Configuration for Pydantic settings."""

        # Load environment variables from a .env file
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return Settings()
