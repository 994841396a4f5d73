"""
Lockdiff - semantic diffs for npm lockfiles
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application Info
    APP_NAME: str = "Lockdiff"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"

    # Comparison
    # `resolved` URLs on this host are dropped before comparing entries
    DEFAULT_REGISTRY_HOST: str = "registry.npmjs.org"
    LOCKFILE_NAME: str = "package-lock.json"

    # Git
    GIT_EXECUTABLE: str = "git"
    GIT_TIMEOUT: int = 30  # seconds per git invocation

    # Terminal output: "auto", "always" or "never"
    COLOR: str = "auto"

    # Watch mode
    WATCH_DEBOUNCE_SECONDS: float = 0.5  # npm writes the lockfile in several steps

    # API server
    # CORS - comma-separated list of allowed origins, or "*" for all
    CORS_ORIGINS: str = "*"

    # Maximum request body size in bytes (20MB default, lockfiles get big)
    MAX_REQUEST_SIZE: int = 20 * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
