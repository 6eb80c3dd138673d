"""Application configuration using pydantic-settings."""

from functools import cached_property, lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Fallback bucket used by each rules source when FALLBACK_BUCKET is not set
_DEFAULT_FALLBACKS: dict[str, str] = {
    "directory": "1.x",
    "file": "latest",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Where the ordered rule table comes from:
    #   "directory" - one <bucket>/cap.txt marker per mirror directory
    #   "file"      - a static versions.txt style rules file
    rules_source: Literal["directory", "file"] = "directory"
    rules_dir: str = "."
    rules_file: str = "versions.txt"

    # Bucket used when no rule matches. Empty means the source's default.
    fallback_bucket: str = ""

    # Host prefixes; the bucket and path are appended verbatim
    secure_host: str = "https://updates.jenkins-ci.org/"
    mirror_host: str = "http://mirrors.jenkins-ci.org/"

    # Reject versions with non-numeric components instead of reading them as 0
    strict_versions: bool = False

    debug: bool = False
    enable_docs: bool = False  # Swagger UI at /docs

    @model_validator(mode="after")
    def validate_config(self) -> Self:
        for name in ("secure_host", "mirror_host"):
            value = getattr(self, name)
            if not value.endswith("/"):
                raise ValueError(
                    f"{name.upper()} must end with '/' (got {value!r}). "
                    "The bucket is appended directly to it."
                )
        return self

    @property
    def resolved_fallback(self) -> str:
        """FALLBACK_BUCKET, or the default for the configured rules source."""
        return self.fallback_bucket or _DEFAULT_FALLBACKS[self.rules_source]

    @cached_property
    def rules_dir_path(self) -> Path:
        return Path(self.rules_dir)

    @cached_property
    def rules_file_path(self) -> Path:
        return Path(self.rules_file)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this in tests to reset settings between test cases.
    After clearing, the next get_settings() call will create
    a fresh Settings instance with current environment variables.

    Example:
        def test_something(monkeypatch):
            monkeypatch.setenv("RULES_SOURCE", "file")
            clear_settings_cache()
            settings = get_settings()  # Fresh instance
    """
    get_settings.cache_clear()
