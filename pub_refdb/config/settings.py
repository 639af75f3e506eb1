from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="REFDB_",
    )

    # ------------------------------------------------------------------
    # Citation weights (seed values for the process-wide weight table)
    # ------------------------------------------------------------------
    JOURNAL_ARTICLE_CITATION_WEIGHT: float = Field(
        default=1.0,
        ge=0.0,
        description="Score a journal article contributes each time it cites a publication.",
    )

    CONFERENCE_PAPER_CITATION_WEIGHT: float = Field(
        default=0.7,
        ge=0.0,
        description="Score a conference paper contributes each time it cites a publication.",
    )

    BOOK_CITATION_WEIGHT: float = Field(
        default=1.2,
        ge=0.0,
        description="Score a book contributes each time it cites a publication.",
    )

    # ------------------------------------------------------------------
    # Record validation
    # ------------------------------------------------------------------
    MIN_YEAR_OF_PUBLICATION: int = Field(
        default=1,
        description="Earliest accepted year of publication. The latest is the current year.",
    )

    # ------------------------------------------------------------------
    # Runtime knobs
    # ------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Log level used by the CLI when it configures logging.",
    )

    self_check_on_mutation: bool = Field(
        default=False,
        description=(
            "If True, every insert/remove/citation edit ends with a full "
            "consistency check and raises when the database is left inconsistent."
        ),
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Singleton-style accessor so Settings is only constructed once.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
