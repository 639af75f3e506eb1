# pub_refdb/models/publication_type.py

from __future__ import annotations

from enum import Enum
from typing import Dict

from pub_refdb.config.settings import get_settings
from pub_refdb.errors import PublicationValidationError


class PublicationType(str, Enum):
    JOURNAL_ARTICLE = "journal_article"
    CONFERENCE_PAPER = "conference_paper"
    BOOK = "book"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


# Shared across every database in the process; a weight change is visible
# to the next citation_index() call.
_citation_weights: Dict[PublicationType, float] = {}


def _seed_weights() -> None:
    s = get_settings()
    _citation_weights[PublicationType.JOURNAL_ARTICLE] = s.JOURNAL_ARTICLE_CITATION_WEIGHT
    _citation_weights[PublicationType.CONFERENCE_PAPER] = s.CONFERENCE_PAPER_CITATION_WEIGHT
    _citation_weights[PublicationType.BOOK] = s.BOOK_CITATION_WEIGHT


def get_citation_weight(kind: PublicationType) -> float:
    if not _citation_weights:
        _seed_weights()
    return _citation_weights[PublicationType(kind)]


def set_citation_weight(kind: PublicationType, weight: float) -> None:
    if weight < 0:
        raise PublicationValidationError(f"citation weight must be >= 0, got {weight}")
    if not _citation_weights:
        _seed_weights()
    _citation_weights[PublicationType(kind)] = float(weight)


def reset_citation_weights() -> None:
    """Forget runtime overrides and re-read the weights from settings."""
    _citation_weights.clear()
    _seed_weights()
