# pub_refdb/models/journal_article.py

from __future__ import annotations

from typing import Optional

from pub_refdb.errors import PublicationValidationError
from pub_refdb.models.publication import UNKNOWN_AUTHOR, Publication, min_year_of_publication
from pub_refdb.models.publication_type import PublicationType


class JournalArticle(Publication):
    kind = PublicationType.JOURNAL_ARTICLE

    def __init__(
        self,
        title: str,
        journal_name: str,
        issue_number: int,
        year_of_publication: int,
        *authors: str,
    ) -> None:
        super().__init__(title, year_of_publication, *authors)
        self.journal_name = journal_name
        self.issue_number = issue_number

    @classmethod
    def placeholder(cls, title: str) -> "JournalArticle":
        return cls(title, "Unknown", 0, min_year_of_publication(), UNKNOWN_AUTHOR)

    @property
    def journal_name(self) -> str:
        return self._journal_name

    @journal_name.setter
    def journal_name(self, value: Optional[str]) -> None:
        if value is None:
            raise PublicationValidationError("journal name cannot be None")
        self._journal_name = value.strip()

    @property
    def issue_number(self) -> int:
        return self._issue_number

    @issue_number.setter
    def issue_number(self, value: int) -> None:
        if value < 0:
            raise PublicationValidationError(f"issue number cannot be negative, got {value}")
        self._issue_number = value
