# pub_refdb/models/conference_paper.py

from __future__ import annotations

from typing import Optional

from pub_refdb.errors import PublicationValidationError
from pub_refdb.models.publication import UNKNOWN_AUTHOR, Publication, min_year_of_publication
from pub_refdb.models.publication_type import PublicationType


class ConferencePaper(Publication):
    kind = PublicationType.CONFERENCE_PAPER

    def __init__(self, title: str, year_of_publication: int, conference: str, *authors: str) -> None:
        super().__init__(title, year_of_publication, *authors)
        self.conference = conference

    @classmethod
    def placeholder(cls, title: str, conference: str) -> "ConferencePaper":
        return cls(title, min_year_of_publication(), conference, UNKNOWN_AUTHOR)

    @property
    def conference(self) -> str:
        return self._conference

    @conference.setter
    def conference(self, value: Optional[str]) -> None:
        if value is None or not value.strip():
            raise PublicationValidationError("conference cannot be empty")
        self._conference = value.strip()
