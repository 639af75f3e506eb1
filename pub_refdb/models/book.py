# pub_refdb/models/book.py

from __future__ import annotations

from typing import Optional

from pub_refdb.errors import PublicationValidationError
from pub_refdb.models.publication import UNKNOWN_AUTHOR, Publication, min_year_of_publication
from pub_refdb.models.publication_type import PublicationType


class Book(Publication):
    kind = PublicationType.BOOK

    def __init__(self, title: str, year_of_publication: int, publisher: str, *authors: str) -> None:
        super().__init__(title, year_of_publication, *authors)
        self.publisher = publisher

    @classmethod
    def placeholder(cls, title: str, publisher: str) -> "Book":
        return cls(title, min_year_of_publication(), publisher, UNKNOWN_AUTHOR)

    @property
    def publisher(self) -> str:
        return self._publisher

    @publisher.setter
    def publisher(self, value: Optional[str]) -> None:
        if value is None or not value.strip():
            raise PublicationValidationError("publisher cannot be empty")
        self._publisher = value.strip()
