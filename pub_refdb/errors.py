# pub_refdb/errors.py

from __future__ import annotations

from typing import Any


class RefDbError(Exception):
    """Base class for every error raised by the reference database."""


class PublicationValidationError(RefDbError, ValueError):
    """A record field (title, year, author name, rank, ...) is malformed."""


class InconsistentStateError(RefDbError):
    """Raised by the runtime self-check when a mutation left the indexes inconsistent."""


# ---------------------------------------------------------------------------
# Insertion
# ---------------------------------------------------------------------------


class InsertError(RefDbError):
    """A record could not be inserted into the database."""


class NullRecordError(InsertError, TypeError):
    def __init__(self) -> None:
        super().__init__("cannot insert None into the reference database")


class AlreadyIndexedError(InsertError):
    def __init__(self, reference_id: str) -> None:
        super().__init__(f"publication is already registered under id {reference_id}")
        self.reference_id = reference_id


class DuplicateRecordError(InsertError):
    def __init__(self, duplicate_id: str) -> None:
        super().__init__(f"an equivalent publication is already registered under id {duplicate_id}")
        self.duplicate_id = duplicate_id


# ---------------------------------------------------------------------------
# Citations
# ---------------------------------------------------------------------------


class CitationError(RefDbError):
    """A citation edit or citation query failed."""


class UnknownIdError(CitationError, LookupError):
    def __init__(self, reference_id: Any) -> None:
        super().__init__(f"this id is not in the reference database: {reference_id}")
        self.reference_id = reference_id


class InvalidCitationError(CitationError):
    """Self-citation or a missing citation target."""


class AuthorNotFoundError(CitationError, LookupError):
    def __init__(self, author_name: str) -> None:
        super().__init__(f"no publication in the reference database for author {author_name!r}")
        self.author_name = author_name
