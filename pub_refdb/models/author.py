# pub_refdb/models/author.py

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from pub_refdb.errors import PublicationValidationError

_LAST_NAME_RE = re.compile(r"[a-zA-Z]+")
_GIVEN_NAMES_RE = re.compile(r"[a-zA-Z .]+")


@dataclass(frozen=True)
class AuthorName:
    """
    An author as stored on a publication.

    `last` is a single word, `first` holds every given/middle name
    separated by spaces (initials with periods are allowed).
    """

    last: str
    first: str

    @property
    def full(self) -> str:
        """'Roosevelt, Franklin Delano'"""
        return f"{self.last}, {self.first}"

    @property
    def key(self) -> str:
        """'F. D. Roosevelt' -- the form used by the author index."""
        return author_key(self)

    def __str__(self) -> str:
        return self.full


def is_valid_author_name(name: Optional[str]) -> bool:
    """
    True for 'Last, First [Middle ...]'.

    Empty comma parts are ignored, so there must be exactly two non-empty
    parts: a purely alphabetic last name and given names made of letters,
    spaces and single periods. Every given name starts with a letter.
    """
    if name is None:
        return False

    parts = [p.strip() for p in name.split(",")]
    parts = [p for p in parts if p]
    if len(parts) != 2:
        return False

    last, first = parts
    if not _LAST_NAME_RE.fullmatch(last):
        return False
    if not _GIVEN_NAMES_RE.fullmatch(first) or ".." in first:
        return False
    return all(token[0].isalpha() for token in first.split())


def parse_author_name(name: Optional[str]) -> AuthorName:
    if not is_valid_author_name(name):
        raise PublicationValidationError(f"not a valid author name: {name!r}")
    last, first = [p.strip() for p in name.split(",") if p.strip()]  # type: ignore[union-attr]
    return AuthorName(last=last, first=first)


def author_key(author: AuthorName) -> str:
    """
    One upper-case initial per given-name token, then the last name:
    'Einstein, Albert' -> 'A. Einstein'.
    """
    initials = [token[0].upper() + ". " for token in author.first.split()]
    return "".join(initials) + author.last


def author_key_from_full_name(name: str) -> str:
    return author_key(parse_author_name(name))
