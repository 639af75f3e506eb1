# pub_refdb/models/publication.py

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from datetime import date
from typing import TYPE_CHECKING, List, Optional, Set

from pub_refdb.config.settings import get_settings
from pub_refdb.errors import PublicationValidationError
from pub_refdb.graph import citations as citation_graph
from pub_refdb.models.author import AuthorName, is_valid_author_name, parse_author_name
from pub_refdb.models.publication_type import PublicationType, get_citation_weight

if TYPE_CHECKING:
    from pub_refdb.db.database import ReferenceDatabase

UNKNOWN_AUTHOR = "Unknown, Unknown"


def min_year_of_publication() -> int:
    return get_settings().MIN_YEAR_OF_PUBLICATION


def max_year_of_publication() -> int:
    return date.today().year


def is_valid_year_of_publication(year: int) -> bool:
    return min_year_of_publication() <= year <= max_year_of_publication()


def _checked_title(title: Optional[str]) -> str:
    if title is None:
        raise PublicationValidationError("title cannot be None")
    if not title.strip():
        raise PublicationValidationError("title cannot be blank")
    return title.strip()


def _checked_year(year: int) -> int:
    if not is_valid_year_of_publication(year):
        raise PublicationValidationError(
            f"year of publication must lie in "
            f"[{min_year_of_publication()}, {max_year_of_publication()}], got {year}"
        )
    return year


class Publication(ABC):
    """
    A publication that can be registered in a ReferenceDatabase.

    Abstract: each concrete kind sets `kind` as a class attribute, and the
    kind fixes its citation weight.

    While registered (`reference_id` is not None) every change to the title
    or the author list is pushed into the database indexes right away, so
    the indexes never go stale.

    The cites / cited-by sets are owned by the publication but written only
    through `pub_refdb.graph.citations`, which keeps both sides in step.
    """

    @property
    @abstractmethod
    def kind(self) -> PublicationType:
        ...

    def __init__(self, title: str, year_of_publication: int, *authors: str) -> None:
        if not authors:
            raise PublicationValidationError("a publication needs at least one author")

        self._title = _checked_title(title)
        self._year = _checked_year(year_of_publication)
        self._authors: List[AuthorName] = [parse_author_name(a) for a in authors]

        self._reference_id: Optional[str] = None
        self._database: Optional["ReferenceDatabase"] = None

        self._cites: Set[Publication] = set()
        self._cited_by: Set[Publication] = set()

    # ------------------------------------------------------------------
    # Identity (managed by the database)
    # ------------------------------------------------------------------
    @property
    def reference_id(self) -> Optional[str]:
        return self._reference_id

    def has_reference_id(self) -> bool:
        return self._reference_id is not None

    @property
    def database(self) -> Optional["ReferenceDatabase"]:
        return self._database

    def _attach(self, database: "ReferenceDatabase", reference_id: str) -> None:
        self._database = database
        self._reference_id = reference_id

    def _detach(self) -> None:
        self._database = None
        self._reference_id = None

    def has_proper_reference_id(self) -> bool:
        """Unregistered, or registered and resolvable to this very object."""
        if self._reference_id is None:
            return self._database is None
        if self._database is None:
            return False
        return self._database.find_by_id(self._reference_id) is self

    # ------------------------------------------------------------------
    # Title
    # ------------------------------------------------------------------
    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self.set_title(value)

    def set_title(self, title: str) -> None:
        new_title = _checked_title(title)
        db = self._database
        if db is not None:
            db.title_word_index.remove_title_words(self._reference_id)
        self._title = new_title
        if db is not None:
            db.title_word_index.add_title_words(self._reference_id)
            db._record_changed(self)

    def capitalise_every_word_of_title(self) -> None:
        words = [w[:1].upper() + w[1:] for w in self._title.split(" ")]
        self.set_title(" ".join(words))

    # ------------------------------------------------------------------
    # Year
    # ------------------------------------------------------------------
    @property
    def year_of_publication(self) -> int:
        return self._year

    @year_of_publication.setter
    def year_of_publication(self, value: int) -> None:
        self._year = _checked_year(value)

    def older_than_10_years(self) -> bool:
        return date.today().year - self._year > 10

    # ------------------------------------------------------------------
    # Authors
    # ------------------------------------------------------------------
    @property
    def authors(self) -> List[AuthorName]:
        return list(self._authors)

    @property
    def nb_authors(self) -> int:
        return len(self._authors)

    def _check_rank(self, rank: int, upper: int) -> None:
        if rank <= 0:
            raise PublicationValidationError(f"author rank must be positive, got {rank}")
        if rank > upper:
            raise PublicationValidationError(f"author rank {rank} exceeds {upper}")

    def author_at(self, rank: int) -> str:
        """Full form ('Last, First') of the author at 1-based `rank`."""
        self._check_rank(rank, self.nb_authors)
        return self._authors[rank - 1].full

    def author_key_at(self, rank: int) -> str:
        """Index form ('F. Last') of the author at 1-based `rank`."""
        self._check_rank(rank, self.nb_authors)
        return self._authors[rank - 1].key

    def all_authors(self) -> List[str]:
        return [a.full for a in self._authors]

    def all_author_keys(self) -> List[str]:
        return [a.key for a in self._authors]

    def add_author(self, name: str) -> None:
        self.add_author_at(name, self.nb_authors + 1)

    def add_author_at(self, name: str, rank: int) -> None:
        self._check_rank(rank, self.nb_authors + 1)
        author = parse_author_name(name)
        self._authors.insert(rank - 1, author)
        db = self._database
        if db is not None:
            db.author_index.add_author(rank, self._reference_id)
            db._record_changed(self)

    def remove_author_at(self, rank: int) -> None:
        self._check_rank(rank, self.nb_authors)
        db = self._database
        # the index reads the name at `rank`, so it must run before the list changes
        if db is not None:
            db.author_index.remove_author(rank, self._reference_id)
        del self._authors[rank - 1]
        if db is not None:
            db._record_changed(self)

    def remove_author(self, name: str) -> None:
        """Remove every occurrence of `name` from the author list."""
        target = parse_author_name(name)
        rank = 1
        while rank <= self.nb_authors:
            if self._authors[rank - 1] == target:
                self.remove_author_at(rank)
            else:
                rank += 1

    def has_proper_authors(self) -> bool:
        return all(is_valid_author_name(a.full) for a in self._authors)

    # ------------------------------------------------------------------
    # Citations (read side; writes go through graph.citations)
    # ------------------------------------------------------------------
    def citations(self) -> Set["Publication"]:
        """Publications this one cites."""
        return set(self._cites)

    def citators(self) -> Set["Publication"]:
        """Publications that cite this one."""
        return set(self._cited_by)

    @property
    def nb_citations(self) -> int:
        return len(self._cites)

    @property
    def nb_citators(self) -> int:
        return len(self._cited_by)

    def has_as_citation(self, other: "Publication") -> bool:
        return other in self._cites

    def has_as_citator(self, other: "Publication") -> bool:
        return other in self._cited_by

    def cite(self, other: "Publication") -> None:
        citation_graph.add_citation(self, other)

    def uncite(self, other: "Publication") -> None:
        citation_graph.remove_citation(self, other)

    def terminate(self) -> None:
        """
        Drop every citation edge and, if registered, remove the publication
        from its database.
        """
        citation_graph.detach(self)
        if self._database is not None:
            self._database.remove(self._reference_id)

    # ------------------------------------------------------------------
    # Scoring / comparison
    # ------------------------------------------------------------------
    def citation_weight(self) -> float:
        return get_citation_weight(self.kind)

    def is_equal_to(self, other: Optional["Publication"]) -> bool:
        """
        Semantic equality used for duplicate detection: same concrete kind,
        case-insensitive title, same year and the same multiset of authors.
        """
        if other is None:
            return False
        if type(self) is not type(other):
            return False
        if self._title.lower() != other._title.lower():
            return False
        if self._year != other._year:
            return False
        return Counter(self.all_authors()) == Counter(other.all_authors())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self._reference_id!r}, "
            f"title={self._title!r}, year={self._year})"
        )
