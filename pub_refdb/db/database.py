# pub_refdb/db/database.py

from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from pub_refdb.config.settings import get_settings
from pub_refdb.db.index import AuthorIndex, TitleWordIndex, title_words
from pub_refdb.db.table import RecordTable
from pub_refdb.errors import (
    AlreadyIndexedError,
    AuthorNotFoundError,
    DuplicateRecordError,
    InconsistentStateError,
    NullRecordError,
    PublicationValidationError,
    UnknownIdError,
)
from pub_refdb.graph import citations
from pub_refdb.models.author import author_key_from_full_name, is_valid_author_name
from pub_refdb.models.publication import Publication, is_valid_year_of_publication

logger = logging.getLogger(__name__)


class ConsistencyReport(BaseModel):
    """
    Outcome of ReferenceDatabase.check_consistency(). Purely diagnostic.
    """

    id_table_ok: bool = Field(..., description="Every publication mirrors the id it is stored under.")
    author_index_ok: bool = Field(..., description="Author index holds only live ids under matching keys.")
    title_index_ok: bool = Field(..., description="Title-word index holds only live ids under matching words.")
    records_ok: bool = Field(
        ...,
        description="Every registered publication is well-formed, citation-symmetric and fully indexed.",
    )

    @property
    def ok(self) -> bool:
        return self.id_table_ok and self.author_index_ok and self.title_index_ok and self.records_ok


class ReferenceDatabase:
    """
    In-memory reference database for publications.

    Keeps three structures in step: the id table, the author index and the
    title-word index. It is also the only component that edits citation
    edges between registered publications.

    Not thread-safe: callers sharing an instance across threads must hold
    one exclusive lock around every mutating call.
    """

    def __init__(self, self_check: Optional[bool] = None) -> None:
        self.table = RecordTable()
        self.author_index = AuthorIndex(self.table)
        self.title_word_index = TitleWordIndex(self.table)
        if self_check is None:
            self_check = get_settings().self_check_on_mutation
        self.self_check = self_check

    # ------------------------------------------------------------------
    # Size / membership
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.table)

    @property
    def nb_publications(self) -> int:
        return len(self.table)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Publication):
            return item.reference_id is not None and self.table.lookup(item.reference_id) is item
        return isinstance(item, str) and self.table.has_id(item)

    def has_id(self, reference_id: Optional[str]) -> bool:
        return self.table.has_id(reference_id)

    def publications(self) -> List[Publication]:
        return self.table.publications()

    # ------------------------------------------------------------------
    # Insertion / removal
    # ------------------------------------------------------------------
    def insert(self, publication: Optional[Publication]) -> str:
        """
        Register `publication` and index it. Returns the new id.
        """
        if publication is None:
            raise NullRecordError()
        if publication.reference_id is not None:
            raise AlreadyIndexedError(publication.reference_id)

        duplicate_id = self.find_duplicate(publication)
        if duplicate_id is not None:
            raise DuplicateRecordError(duplicate_id)

        # the id must be registered before any index step can resolve it
        reference_id = self.table.next_id()
        self.table.register(reference_id, publication)
        publication._attach(self, reference_id)

        try:
            self.author_index.add_all_authors(reference_id)
            self.title_word_index.add_title_words(reference_id)
            logger.info("Inserted %s %r as id %s", publication.kind.value, publication.title, reference_id)
            self._after_mutation()
        except Exception:
            logger.warning("Insert of id %s failed; rolling back", reference_id)
            self.author_index.remove_all_authors(reference_id)
            self.title_word_index.remove_title_words(reference_id)
            self.table.unregister(reference_id)
            publication._detach()
            raise

        return reference_id

    def remove(self, reference_id: Optional[str]) -> None:
        """
        Remove the publication with `reference_id`. Unknown ids are ignored.
        """
        publication = self.table.lookup(reference_id)
        if publication is None:
            return

        self.author_index.remove_all_authors(reference_id)
        self.title_word_index.remove_title_words(reference_id)
        citations.detach(publication)

        # breaking the table <-> publication link comes last
        self.table.unregister(reference_id)
        publication._detach()

        logger.info("Removed id %s (%r)", reference_id, publication.title)
        self._after_mutation()

    def find_duplicate(self, publication: Publication) -> Optional[str]:
        """
        Id of a registered publication equivalent to `publication`, if any.

        Candidates are gathered from the author and title-word indexes; the
        full comparison only runs on that reduced set.
        """
        candidates: Set[str] = set()
        for key in publication.all_author_keys():
            candidates |= self.author_index.get(key)
        for word in title_words(publication.title):
            candidates |= self.title_word_index.get(word)

        for candidate_id in sorted(candidates, key=_id_sort_key):
            candidate = self.table.lookup(candidate_id)
            if candidate is not publication and publication.is_equal_to(candidate):
                return candidate_id
        return None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_by_id(self, reference_id: Optional[str]) -> Optional[Publication]:
        return self.table.lookup(reference_id)

    def get(self, reference_id: Optional[str]) -> Publication:
        publication = self.table.lookup(reference_id)
        if publication is None:
            raise UnknownIdError(reference_id)
        return publication

    def find_by_author(self, author: Optional[str]) -> Set[Publication]:
        """
        Publications indexed under an author key such as 'D. Adams'.

        A full 'Last, First' name is turned into its key first.
        """
        if author is None:
            raise PublicationValidationError("author name cannot be None")
        key = author.strip()
        if "," in key and is_valid_author_name(key):
            key = author_key_from_full_name(key)
        return self._resolve(self.author_index.get(key))

    def find_by_title_word(self, word: Optional[str]) -> Set[Publication]:
        if word is None:
            raise PublicationValidationError("title word cannot be None")
        return self._resolve(self.title_word_index.get(word.strip().lower()))

    def _resolve(self, ids) -> Set[Publication]:
        found: Set[Publication] = set()
        for reference_id in ids:
            publication = self.table.lookup(reference_id)
            if publication is not None:
                found.add(publication)
        return found

    def author_index_items(self) -> List[Tuple[str, List[str]]]:
        return sorted((k, sorted(v, key=_id_sort_key)) for k, v in self.author_index.items())

    def title_word_index_items(self) -> List[Tuple[str, List[str]]]:
        return sorted((k, sorted(v, key=_id_sort_key)) for k, v in self.title_word_index.items())

    # ------------------------------------------------------------------
    # Citations
    # ------------------------------------------------------------------
    def add_citation(self, citator_id: Optional[str], citation_id: Optional[str]) -> None:
        citator, citation = self.get(citator_id), self.get(citation_id)
        citations.add_citation(citator, citation)
        self._after_mutation()

    def remove_citation(self, citator_id: Optional[str], citation_id: Optional[str]) -> None:
        citator, citation = self.get(citator_id), self.get(citation_id)
        citations.remove_citation(citator, citation)
        self._after_mutation()

    def transitive_closure_cited_by(self, reference_id: Optional[str]) -> Set[Publication]:
        return citations.transitive_closure_cited_by(self.get(reference_id))

    def citation_index(self, author_name: str) -> float:
        """
        Sum of citation weights over every citator of every publication
        that lists `author_name` ('Last, First', case-insensitive) verbatim.

        Publications that merely share the author key (same initials and
        last name) do not count.
        """
        if not is_valid_author_name(author_name):
            raise PublicationValidationError(f"not a valid author name: {author_name!r}")

        ids = self.author_index.get(author_key_from_full_name(author_name))
        if not ids:
            raise AuthorNotFoundError(author_name)

        wanted = _canonical_full_name(author_name)

        score = 0.0
        for publication in self._resolve(ids):
            names = [_canonical_full_name(n) for n in publication.all_authors()]
            if wanted not in names:
                continue
            for citator in publication.citators():
                score += citator.citation_weight()
        return score

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------
    def _is_proper_publication(self, reference_id: str, publication: Publication) -> bool:
        if not publication.title.strip():
            return False
        if not is_valid_year_of_publication(publication.year_of_publication):
            return False
        if not publication.has_proper_reference_id():
            return False
        if not publication.has_proper_authors():
            return False
        if not citations.is_consistent(publication):
            return False
        for word in title_words(publication.title):
            if reference_id not in self.title_word_index.get(word):
                return False
        for key in publication.all_author_keys():
            if reference_id not in self.author_index.get(key):
                return False
        return True

    def has_proper_publications(self) -> bool:
        return all(self._is_proper_publication(i, p) for i, p in self.table.items())

    def check_consistency(self) -> ConsistencyReport:
        return ConsistencyReport(
            id_table_ok=self.table.is_consistent(),
            author_index_ok=self.author_index.is_consistent(),
            title_index_ok=self.title_word_index.is_consistent(),
            records_ok=self.has_proper_publications(),
        )

    def is_consistent(self) -> bool:
        return self.check_consistency().ok

    def _record_changed(self, publication: Publication) -> None:
        """Called by a registered publication after it re-indexed itself."""
        logger.debug("Re-indexed id %s", publication.reference_id)
        self._after_mutation()

    def _after_mutation(self) -> None:
        if not self.self_check:
            return
        report = self.check_consistency()
        if not report.ok:
            logger.error("Reference database left inconsistent: %s", report.model_dump())
            raise InconsistentStateError(f"consistency check failed: {report.model_dump()}")


def _canonical_full_name(full_name: str) -> str:
    """'Adams,Douglas' and 'adams, douglas' compare equal."""
    last, _, first = full_name.lower().partition(",")
    return f"{last.strip()}, {' '.join(first.split())}"


def _id_sort_key(reference_id: str):
    return (len(reference_id), reference_id)
