# pub_refdb/db/index.py

"""
Derived indexes over the record table.

IndexStore is a plain key -> set-of-ids mapping that never keeps an empty
set around. AuthorIndex and TitleWordIndex add the key derivation and the
domain-specific validity rules on top of it; they read publications from
the RecordTable but only ever store ids.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

from pub_refdb.db.table import RecordTable

logger = logging.getLogger(__name__)

# One or more of these characters separate title words.
WORD_SPLIT_RE = re.compile(r"[ ./@,;+{}()\"&:-]+")

Validator = Callable[[str, str], bool]


def title_words(title: str) -> List[str]:
    """
    Lower-cased title words, in order, with empty tokens dropped.
    """
    return [w for w in WORD_SPLIT_RE.split(title.lower()) if w]


class IndexStore:
    """
    Generic key -> set of ids.

    None of the operations fail on unknown keys. Integrity problems are
    only ever reported through is_consistent().
    """

    def __init__(self) -> None:
        self._index: Dict[str, Set[str]] = {}

    def put(self, key: str, reference_id: str) -> None:
        self._index.setdefault(key, set()).add(reference_id)

    def remove(self, key: str, reference_id: str) -> None:
        ids = self._index.get(key)
        if ids is None:
            return
        ids.discard(reference_id)
        if not ids:
            del self._index[key]

    def get(self, key: str) -> FrozenSet[str]:
        return frozenset(self._index.get(key, ()))

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._index)

    def keys(self) -> List[str]:
        return list(self._index)

    def items(self) -> Iterator[Tuple[str, FrozenSet[str]]]:
        for key, ids in self._index.items():
            yield key, frozenset(ids)

    def is_consistent(self, validator: Optional[Validator] = None) -> bool:
        for key, ids in self._index.items():
            if not ids:
                return False
            if validator is not None:
                for reference_id in ids:
                    if not validator(key, reference_id):
                        return False
        return True


class AuthorIndex(IndexStore):
    """
    Author key ('F. D. Roosevelt') -> ids of the publications listing that author.
    """

    def __init__(self, table: RecordTable) -> None:
        super().__init__()
        self._table = table

    def add_author(self, rank: int, reference_id: Optional[str]) -> None:
        publication = self._table.lookup(reference_id)
        if publication is None:
            return
        key = publication.author_key_at(rank)
        self.put(key, reference_id)
        logger.debug("Author index: %r += %s", key, reference_id)

    def remove_author(self, rank: int, reference_id: Optional[str]) -> None:
        """
        Must be called while the author is still at `rank` on the publication.

        The id stays under the key when another author of the same
        publication shares it (e.g. 'Adams, Douglas' and 'Adams, Dirk').
        """
        publication = self._table.lookup(reference_id)
        if publication is None:
            return
        key = publication.author_key_at(rank)
        others = publication.all_author_keys()
        del others[rank - 1]
        if key in others:
            return
        self.remove(key, reference_id)
        logger.debug("Author index: %r -= %s", key, reference_id)

    def add_all_authors(self, reference_id: str) -> None:
        publication = self._table.lookup(reference_id)
        if publication is None:
            return
        for rank in range(1, publication.nb_authors + 1):
            self.add_author(rank, reference_id)

    def remove_all_authors(self, reference_id: str) -> None:
        publication = self._table.lookup(reference_id)
        if publication is None:
            return
        for key in set(publication.all_author_keys()):
            self.remove(key, reference_id)

    def is_valid_author_tuple(self, key: str, ids: FrozenSet[str]) -> bool:
        wanted = key.lower()
        for reference_id in ids:
            publication = self._table.lookup(reference_id)
            if publication is None:
                return False
            if wanted not in (k.lower() for k in publication.all_author_keys()):
                return False
        return True

    def is_consistent(self, validator: Optional[Validator] = None) -> bool:
        if not super().is_consistent(validator or self._table.has_id_validator):
            return False
        return all(self.is_valid_author_tuple(key, ids) for key, ids in self.items())


class TitleWordIndex(IndexStore):
    """
    Lower-cased title word -> ids of the publications whose title contains it.
    """

    def __init__(self, table: RecordTable) -> None:
        super().__init__()
        self._table = table

    def add_title_words(self, reference_id: Optional[str]) -> None:
        publication = self._table.lookup(reference_id)
        if publication is None:
            return
        for word in title_words(publication.title):
            self.put(word, reference_id)
        logger.debug("Title index: indexed %r for %s", publication.title, reference_id)

    def remove_title_words(self, reference_id: Optional[str]) -> None:
        publication = self._table.lookup(reference_id)
        if publication is None:
            return
        for word in title_words(publication.title):
            self.remove(word, reference_id)
        logger.debug("Title index: dropped %r for %s", publication.title, reference_id)

    def is_valid_title_word_tuple(self, key: str, ids: FrozenSet[str]) -> bool:
        wanted = key.lower()
        for reference_id in ids:
            publication = self._table.lookup(reference_id)
            if publication is None:
                return False
            if wanted not in title_words(publication.title):
                return False
        return True

    def is_consistent(self, validator: Optional[Validator] = None) -> bool:
        if not super().is_consistent(validator or self._table.has_id_validator):
            return False
        return all(self.is_valid_title_word_tuple(key, ids) for key, ids in self.items())
