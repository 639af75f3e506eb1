# pub_refdb/db/table.py

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

if TYPE_CHECKING:
    from pub_refdb.models.publication import Publication


class RecordTable:
    """
    The authoritative id -> publication table.

    Ids are string-encoded integers handed out by next_id(). The counter
    only moves forward: ids of removed publications are not reclaimed,
    and a value that is somehow already taken is skipped.
    """

    def __init__(self) -> None:
        self._records: Dict[str, "Publication"] = {}
        self._counter = 0

    @property
    def counter(self) -> int:
        return self._counter

    def next_id(self) -> str:
        candidate = self._counter + 1
        while str(candidate) in self._records:
            candidate += 1
        self._counter = candidate
        return str(candidate)

    def register(self, reference_id: str, publication: "Publication") -> None:
        assert reference_id not in self._records, f"id {reference_id} is already registered"
        self._records[reference_id] = publication

    def unregister(self, reference_id: str) -> None:
        self._records.pop(reference_id, None)

    def lookup(self, reference_id: Optional[str]) -> Optional["Publication"]:
        if reference_id is None:
            return None
        return self._records.get(reference_id)

    def has_id(self, reference_id: Optional[str]) -> bool:
        return reference_id is not None and reference_id in self._records

    def has_id_validator(self, _key: str, reference_id: str) -> bool:
        """(key, id) adapter so the table can validate IndexStore members."""
        return self.has_id(reference_id)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._records))

    def items(self) -> List[Tuple[str, "Publication"]]:
        return list(self._records.items())

    def publications(self) -> List["Publication"]:
        return list(self._records.values())

    def is_consistent(self) -> bool:
        """
        Mirror check: every publication knows the id it is stored under.

        Consistency between this table and the indexes is checked by the
        indexes, not here.
        """
        for reference_id, publication in self._records.items():
            if publication is None:
                return False
            if publication.reference_id != reference_id:
                return False
        return True
