# pub_refdb/graph/citations.py

"""
The citation graph.

Edges live on the publications themselves as two parallel sets
(`_cites` and `_cited_by`). This module is the only writer of those sets
and always updates both sides together, so for any a, b:

    b in a.citations()  <=>  a in b.citators()

Cycles are allowed. Traversals keep a visited set and never assume the
graph is acyclic.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Set

from pub_refdb.errors import InvalidCitationError

if TYPE_CHECKING:
    from pub_refdb.models.publication import Publication

logger = logging.getLogger(__name__)


def can_cite(citator: Publication, citation: Optional[Publication]) -> bool:
    """
    Duplicate edges are not rejected here; the set absorbs them.
    """
    return citation is not None and citation is not citator


def add_citation(citator: Publication, citation: Optional[Publication]) -> None:
    if not can_cite(citator, citation):
        if citation is None:
            raise InvalidCitationError("citation target cannot be None")
        raise InvalidCitationError(f"a publication cannot cite itself: {citator!r}")

    citator._cites.add(citation)
    citation._cited_by.add(citator)
    logger.debug("Added citation %r -> %r", citator.reference_id, citation.reference_id)


def remove_citation(citator: Publication, citation: Optional[Publication]) -> None:
    if citation is None or citation not in citator._cites:
        return

    citator._cites.discard(citation)
    citation._cited_by.discard(citator)
    logger.debug("Removed citation %r -> %r", citator.reference_id, citation.reference_id)


def detach(publication: Publication) -> None:
    """
    Remove `publication` as a party to every citation edge, on both sides.
    """
    for citation in list(publication._cites):
        remove_citation(publication, citation)
    for citator in list(publication._cited_by):
        remove_citation(citator, publication)


def is_consistent(publication: Publication) -> bool:
    for citation in publication._cites:
        if not can_cite(publication, citation):
            return False
        if publication not in citation._cited_by:
            return False

    for citator in publication._cited_by:
        if not can_cite(publication, citator):
            return False
        if publication not in citator._cites:
            return False

    return True


def transitive_closure_cited_by(publication: Publication) -> Set[Publication]:
    """
    Every publication reachable from `publication` by repeatedly following
    cited-by edges, starting with its direct citators.

    A node only has its own citators expanded the first time it enters the
    result, which is what makes this terminate on cyclic graphs. The start
    node itself is never part of the result, even when a cycle leads back
    to it.
    """
    closure: Set[Publication] = set()
    stack: List[Publication] = [publication]

    while stack:
        node = stack.pop()
        for citator in node._cited_by:
            if citator is publication or citator in closure:
                continue
            closure.add(citator)
            if citator._cited_by:
                stack.append(citator)

    return closure
