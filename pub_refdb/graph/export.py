# pub_refdb/graph/export.py

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

import networkx as nx

from pub_refdb.graph.schema import EdgeType, NodeType

if TYPE_CHECKING:
    from pub_refdb.db.database import ReferenceDatabase


def _publication_attrs(publication) -> Dict[str, Any]:
    return {
        "type": NodeType.PUBLICATION.value,
        "kind": publication.kind.value,
        "title": publication.title,
        "year": publication.year_of_publication,
        "authors": publication.all_authors(),
    }


def to_networkx(db: "ReferenceDatabase") -> nx.DiGraph:
    """
    Snapshot the citation graph of the registered publications.

    Node ids are reference ids. An edge u -> v means u cites v; its `weight`
    is u's citation weight at snapshot time. Edges to publications outside
    the database are left out.
    """
    G = nx.DiGraph()

    for reference_id, publication in db.table.items():
        G.add_node(reference_id, **_publication_attrs(publication))

    for reference_id, publication in db.table.items():
        for cited in publication.citations():
            cited_id = cited.reference_id
            if cited_id is None or cited_id not in G:
                continue
            G.add_edge(
                reference_id,
                cited_id,
                type=EdgeType.PUBLICATION_CITES_PUBLICATION.value,
                weight=publication.citation_weight(),
            )

    return G
