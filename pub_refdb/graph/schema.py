# pub_refdb/graph/schema.py

from enum import Enum


class NodeType(str, Enum):
    PUBLICATION = "publication"


class EdgeType(str, Enum):
    # citator -> cited publication
    PUBLICATION_CITES_PUBLICATION = "PUBLICATION_CITES_PUBLICATION"
