# pub_refdb/db/__init__.py

"""
The reference database: id table, derived author / title-word indexes,
and the orchestrator that keeps them consistent.
"""

from .database import ConsistencyReport, ReferenceDatabase
from .index import AuthorIndex, IndexStore, TitleWordIndex, title_words
from .table import RecordTable

__all__ = [
    "AuthorIndex",
    "ConsistencyReport",
    "IndexStore",
    "RecordTable",
    "ReferenceDatabase",
    "TitleWordIndex",
    "title_words",
]
