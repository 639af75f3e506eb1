# pub_refdb/models/__init__.py

"""
Publication records: the abstract Publication and its three kinds.
"""

from .author import AuthorName, author_key, is_valid_author_name, parse_author_name
from .book import Book
from .conference_paper import ConferencePaper
from .journal_article import JournalArticle
from .publication import Publication
from .publication_type import (
    PublicationType,
    get_citation_weight,
    reset_citation_weights,
    set_citation_weight,
)

__all__ = [
    "AuthorName",
    "Book",
    "ConferencePaper",
    "JournalArticle",
    "Publication",
    "PublicationType",
    "author_key",
    "get_citation_weight",
    "is_valid_author_name",
    "parse_author_name",
    "reset_citation_weights",
    "set_citation_weight",
]
