# pub_refdb/sample.py

"""
A small sample library used by the CLI walkthrough and by the tests.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from pub_refdb.db.database import ReferenceDatabase
from pub_refdb.models.book import Book
from pub_refdb.models.conference_paper import ConferencePaper
from pub_refdb.models.journal_article import JournalArticle
from pub_refdb.models.publication import Publication


def sample_publications() -> List[Publication]:
    """Fresh, unregistered publications; ids 1..11 once inserted in order."""
    return [
        JournalArticle(
            "Apples and oranges.  a comparison",
            "Journal of Irreproducible Research", 45, 1999,
            "Adams,Douglas", "Adams,Douglas",
        ),
        JournalArticle(
            "The morphology of Steve",
            "Journal of Irreproducible Research", 78, 1905,
            "Adams,Douglas", "Bond, Jill",
        ),
        JournalArticle(
            "Stock Market Behavior Predicted by Rat Neurons",
            "Journal of Neurology", 78, 1905,
            "Dhoore, Paul", "Adams, Dirk",
        ),
        JournalArticle(
            "Questions From the Chinese Translator",
            "Contemplations", 78, 1905,
            "Yin, Lee", "Yin, Toa", "Toa, Lin", "Adams, Douglas",
        ),
        ConferencePaper(
            "Feline Reactions to Bearded Men", 1978,
            "Annals of Improbable research", "Adams,Douglas",
        ),
        ConferencePaper(
            "Feline Reactions to Bearded Men of beardtype 5#78#2", 1978,
            "Annals of Improbable research", "Adams,Douglas",
        ),
        Book(
            "Mathematically Correct Breakfast: How to Slice a Bagel into Two Linked Halves", 2015,
            "Elsevier", "Adams,Dirk", "Kirk, Douglas",
        ),
        Book("Apples and oranges.  a comparison", 1999, "Adams,Douglas", "Adams,Douglas"),
        JournalArticle(
            "Perceived size and Perceived Distance of Targets Viewed From Between the Legs ",
            "Evidence for Proprioceptive Theory", 45, 2000,
            "Atsuki, Higashiyama", "Kohei, Adachi",
        ),
        ConferencePaper(
            "solving the problem of excessive automobile pollution emissions by Software design", 2003,
            "Volkswagen conference", "Malik,Peter",
        ),
        Book("The Need for Double-Strength Placebos", 2014, "de bezige Bij", "Mayer, Bill"),
    ]


SAMPLE_CITATIONS: List[Tuple[str, str]] = [
    ("1", "2"),
    ("1", "3"),
    ("1", "4"),
    ("1", "5"),
    ("2", "3"),
    ("2", "4"),
    ("2", "5"),
    ("5", "10"),
    ("10", "1"),
    ("11", "1"),
]


def build_sample_database(
    with_citations: bool = True,
    self_check: Optional[bool] = None,
) -> ReferenceDatabase:
    db = ReferenceDatabase(self_check=self_check)
    for publication in sample_publications():
        db.insert(publication)
    if with_citations:
        for citator_id, citation_id in SAMPLE_CITATIONS:
            db.add_citation(citator_id, citation_id)
    return db
