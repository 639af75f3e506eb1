# tests/test_database.py

import pytest

from pub_refdb.db.database import ReferenceDatabase
from pub_refdb.db.index import title_words
from pub_refdb.errors import (
    AlreadyIndexedError,
    AuthorNotFoundError,
    CitationError,
    DuplicateRecordError,
    InconsistentStateError,
    InsertError,
    InvalidCitationError,
    NullRecordError,
    PublicationValidationError,
    UnknownIdError,
)
from pub_refdb.models import Book, ConferencePaper, JournalArticle, PublicationType
from pub_refdb.models import reset_citation_weights, set_citation_weight
from pub_refdb.sample import build_sample_database


def _article(title="Apples and Oranges", year=1999, *authors):
    return JournalArticle(title, "Journal of Irreproducible Research", 45, year, *(authors or ("Adams, Douglas", "Adams, Douglas")))


def _ids(publications):
    return {p.reference_id for p in publications}


def _index_mentions(db, reference_id):
    keys = [k for k, ids in db.author_index.items() if reference_id in ids]
    words = [w for w, ids in db.title_word_index.items() if reference_id in ids]
    return keys + words


# ---------------------------------------------------------------------------
# insert
# ---------------------------------------------------------------------------

def test_insert_assigns_id_and_indexes_everything():
    db = ReferenceDatabase()
    article = _article("Apples and oranges.  a comparison")

    rid = db.insert(article)

    assert rid == "1"
    assert article.reference_id == "1"
    assert db.find_by_id("1") is article
    assert article in db and "1" in db
    assert len(db) == 1

    for key in article.all_author_keys():
        assert article in db.find_by_author(key)
    for word in title_words(article.title):
        assert article in db.find_by_title_word(word)

    assert db.is_consistent()


def test_insert_rejects_null_and_already_indexed():
    db = ReferenceDatabase()
    with pytest.raises(NullRecordError):
        db.insert(None)

    article = _article()
    db.insert(article)
    with pytest.raises(AlreadyIndexedError):
        db.insert(article)
    assert len(db) == 1


def test_duplicate_record_is_refused():
    db = ReferenceDatabase()
    db.insert(_article("Apples and Oranges"))

    with pytest.raises(DuplicateRecordError) as excinfo:
        db.insert(_article("apples and oranges"))
    assert excinfo.value.duplicate_id == "1"
    assert isinstance(excinfo.value, InsertError)
    assert len(db) == 1


@pytest.mark.parametrize(
    "variant",
    [
        lambda: _article("Apples and Pears"),
        lambda: _article("Apples and Oranges", 2000),
        lambda: _article("Apples and Oranges", 1999, "Adams, Douglas"),
        lambda: _article("Apples and Oranges", 1999, "Adams, Douglas", "Adams, Dirk"),
        lambda: Book("Apples and Oranges", 1999, "Publisher", "Adams, Douglas", "Adams, Douglas"),
    ],
)
def test_changing_one_field_allows_insert(variant):
    db = ReferenceDatabase()
    db.insert(_article("Apples and Oranges"))
    db.insert(variant())
    assert len(db) == 2
    assert db.is_consistent()


def test_failed_indexing_rolls_back_insert(monkeypatch):
    db = ReferenceDatabase()
    article = _article()

    def boom(reference_id):
        raise RuntimeError("index failure")

    monkeypatch.setattr(db.title_word_index, "add_title_words", boom)
    with pytest.raises(RuntimeError):
        db.insert(article)

    assert len(db) == 0
    assert article.reference_id is None
    assert article.database is None
    assert len(db.author_index) == 0
    assert len(db.title_word_index) == 0
    assert db.is_consistent()

    monkeypatch.undo()
    # the counter does not rewind
    assert db.insert(article) == "2"


def test_failure_after_indexing_rolls_back_insert(monkeypatch):
    db = ReferenceDatabase()
    kept = db.insert(_article("Feline Reactions to Bearded Men"))
    article = _article()

    def boom():
        raise InconsistentStateError("late failure")

    monkeypatch.setattr(db, "_after_mutation", boom)
    with pytest.raises(InconsistentStateError):
        db.insert(article)

    assert len(db) == 1
    assert article.reference_id is None
    assert _index_mentions(db, "2") == []
    assert db.author_index.get("D. Adams") == {kept}

    monkeypatch.undo()
    assert db.is_consistent()


# ---------------------------------------------------------------------------
# remove
# ---------------------------------------------------------------------------

def test_remove_cleans_table_indexes_and_citations():
    db = build_sample_database()
    pub2 = db.get("2")
    citators, cited = pub2.citators(), pub2.citations()
    assert citators and cited

    db.remove("2")

    assert db.find_by_id("2") is None
    assert pub2.reference_id is None
    assert _index_mentions(db, "2") == []
    assert db.find_by_author("J. Bond") == set()
    assert pub2.citators() == set() and pub2.citations() == set()
    for p in citators:
        assert pub2 not in p.citations()
    for p in cited:
        assert pub2 not in p.citators()
    assert db.is_consistent()


def test_remove_unknown_id_is_noop():
    db = build_sample_database()
    db.remove("999")
    db.remove(None)
    assert len(db) == 11


def test_reinserted_publication_gets_fresh_id():
    db = ReferenceDatabase()
    article = _article()
    db.insert(article)
    db.remove("1")
    assert db.insert(article) == "2"


def test_terminate_removes_from_database():
    db = build_sample_database()
    pub5 = db.get("5")
    pub5.terminate()

    assert "5" not in db
    assert pub5.citators() == set()
    assert db.is_consistent()


# ---------------------------------------------------------------------------
# lookups
# ---------------------------------------------------------------------------

def test_find_by_author_accepts_key_or_full_name():
    db = build_sample_database()

    # 'D. Adams' covers both Douglas and Dirk
    assert _ids(db.find_by_author("D. Adams")) == {"1", "2", "3", "4", "5", "6", "7", "8"}
    assert _ids(db.find_by_author("Adams, Dirk")) == _ids(db.find_by_author("D. Adams"))
    assert db.find_by_author("Z. Nobody") == set()

    with pytest.raises(PublicationValidationError):
        db.find_by_author(None)


def test_find_by_title_word_is_case_insensitive():
    db = build_sample_database()
    assert _ids(db.find_by_title_word("Comparison")) == {"1", "8"}
    assert _ids(db.find_by_title_word(" FROM ")) == {"4", "9"}
    assert db.find_by_title_word("zebra") == set()


# ---------------------------------------------------------------------------
# re-indexing on mutation
# ---------------------------------------------------------------------------

def test_title_change_reindexes():
    db = build_sample_database()
    pub9 = db.get("9")

    pub9.set_title("Perceived size of Targets Viewed From behind the Legs")

    assert pub9 not in db.find_by_title_word("between")
    assert pub9 in db.find_by_title_word("behind")
    assert pub9 in db.find_by_title_word("from")
    assert db.is_consistent()


def test_author_changes_reindex():
    db = build_sample_database()
    pub9 = db.get("9")

    pub9.remove_author("Kohei, Adachi")
    pub9.add_author("Thor, Peter")

    assert db.find_by_author("A. Kohei") == set()
    assert _ids(db.find_by_author("P. Thor")) == {"9"}
    assert db.is_consistent()


def test_removing_one_of_two_identical_authors_keeps_the_key():
    db = ReferenceDatabase()
    article = _article()
    db.insert(article)

    article.remove_author_at(2)
    assert article in db.find_by_author("D. Adams")
    assert db.is_consistent()

    article.add_author_at("Bond, Jill", 1)
    article.remove_author_at(2)
    assert db.find_by_author("D. Adams") == set()
    assert article in db.find_by_author("J. Bond")
    assert db.is_consistent()


def test_unregistered_mutation_does_not_touch_indexes():
    db = build_sample_database()
    before = db.title_word_index_items()

    stray = Book("Horse Calculus", 2014, "JIR", "Adams, Douglas")
    stray.set_title("Horse Algebra")
    stray.add_author("Bond, Jill")

    assert db.title_word_index_items() == before
    assert db.find_by_author("J. Bond") == {db.get("2")}


# ---------------------------------------------------------------------------
# citations
# ---------------------------------------------------------------------------

def test_add_citation_between_registered_records():
    db = ReferenceDatabase()
    r3 = _article("Stock Market Behavior", 1905, "Dhoore, Paul")
    r4 = _article("Questions From the Chinese Translator", 1905, "Yin, Lee")
    id3, id4 = db.insert(r3), db.insert(r4)

    db.add_citation(id3, id4)

    assert r3.citations() == {r4}
    assert r4.citators() == {r3}
    assert db.find_by_author("L. Yin") == {r4}
    assert db.is_consistent()

    db.remove_citation(id3, id4)
    db.remove_citation(id3, id4)
    assert r3.citations() == set()


def test_citation_errors():
    db = build_sample_database()

    with pytest.raises(InvalidCitationError):
        db.add_citation("1", "1")

    with pytest.raises(UnknownIdError) as excinfo:
        db.add_citation("1", "42")
    assert excinfo.value.reference_id == "42"
    assert isinstance(excinfo.value, CitationError)
    assert isinstance(excinfo.value, LookupError)

    with pytest.raises(UnknownIdError):
        db.remove_citation(None, "1")


def test_closure_on_cycle_through_database():
    db = ReferenceDatabase()
    r1 = _article("First", 2001, "Adams, Douglas")
    r2 = _article("Second", 2002, "Adams, Douglas")
    r3 = _article("Third", 2003, "Adams, Douglas")
    for p in (r1, r2, r3):
        db.insert(p)

    db.add_citation("1", "2")
    db.add_citation("2", "3")
    db.add_citation("3", "1")

    closure = db.transitive_closure_cited_by("1")
    assert closure == {r2, r3}
    assert len(closure) == 2


def test_closure_on_sample_database():
    db = build_sample_database()
    assert _ids(db.transitive_closure_cited_by("4")) == {"1", "2", "5", "10", "11"}
    assert db.transitive_closure_cited_by("11") == set()

    with pytest.raises(UnknownIdError):
        db.transitive_closure_cited_by("404")


def test_citation_index_counts_verbatim_author_only():
    db = build_sample_database()

    # citators of Douglas Adams' publications 1, 2, 4, 5 (6 and 8 are uncited):
    # 1 <- 10 (conference 0.7), 11 (book 1.2); 2 <- 1; 4 <- 1, 2; 5 <- 1, 2
    assert db.citation_index("Adams, Douglas") == pytest.approx(6.9)
    assert db.citation_index("adams,douglas") == pytest.approx(6.9)

    # Dirk shares the 'D. Adams' key but only publication 3 (cited by 1 and 2) is his
    assert db.citation_index("Adams, Dirk") == pytest.approx(2.0)


def test_citation_index_follows_weight_changes():
    db = build_sample_database()
    try:
        set_citation_weight(PublicationType.CONFERENCE_PAPER, 0.6)
        assert db.citation_index("Adams, Douglas") == pytest.approx(6.8)
    finally:
        reset_citation_weights()


def test_citation_index_errors():
    db = build_sample_database()

    with pytest.raises(AuthorNotFoundError):
        db.citation_index("Nobody, Known")
    with pytest.raises(PublicationValidationError):
        db.citation_index("not a name")

    # key exists, but no verbatim match
    assert db.citation_index("Adams, Daisy") == 0.0


# ---------------------------------------------------------------------------
# consistency
# ---------------------------------------------------------------------------

def test_check_consistency_reports_each_structure():
    db = build_sample_database()
    report = db.check_consistency()
    assert report.ok
    assert report.model_dump() == {
        "id_table_ok": True,
        "author_index_ok": True,
        "title_index_ok": True,
        "records_ok": True,
    }

    db.author_index.put("Q. Nobody", "1")
    db.title_word_index.remove("apples", "1")
    db.get("3")._cites.add(db.get("4"))

    report = db.check_consistency()
    assert report.id_table_ok
    assert not report.author_index_ok
    assert report.title_index_ok
    assert not report.records_ok
    assert not report.ok


def test_check_consistency_flags_broken_mirror():
    db = build_sample_database()
    db.get("7")._reference_id = "70"
    report = db.check_consistency()
    assert not report.id_table_ok
    assert not report.records_ok


def test_check_consistency_flags_bad_year_and_blank_title(monkeypatch):
    from pub_refdb.config import settings as settings_module

    db = build_sample_database()
    monkeypatch.setattr(settings_module.get_settings(), "MIN_YEAR_OF_PUBLICATION", 2000)
    report = db.check_consistency()
    assert report.id_table_ok
    assert report.author_index_ok
    assert report.title_index_ok
    assert not report.records_ok

    monkeypatch.undo()
    assert db.is_consistent()

    db.get("11")._title = "   "
    assert not db.check_consistency().records_ok


def test_self_check_raises_on_inconsistent_state():
    db = build_sample_database(self_check=True)
    db.add_citation("3", "4")

    db.author_index.put("Q. Nobody", "1")
    with pytest.raises(InconsistentStateError):
        db.add_citation("4", "3")


def test_self_check_enabled_from_settings(monkeypatch):
    from pub_refdb.config import settings as settings_module

    monkeypatch.setattr(settings_module.get_settings(), "self_check_on_mutation", True)
    assert ReferenceDatabase().self_check is True
    assert ReferenceDatabase(self_check=False).self_check is False


def test_conference_paper_insert_and_lookup():
    db = ReferenceDatabase()
    paper = ConferencePaper("Feline Reactions to Bearded Men", 1978, "Annals", "Adams,Douglas")
    db.insert(paper)
    assert db.find_by_title_word("feline") == {paper}
    assert db.author_index_items() == [("D. Adams", ["1"])]
