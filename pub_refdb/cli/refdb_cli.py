from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import networkx as nx
import typer
from rich.console import Console
from rich.table import Table

from pub_refdb.db.database import ConsistencyReport, ReferenceDatabase
from pub_refdb.errors import CitationError, DuplicateRecordError, RefDbError
from pub_refdb.graph.export import to_networkx
from pub_refdb.models.journal_article import JournalArticle
from pub_refdb.models.publication import Publication
from pub_refdb.models.publication_type import PublicationType, reset_citation_weights, set_citation_weight
from pub_refdb.sample import build_sample_database

app = typer.Typer(
    help="Explore the bundled sample reference database."
)

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _id_order(publication: Publication) -> Tuple[int, str]:
    ref = publication.reference_id or ""
    return (len(ref), ref)


def _publications_table(publications: Iterable[Publication]) -> Table:
    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Id", justify="right")
    tbl.add_column("Kind")
    tbl.add_column("Title")
    tbl.add_column("Year", justify="right")
    tbl.add_column("Authors")
    tbl.add_column("Cites")
    tbl.add_column("Cited by")

    for p in sorted(publications, key=_id_order):
        tbl.add_row(
            p.reference_id or "-",
            p.kind.label,
            p.title,
            str(p.year_of_publication),
            "; ".join(p.all_authors()),
            ", ".join(sorted((c.reference_id or "?" for c in p.citations()), key=lambda r: (len(r), r))),
            ", ".join(sorted((c.reference_id or "?" for c in p.citators()), key=lambda r: (len(r), r))),
        )
    return tbl


def _print_publications(publications: Iterable[Publication], empty: str = "  (none)") -> None:
    publications = list(publications)
    if not publications:
        console.print(empty)
        return
    console.print(_publications_table(publications))


def _print_index(title: str, key_label: str, items: List[Tuple[str, List[str]]]) -> None:
    console.print(f"\n[bold]{title}[/bold]")
    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column(key_label)
    tbl.add_column("Ids")
    for key, ids in items:
        tbl.add_row(key, ", ".join(ids))
    console.print(tbl)


def _print_dump(db: ReferenceDatabase) -> None:
    console.print("\n[bold]Id table[/bold]")
    _print_publications(db.publications())
    _print_index("Author index", "Author", db.author_index_items())
    _print_index("Title word index", "Word", db.title_word_index_items())


def _print_report(report: ConsistencyReport) -> None:
    for name, value in report.model_dump().items():
        status = "[green]OK[/green]" if value else "[red]NOT OK[/red]"
        console.print(f"  {name:<16} {status}")


def _load(with_citations: bool = True) -> ReferenceDatabase:
    reset_citation_weights()
    return build_sample_database(with_citations=with_citations)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("dump")
def dump(
    no_citations: bool = typer.Option(
        False,
        "--no-citations",
        help="Load the sample publications without their citation edges.",
    ),
) -> None:
    """
    Print the id table and both indexes.
    """
    _print_dump(_load(with_citations=not no_citations))


@app.command("search")
def search(
    author: Optional[str] = typer.Option(
        None, "--author", "-a", help="Author key ('D. Adams') or full name ('Adams, Douglas')."
    ),
    word: Optional[str] = typer.Option(None, "--word", "-w", help="A single title word."),
    reference_id: Optional[str] = typer.Option(None, "--id", "-i", help="Reference id."),
) -> None:
    """
    Exact-key lookup by author, title word or id.
    """
    if author is None and word is None and reference_id is None:
        console.print("[red]Pass at least one of --author, --word or --id.[/red]")
        raise typer.Exit(code=1)

    db = _load()

    if reference_id is not None:
        console.print(f"[bold]Publication with id {reference_id}:[/bold]")
        found = db.find_by_id(reference_id)
        _print_publications([found] if found is not None else [])

    if author is not None:
        console.print(f"[bold]Publications by '{author}':[/bold]")
        _print_publications(db.find_by_author(author))

    if word is not None:
        console.print(f"[bold]Publications with '{word}' in the title:[/bold]")
        _print_publications(db.find_by_title_word(word))


@app.command("closure")
def closure(
    reference_id: str = typer.Argument(..., help="Id whose cited-by closure to compute."),
) -> None:
    """
    Every publication that cites this one, directly or transitively.
    """
    db = _load()
    try:
        result = db.transitive_closure_cited_by(reference_id)
    except CitationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]Transitive cited-by closure of {reference_id}:[/bold]")
    _print_publications(result)


@app.command("citation-index")
def citation_index(
    author_name: str = typer.Argument(..., help="Full author name, e.g. 'Adams, Douglas'."),
    weight: List[str] = typer.Option(
        [],
        "--weight",
        help="Override a citation weight, e.g. --weight conference_paper=0.6 (repeatable).",
    ),
) -> None:
    """
    Sum of citator weights over every publication of an author.
    """
    db = _load()
    for spec in weight:
        kind, _, value = spec.partition("=")
        try:
            set_citation_weight(PublicationType(kind.strip()), float(value))
        except ValueError:
            console.print(f"[red]Invalid --weight {spec!r}[/red]")
            raise typer.Exit(code=1)

    try:
        score = db.citation_index(author_name)
    except RefDbError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    finally:
        reset_citation_weights()

    console.print(f"Citation index of [bold]{author_name}[/bold]: {score:.2f}")


@app.command("neighbors")
def neighbors(
    reference_id: str = typer.Argument(..., help="Id whose citation neighborhood to inspect."),
    depth: int = typer.Option(
        1,
        "--depth",
        "-d",
        min=1,
        help="Graph distance to traverse (1 = direct citations and citators).",
    ),
) -> None:
    """
    Show the citation neighborhood around a publication up to a given depth.
    """
    G = to_networkx(_load())
    if reference_id not in G:
        console.print(f"[red]Publication '{reference_id}' not found.[/red]")
        raise typer.Exit(code=1)

    lengths = nx.single_source_shortest_path_length(G.to_undirected(as_view=True), reference_id, cutoff=depth)
    results = [(n, d) for n, d in lengths.items() if n != reference_id]

    console.print(f"[bold]Neighbors of {reference_id}[/bold] (depth ≤ {depth}):")
    if not results:
        console.print("  (no neighbors)")
        return

    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Id", justify="right")
    tbl.add_column("Title")
    tbl.add_column("Relation")
    tbl.add_column("Depth", justify="right")

    for node, d in sorted(results, key=lambda x: (x[1], len(x[0]), x[0])):
        if G.has_edge(reference_id, node):
            relation = "cites"
        elif G.has_edge(node, reference_id):
            relation = "cited by"
        else:
            relation = ""
        tbl.add_row(node, G.nodes[node]["title"], relation, str(d))

    console.print(tbl)


@app.command("check")
def check() -> None:
    """
    Run the consistency checks on the sample database.
    """
    report = _load().check_consistency()
    console.print("[bold]Database consistency checks[/bold]")
    _print_report(report)
    if not report.ok:
        raise typer.Exit(code=1)


@app.command("demo")
def demo() -> None:
    """
    Walk through inserts, searches, removal, re-indexing, citation index
    and transitive closure on the sample data.
    """
    db = _load(with_citations=False)

    console.rule("[bold cyan]Adding publications[/bold cyan]")
    console.print(f"Publications in the database: {len(db)}")
    clone = JournalArticle(
        "Apples and oranges.  a comparison",
        "Journal of Irreproducible Research", 45, 1999,
        "Adams,Douglas", "Adams,Douglas",
    )
    try:
        db.insert(clone)
    except DuplicateRecordError as exc:
        console.print(f"Inserting a clone of publication 1 is refused: [yellow]{exc}[/yellow]")
    _print_report(db.check_consistency())

    console.rule("[bold cyan]Searching[/bold cyan]")
    console.print("[bold]Publications of D. Adams:[/bold]")
    _print_publications(db.find_by_author("D. Adams"))
    console.print("[bold]Publications with the word 'from':[/bold]")
    _print_publications(db.find_by_title_word("from"))

    console.rule("[bold cyan]Adding citations[/bold cyan]")
    for citator_id, citation_id in [
        ("1", "2"), ("1", "3"), ("1", "4"), ("1", "5"),
        ("2", "3"), ("2", "4"), ("2", "5"), ("5", "10"),
    ]:
        db.add_citation(citator_id, citation_id)
        console.print(f"  {citator_id} cites {citation_id}")

    console.rule("[bold cyan]Removing publication 2[/bold cyan]")
    removed = db.find_by_id("2")
    db.remove("2")
    console.print(f"Publications in the database: {len(db)}")
    console.print(f"Publication 2 after removal: {removed!r}")
    console.print("[bold]Publications of J. Bond:[/bold]")
    _print_publications(db.find_by_author("J. Bond"))

    console.rule("[bold cyan]Changing authors and title of publication 9[/bold cyan]")
    pub9 = db.get("9")
    pub9.remove_author("Kohei, Adachi")
    pub9.add_author("Thor, Peter")
    pub9.set_title("Perceived size of Targets Viewed From behind the Legs")
    _print_publications([pub9])
    _print_report(db.check_consistency())

    console.rule("[bold cyan]Citation index[/bold cyan]")
    console.print(f"Adams, Douglas: {db.citation_index('Adams, Douglas'):.2f}")
    db.add_citation("10", "1")
    console.print(f"after 10 cites 1: {db.citation_index('Adams, Douglas'):.2f}")
    set_citation_weight(PublicationType.CONFERENCE_PAPER, 0.6)
    console.print(f"conference paper weight 0.6: {db.citation_index('Adams, Douglas'):.2f}")
    db.add_citation("11", "1")
    console.print(f"after 11 cites 1: {db.citation_index('Adams, Douglas'):.2f}")
    reset_citation_weights()

    console.rule("[bold cyan]Transitive closure[/bold cyan]")
    console.print("[bold]Cited-by closure of publication 4:[/bold]")
    _print_publications(db.transitive_closure_cited_by("4"))

    console.rule("[bold cyan]Final state[/bold cyan]")
    _print_dump(db)
    _print_report(db.check_consistency())
