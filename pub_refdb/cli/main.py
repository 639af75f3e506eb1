# pub_refdb/cli/main.py

from __future__ import annotations

import logging

import typer

from pub_refdb.cli import refdb_cli
from pub_refdb.config.settings import settings

app = typer.Typer(help="CLI tools for the publication reference database.")

app.add_typer(refdb_cli.app, name="sample")


@app.callback()
def main(
    log_level: str = typer.Option(
        settings.LOG_LEVEL,
        "--log-level",
        help="Python logging level (DEBUG, INFO, WARNING, ...).",
    ),
) -> None:
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO), force=True)


if __name__ == "__main__":
    app()
