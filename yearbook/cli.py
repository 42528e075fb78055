"""Command line interface for browsing Yearbook highlights by tag."""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy.orm import Session

from yearbook.db import (
    apply_migrations,
    create_engine_with_path,
    get_db_path,
    make_session_factory,
)
from yearbook.exc import DoesNotExist
from yearbook.models.tag import Tag
from yearbook.services.logs import configure_logging
from yearbook.services.tagged_content import TaggedContentService
from yearbook.services.tags import TagService
from yearbook.types import TaggedContent
from yearbook.utils import format_short_date, to_utc_iso

app = typer.Typer(help="Yearbook: browse your tagged highlights across years.")

#: Database path chosen on the command line.
_state: dict[str, Path | None] = {"db_path": None}

DbOption = Annotated[
    Path | None,
    typer.Option("--db", help="Database file (default: YEARBOOK_DB_PATH or app data)"),
]
YearOption = Annotated[
    int | None, typer.Option("--year", "-y", help="Only this calendar year")
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    db: DbOption = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(level=logging.DEBUG if verbose else logging.INFO, db_path=db)
    _state["db_path"] = db


@contextmanager
def _open_session() -> Iterator[Session]:
    """Open the database, bringing its schema up to date first."""
    engine = create_engine_with_path(_state["db_path"])
    try:
        apply_migrations(engine)
        session = make_session_factory(engine)()
        try:
            yield session
        finally:
            session.close()
    finally:
        engine.dispose()


def _content_to_json(item: TaggedContent) -> dict:
    return {
        "id": item.id,
        "tiptap_id": item.tiptap_id,
        "text": item.text,
        "created_at": to_utc_iso(item.created_at),
        "source": {
            "year": item.source.year,
            "section": item.source.section.value,
            "item_id": item.source.item_id,
            "item_title": item.source.item_title,
        },
        "tags": [tag.name for tag in item.tags],
    }


def _echo_content(item: TaggedContent) -> None:
    typer.echo(f"  \"{item.text}\"")
    typer.echo(
        f"    {item.source.year} / {item.source.section.value} / "
        f"{item.source.item_title}  ({format_short_date(item.created_at)})"
    )


@app.command()
def migrate() -> None:
    """Create or upgrade the database."""
    with _open_session():
        pass
    typer.echo(f"Database ready: {_state['db_path'] or get_db_path()}")


@app.command()
def tags(
    user_id: str = typer.Argument(..., help="User ID"),
    year: YearOption = None,
    output_json: JsonOption = False,
) -> None:
    """List a user's tags with their highlight counts."""
    with _open_session() as session:
        if year is None:
            summaries = TagService.list_tags(session, user_id)
        else:
            summaries = TaggedContentService.get_tags_for_year(session, user_id, year)
    if output_json:
        typer.echo(
            json.dumps(
                [
                    {"id": s.id, "name": s.name, "highlight_count": s.highlight_count}
                    for s in summaries
                ],
                indent=2,
            )
        )
        return
    if not summaries:
        typer.echo("No tags.")
        return
    for summary in summaries:
        typer.echo(f"{summary.name} ({summary.highlight_count})")


@app.command(name="show-tag")
def show_tag(
    user_id: str = typer.Argument(..., help="User ID"),
    name: str = typer.Argument(..., help="Tag name"),
    year: YearOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show every highlight carrying a tag, newest first."""
    with _open_session() as session:
        tag = Tag.get_by_name(session, user_id, name.strip())
        if tag is None:
            typer.echo(f"Tag '{name}' not found.", err=True)
            raise typer.Exit(1)
        try:
            content = TaggedContentService.get_tagged_content_by_tag(
                session, user_id, tag.id, year=year
            )
        except DoesNotExist as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(1) from e
    if output_json:
        typer.echo(json.dumps([_content_to_json(c) for c in content], indent=2))
        return
    typer.echo(f"{name}: {len(content)} highlight(s)\n")
    for item in content:
        _echo_content(item)


@app.command()
def search(
    user_id: str = typer.Argument(..., help="User ID"),
    query: str = typer.Argument(..., help="Text to look for"),
    year: YearOption = None,
    output_json: JsonOption = False,
) -> None:
    """Search highlight text."""
    with _open_session() as session:
        content = TaggedContentService.search_highlights(
            session, user_id, query, year=year
        )
    if output_json:
        typer.echo(json.dumps([_content_to_json(c) for c in content], indent=2))
        return
    typer.echo(f"Found {len(content)} highlight(s)\n")
    for item in content:
        _echo_content(item)
        if item.tags:
            typer.echo(f"    tags: {', '.join(t.name for t in item.tags)}")
