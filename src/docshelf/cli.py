"""CLI for docshelf (tree, show, MCP server)."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from docshelf.core.tree.outline import render_outline
from docshelf.errors import DocshelfError
from docshelf.logging_config import configure_logging
from docshelf.seed import seed_forest
from docshelf.session import ViewerSession, build_fetcher, create_session

app = typer.Typer(help="docshelf: browse and edit an in-memory documentation tree.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_session(base_url: str | None, docs_dir: Path | None) -> ViewerSession:
    try:
        fetcher = build_fetcher(base_url=base_url, docs_dir=docs_dir)
    except ValueError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from None
    return create_session(fetcher=fetcher)


@app.command()
def tree(
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    show_ids: bool = typer.Option(True, "--ids/--no-ids", help="Show node ids"),
) -> None:
    """Print the seed documentation tree, sorted by name."""
    typer.echo(render_outline(seed_forest(), max_depth=max_depth, show_ids=show_ids), nl=False)


async def _show(session: ViewerSession, node_id: str, *, raw: bool) -> str:
    await session.select(node_id)
    if not raw:
        return session.displayed_html
    editor = await session.open_editor()
    if editor is None:
        return session.displayed_html
    if editor.warning:
        logger.warning("{}", editor.warning)
    return editor.content


@app.command()
def show(
    node_id: str = typer.Argument(..., help="Node ID to show"),
    base_url: Annotated[
        str | None,
        typer.Option("--base-url", "-u", help="Server that linked file paths are fetched from"),
    ] = None,
    docs_dir: Annotated[
        Path | None,
        typer.Option("--docs-dir", "-d", help="Read linked file paths from this directory"),
    ] = None,
    raw: bool = typer.Option(False, "--raw", "-r", help="Print the unrendered source"),
) -> None:
    """Resolve and print the content of one node."""
    session = _open_session(base_url, docs_dir)
    try:
        content = asyncio.run(_show(session, node_id, raw=raw))
    except DocshelfError as e:
        typer.echo(str(e))
        raise typer.Exit(1) from None
    typer.echo(content)


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from docshelf.mcp.server import run_mcp_server

    run_mcp_server()
