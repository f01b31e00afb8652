"""Editorial summary tree CLI."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from summarytree.config import settings
from summarytree.exceptions import SummaryTreeError
from summarytree.loader import (
    ImportedSummary,
    ScraperResult,
    build_editorial_summary,
    import_directory,
    load_scraper_result,
    require_wikipedia_data,
    wikipedia_slug,
)
from summarytree.models import ContentNode, Document
from summarytree.reconstruct import TreeValidator

app = typer.Typer(
    name="summarytree",
    help="Rebuild editorial summary trees from scraper output",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool) -> None:
    """Configure logging from settings, or DEBUG when verbose."""
    level = logging.DEBUG if verbose else settings.log_level
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    setup_logging(verbose)


def _node_label(node: ContentNode) -> str:
    if not node.is_inline:
        return f"[bold]{node.type}[/bold]"
    label = f"{node.type}: {escape(node.text or '')}"
    if node.source_url:
        label += f" [dim]({escape(node.source_title or node.source_url)})[/dim]"
    return label


def _render_tree(title: str, document: Document) -> Tree:
    tree = Tree(f"[bold blue]{title}[/bold blue] by {document.author}")

    def add(branch: Tree, nodes: list[ContentNode]) -> None:
        for node in nodes:
            add(branch.add(_node_label(node)), node.children)

    add(tree, document.nodes)
    return tree


def _load_document(path: Path) -> tuple[str, ScraperResult, Document]:
    try:
        result = load_scraper_result(path)
        slug = wikipedia_slug(require_wikipedia_data(result).url)
        document = build_editorial_summary(result)
    except (FileNotFoundError, SummaryTreeError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    if document is None:
        console.print(f"[yellow]{slug} has no editorial summary[/yellow]")
        raise typer.Exit(code=1)
    return slug, result, document


@app.command()
def build(
    path: Path = typer.Argument(..., help="Scraper result JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the tree as JSON"),
) -> None:
    """Reconstruct and print the editorial summary of one scraper result."""
    slug, _, document = _load_document(path)
    if as_json:
        typer.echo(document.model_dump_json(indent=2))
        return
    console.print(_render_tree(slug, document))


@app.command()
def validate(
    path: Path = typer.Argument(..., help="Scraper result JSON file"),
) -> None:
    """Reconstruct one scraper result and check the tree structure."""
    slug, result, document = _load_document(path)
    report = TreeValidator().validate(document, result.content)

    if report.is_valid:
        console.print(f"[green]{slug}: {report.node_count} nodes, valid[/green]")
        return

    console.print(f"[red]{slug}: {len(report.issues)} issue(s)[/red]")
    for issue in report.issues:
        console.print(f"  - {issue}")
    raise typer.Exit(code=1)


async def _save_all(imported: list[ImportedSummary]) -> int:
    from summarytree.storage import EditorialSummaryRepository, get_session, init_db

    await init_db()
    saved = 0
    async with get_session() as session:
        repo = EditorialSummaryRepository(session)
        for item in imported:
            if item.document is not None:
                await repo.save(item.slug, item.document)
                saved += 1
    return saved


@app.command("import")
def import_(
    directory: Optional[Path] = typer.Argument(
        None, help="Directory of scraper results (default from settings)"
    ),
    pattern: Optional[str] = typer.Option(None, help="Glob pattern for result files"),
    concurrency: Optional[int] = typer.Option(
        None, help="Number of files reconstructed in parallel"
    ),
    save: bool = typer.Option(False, "--save", help="Persist summaries to the database"),
) -> None:
    """Reconstruct every scraper result in a directory."""
    try:
        imported = import_directory(
            directory,
            pattern=pattern,
            concurrency=concurrency,
            images_dir=settings.images_dir,
        )
    except (FileNotFoundError, SummaryTreeError) as e:
        console.print(f"[red]Error importing data:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Editorial summaries")
    table.add_column("Slug")
    table.add_column("Author")
    table.add_column("Nodes", justify="right")
    for item in imported:
        if item.document is None:
            table.add_row(item.slug, "-", "0")
        else:
            table.add_row(item.slug, item.document.author, str(item.document.node_count))
    console.print(table)

    if save:
        saved = asyncio.run(_save_all(imported))
        console.print(f"[green]Saved {saved} editorial summaries[/green]")
    else:
        console.print(f"[green]Reconstructed {len(imported)} scraper result(s)[/green]")


if __name__ == "__main__":
    app()
