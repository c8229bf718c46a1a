"""CLI interface for discussion thread inspection"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import click
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .naming import compute_name
from .thread_item_set import ThreadItemSet
from .thread_items import CommentItem, ThreadItemRecord
from .thread_view_formatter import ThreadViewFormatter, ViewContext

console = Console()

DEFAULT_LOG_LEVEL = "WARNING"


def load_config() -> Dict[str, Any]:
    """Load settings from config file

    Looks for .discussion-threads.yaml in current directory or home directory.
    Returns an empty dict if no config found.
    """
    config_paths = [
        Path(".discussion-threads.yaml"),
        Path.home() / ".discussion-threads.yaml",
    ]

    for config_path in config_paths:
        if config_path.exists():
            try:
                with open(config_path) as f:
                    config = yaml.safe_load(f)
                    if isinstance(config, dict):
                        return config
            except (OSError, yaml.YAMLError) as e:
                console.print(f"[yellow]Warning: Failed to load {config_path}: {e}[/yellow]")
                continue

    return {}


def configure_logging(verbose: bool) -> None:
    """Set the log level from --verbose, the environment, or the config file"""
    load_dotenv()
    if verbose:
        level = "DEBUG"
    else:
        level = (
            os.getenv("DISCUSSION_THREADS_LOG_LEVEL")
            or load_config().get("log_level")
            or DEFAULT_LOG_LEVEL
        )

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_thread_item_set(path: str) -> ThreadItemSet:
    """Build a ThreadItemSet from a JSON file of annotation records

    The file holds a list whose elements are record objects or raw
    data-mw-comment JSON strings.
    """
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    if not isinstance(payload, list):
        raise ValueError("Expected a JSON list of thread item records")

    records: List[ThreadItemRecord] = []
    for entry in payload:
        if isinstance(entry, str):
            records.append(ThreadItemRecord.from_json(entry))
        else:
            records.append(ThreadItemRecord.model_validate(entry))

    return ThreadItemSet.from_annotated_records(records, compute_name)


def _load_or_exit(path: str) -> ThreadItemSet:
    try:
        return load_thread_item_set(path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Failed to load {path}: {e}[/red]")
        sys.exit(1)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """Discussion Threads - Rebuild and query discussion page thread structure"""
    configure_logging(verbose)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--title', '-t', default=None, help='Page title for the header (default: file name)')
@click.option('--no-names', is_flag=True, help='Show ids only')
def tree(file, title, no_names):
    """Print every thread as an indented outline

    Examples:
        \b
        # Show threads from an annotation dump
        discussion-threads tree page.json --title "Talk:Example"
    """
    item_set = _load_or_exit(file)
    formatter = ThreadViewFormatter(show_names=not no_names)
    context = ViewContext(page_title=title or Path(file).stem, source=file)
    console.print(formatter.format(item_set, context), markup=False, highlight=False)


@cli.command(name='find-name')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.argument('name')
def find_name(file, name):
    """List the items sharing a computed name"""
    item_set = _load_or_exit(file)
    matches = item_set.find_comments_by_name(name)

    if not matches:
        console.print(f"[yellow]No thread items named {name}[/yellow]")
        return

    table = Table(title=f"Items named {name}", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Level", justify="right")
    table.add_column("Parent")

    for item in matches:
        parent = item.parent
        table.add_row(item.id, item.type, str(item.level), parent.id if parent else "-")

    console.print(table)


@cli.command(name='find-id')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.argument('item_id')
def find_id(file, item_id):
    """Show one item by id"""
    item_set = _load_or_exit(file)
    item = item_set.find_comment_by_id(item_id)

    if item is None:
        console.print(f"[red]No thread item with id {item_id}[/red]")
        sys.exit(1)

    heading = item.get_heading()
    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", overflow="fold")
    table.add_row("ID", item.id)
    table.add_row("Type", item.type)
    table.add_row("Name", item.name or "")
    table.add_row("Level", str(item.level))
    table.add_row("Parent", item.parent.id if item.parent else "-")
    table.add_row("Thread", heading.id if heading else "-")
    table.add_row("Replies", ", ".join(reply.id for reply in item.replies) or "-")
    if isinstance(item, CommentItem):
        table.add_row("Author", item.author or "-")
        table.add_row("Timestamp", item.timestamp.isoformat() if item.timestamp else "-")

    console.print(table)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the full item summary as JSON')
def stats(file, as_json):
    """Show item counts and unresolved replies"""
    item_set = _load_or_exit(file)

    if as_json:
        click.echo(json.dumps(item_set.to_dict(), indent=2))
        return

    table = Table(title="Thread Summary", show_header=True, header_style="bold cyan")
    table.add_column("Thread", style="cyan")
    table.add_column("Items", justify="right")
    table.add_column("Authors", overflow="fold")

    for heading in item_set.get_threads():
        table.add_row(
            heading.name or heading.id,
            str(len(heading.get_thread_items_below()) + 1),
            ", ".join(heading.get_authors_below()) or "-",
        )

    console.print(table)
    console.print(
        f"\n[bold]Total:[/bold] {len(item_set)} items, "
        f"{len(item_set.get_threads())} threads, "
        f"{len(item_set.get_comment_items())} comments"
    )

    unresolved = item_set.get_unresolved_replies()
    if unresolved:
        console.print(f"[yellow]⚠ {len(unresolved)} unresolved reply id(s):[/yellow]")
        for ref in unresolved:
            console.print(f"  - {ref.item_id} → {ref.reply_id}", markup=False)


if __name__ == "__main__":
    cli()
