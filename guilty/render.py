"""
Rendering functions for guilty output.

This module handles all pretty-printing and table formatting.
The engine returns domain objects, this module makes them human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List, Optional
from datetime import datetime

from .domain import Repository, RepositoryDetails, TreeEntry

console = Console()


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size}B"
    elif size < 1024 * 1024:
        return f"{size/1024:.1f}KB"
    return f"{size/(1024*1024):.1f}MB"


def format_date(date: Optional[datetime]) -> str:
    if date is None:
        return "-"
    return date.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def render_table(headers: List[str], rows: List[List[str]], title: Optional[str] = None) -> None:
    """
    Render a generic table with the given headers and rows.

    Args:
        headers: List of column headers
        rows: List of rows, where each row is a list of values
        title: Optional table title
    """
    if not rows:
        console.print("[yellow]No data to display.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*[str(val) for val in row])

    console.print(table)


def render_repositories(repos: List[Repository], group: str) -> None:
    if not repos:
        console.print(f"[yellow]No repositories in {group}.[/yellow]")
        return

    table = Table(
        title=f"Repositories in {group}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Repository", style="cyan")
    table.add_column("Type", style="blue")
    table.add_column("Last commit", style="green")
    table.add_column("Author", style="yellow")
    table.add_column("Message")
    table.add_column("Clone URL", style="dim")

    for repo in repos:
        commit = repo.last_commit
        table.add_row(
            repo.name,
            repo.kind.value,
            format_date(commit.date) if commit else "no commits",
            commit.author if commit else "",
            commit.message if commit else "",
            repo.clone_url,
        )

    console.print(table)


def render_entries(entries: List[TreeEntry], title: Optional[str] = None) -> None:
    if not entries:
        console.print("[yellow]Empty directory.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan", title=title, box=box.ROUNDED)
    table.add_column("Name", style="green")
    table.add_column("Size", justify="right", style="dim")
    table.add_column("Last modified", style="blue")

    for entry in entries:
        icon = '📁' if entry.is_dir else '📄'
        table.add_row(
            f"{icon} {entry.name}",
            "" if entry.is_dir else format_size(entry.size),
            format_date(entry.last_modified),
        )

    console.print(table)


def render_details(details: RepositoryDetails) -> None:
    repo = details.repository
    console.print(f"[bold cyan]{repo.full_name}[/bold cyan] ({repo.kind.value})")
    console.print(f"Clone: {repo.clone_url}")
    if repo.last_commit:
        commit = repo.last_commit
        console.print(f"Last commit: {format_date(commit.date)} {commit.author}: {commit.message}")
    else:
        console.print("[yellow]No commits yet.[/yellow]")
    if details.branches:
        console.print(f"Branches: {', '.join(details.branches)}")
    if details.tags:
        console.print(f"Tags: {', '.join(details.tags)}")
    if details.files:
        render_entries(details.files)
