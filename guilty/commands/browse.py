"""
Read-only browsing commands for guilty.

Repository arguments use the same form as the JSON API:
``<group>/<name>[/<path>]``, each part percent-encoded when it contains
``/`` or ``%``.
"""

import sys

import click

from ..cli_utils import standard_command, table_option, get_store
from ..domain.tree import BINARY_MESSAGE
from ..render import render_table, render_repositories, render_entries, render_details
from ..services import split_encoded_path


@click.command("groups")
@table_option
@click.pass_context
@standard_command
def groups_handler(ctx, as_table):
    """List repository groups."""
    groups = get_store(ctx).list_groups()
    if as_table:
        render_table(["Group"], [[g] for g in groups], title="Groups")
        return None
    return [{"group": g} for g in groups]


@click.command("repos")
@click.argument("group", required=False)
@table_option
@click.pass_context
@standard_command
def repos_handler(ctx, group, as_table):
    """List repositories of GROUP, most recently committed first.

    Uses the default group when GROUP is omitted.
    """
    store = get_store(ctx)
    group = group or store.config.default_group
    repos = store.list_repositories(group)
    if as_table:
        render_repositories(repos, group)
        return None
    return repos


@click.command("show")
@click.argument("repository")
@table_option
@click.pass_context
@standard_command
def show_handler(ctx, repository, as_table):
    """Show a repository with its root listing, branches and tags.

    \b
    Examples:
        guilty show git/proj
    """
    parsed = split_encoded_path(repository)
    details = get_store(ctx).get_repository_details(parsed.group, parsed.name)
    if as_table:
        render_details(details)
        return None
    return details


@click.command("ls")
@click.argument("path")
@table_option
@click.pass_context
@standard_command
def ls_handler(ctx, path, as_table):
    """List a directory at HEAD.

    \b
    Examples:
        guilty ls git/proj
        guilty ls git/proj/src/lib
    """
    parsed = split_encoded_path(path)
    entries = get_store(ctx).list_directory(parsed.group, parsed.name, parsed.path)
    if as_table:
        render_entries(entries, title=f"{parsed.group}/{parsed.name}/{parsed.path}")
        return None
    return entries


@click.command("cat")
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Print the JSON result instead of raw content")
@click.pass_context
@standard_command
def cat_handler(ctx, path, as_json):
    """Print a file at HEAD.

    Binary files are reported instead of printed.
    """
    parsed = split_encoded_path(path, require_path=True)
    blob = get_store(ctx).read_file(parsed.group, parsed.name, parsed.path)
    if as_json:
        return blob
    if blob.is_binary:
        click.echo(BINARY_MESSAGE, err=True)
        return None
    sys.stdout.write(blob.content)
    sys.stdout.flush()
    return None
