"""Repository creation and quarantine commands."""

import click

from ..cli_utils import standard_command, get_store


@click.command("create")
@click.argument("group")
@click.argument("name")
@click.pass_context
@standard_command
def create_handler(ctx, group, name):
    """Create an empty bare repository NAME in GROUP."""
    repo = get_store(ctx).create_repository(group, name)
    click.echo(f"Created {repo.full_name}, clone with: git clone {repo.clone_url}", err=True)
    return repo


@click.command("delete")
@click.argument("group")
@click.argument("name")
@click.confirmation_option(prompt="Move the repository to quarantine?")
@click.pass_context
@standard_command
def delete_handler(ctx, group, name):
    """Quarantine repository NAME in GROUP.

    The repository is renamed and made inaccessible, not erased.
    """
    get_store(ctx).delete_repository(group, name)
    return {"group": group, "name": name, "status": "quarantined"}
