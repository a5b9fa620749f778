#!/usr/bin/env python3

import click
from pathlib import Path

from guilty.config import load_config, configure_logging
from guilty.exit_codes import ConfigError

from guilty.commands.browse import (
    groups_handler,
    repos_handler,
    show_handler,
    ls_handler,
    cat_handler,
)
from guilty.commands.lifecycle import create_handler, delete_handler
from guilty.commands.serve import serve_handler
from guilty.commands.config import config_cmd


@click.group()
@click.version_option(package_name="guilty")
@click.option('--root', type=click.Path(file_okay=False, path_type=Path),
              help='Repository store root (overrides store.root)')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file (default: ~/.guilty/config.json)')
@click.option('-v', '--verbose', is_flag=True, help='Log git commands and their failures')
@click.pass_context
def cli(ctx, root, config_path, verbose):
    """guilty - Browse a store of git repositories.

    Lists groups and repositories, browses trees and files at HEAD,
    and creates or quarantines repositories.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if verbose:
        config['logging']['level'] = 'DEBUG'
    configure_logging(config)

    ctx.ensure_object(dict)
    ctx.obj.update(config=config, root=root, config_path=config_path)


# Browsing
cli.add_command(groups_handler)
cli.add_command(repos_handler)
cli.add_command(show_handler)
cli.add_command(ls_handler)
cli.add_command(cat_handler)

# Lifecycle
cli.add_command(create_handler)
cli.add_command(delete_handler)

# Server and configuration
cli.add_command(serve_handler)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
