"""Configuration commands: inspect the merged config or write a starter file."""

import json

import click
import yaml

from guilty.config import get_config_path, get_default_config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("generate")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def generate_config(ctx, force):
    """Write the default configuration as YAML to ~/.guilty/config.yaml."""
    config_path = ctx.find_root().obj.get('config_path') or get_config_path().with_name('config.yaml')
    if config_path.exists() and not force:
        raise click.ClickException(f"{config_path} already exists (use --force to overwrite)")

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        if config_path.suffix == '.json':
            json.dump(get_default_config(), f, indent=2)
        else:
            yaml.safe_dump(get_default_config(), f, sort_keys=False)
    click.echo(f"Configuration written to {config_path}", err=True)
    print(json.dumps({"config_path": str(config_path)}))


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@click.pass_context
def show_config(ctx, pretty, path):
    """Show the configuration in effect, after file and GUILTY_* overrides.

    Use --path to see which config file is being used.
    """
    obj = ctx.find_root().obj
    if path:
        print(json.dumps({"config_path": str(obj.get('config_path') or get_config_path())}))
        return

    print(json.dumps(obj['config'], indent=2 if pretty else None, ensure_ascii=False))
