"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from typing import Any, Generator
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def _serializable(item: Any) -> Any:
    return item.to_dict() if hasattr(item, 'to_dict') else item


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Clean JSONL output on stdout
    - Errors as a JSON object with the matching exit code
    - Commands returning None handle their own output

    The wrapped command may return a list, generator, single object or None.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)

            if result is None:
                pass
            elif isinstance(result, (Generator, list, tuple)):
                for item in result:
                    print(json.dumps(_serializable(item), ensure_ascii=False), flush=True)
            else:
                print(json.dumps(_serializable(result), ensure_ascii=False), flush=True)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            click.echo(f"Error: {e}", err=True)
            print(json.dumps(e.to_dict(), ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)
        except OSError as e:
            click.echo(f"Command failed: {e}", err=True)
            error_obj = {
                "error": str(e),
                "type": type(e).__name__
            }
            print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def table_option(func):
    """Add a --table flag for human-readable output."""
    return click.option(
        '--table', 'as_table', is_flag=True,
        help='Render a table instead of JSONL'
    )(func)


def get_store(ctx: click.Context):
    """Build the GitStore for this invocation from the group's options."""
    from .api import GitStore
    from .config import StoreConfig

    obj = ctx.find_root().obj or {}
    if 'store' not in obj:
        store_config = StoreConfig.from_config(obj.get('config', {}))
        obj['store'] = GitStore(store_config=store_config, root=obj.get('root'))
    return obj['store']
