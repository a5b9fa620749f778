"""Run the JSON API server."""

import click

from ..cli_utils import get_store


@click.command("serve")
@click.option("--host", default=None, help="Interface to bind (default: server.host)")
@click.option("--port", type=int, default=None, help="Port to listen on (default: server.port)")
@click.pass_context
def serve_handler(ctx, host, port):
    """Serve the repository store over HTTP."""
    import uvicorn
    from ..server import create_app

    config = ctx.find_root().obj.get('config', {})
    server = config.get('server', {})
    app = create_app(get_store(ctx), cors_origins=server.get('cors_origins'))

    host = host or server.get('host', '0.0.0.0')
    port = port or server.get('port', 8000)
    click.echo(f"Serving {get_store(ctx).config.root} on http://{host}:{port}", err=True)
    uvicorn.run(app, host=host, port=port, log_level=config.get('logging', {}).get('level', 'info').lower())
