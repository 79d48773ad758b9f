"""Typer CLI root application with serve command."""

import typer

from voter_api.core.config import get_settings
from voter_api.core.logging import setup_logging

app = typer.Typer(name="voter-api", help="Voter records and poll history service")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(1080, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "voter_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )
