"""CLI implementation for gytmdl-web."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Annotated

import typer
import uvicorn

from gytmdl_web import __version__
from gytmdl_web.config import Settings
from gytmdl_web.core import ConfigError, format_error
from gytmdl_web.download import run_job
from gytmdl_web.tasks import (
    EventKind,
    Result,
    TaskExecutor,
    TaskObserver,
    TaskRegistry,
)
from gytmdl_web.ui import (
    create_task_progress,
    print_error,
    print_info,
    print_success,
    print_warning,
    setup_logging,
)
from gytmdl_web.web import create_app

# Create Typer app
app = typer.Typer(
    name="gytmdl-web",
    help="Download YouTube Music links with gytmdl and stream per-link results.",
    add_completion=False,
    no_args_is_help=True,
)


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment, exiting with code 2 on bad values."""
    try:
        return Settings.from_env(**overrides)
    except ConfigError as e:
        print_error(format_error(e))
        raise typer.Exit(code=2) from e


def run_task(links: list[str], settings: Settings) -> list[Result]:
    """Run one task in-process and collect its results.

    The observer attaches before the worker starts, so results are
    released as soon as they are produced.

    Args:
        links: Links to download, in order.
        settings: Settings providing the destination and gytmdl command.

    Returns:
        One Result per link, in link order.
    """
    registry = TaskRegistry()
    executor = TaskExecutor(
        registry=registry,
        output_dir=settings.output_dir,
        runner=functools.partial(run_job, command=settings.downloader),
        attach_grace=settings.attach_grace,
    )
    task_id = registry.create(links)
    observer = TaskObserver.attach(registry, task_id, settings.poll_interval)
    executor.start(observer.task)

    results: list[Result] = []
    with create_task_progress() as progress:
        bar = progress.add_task("Downloading...", total=len(links))
        for event in observer.events():
            if event.kind is EventKind.ERROR:
                print_error(event.message)
                break
            if event.result is None:
                continue
            results.append(event.result)
            if event.result.succeeded:
                print_success(f"Downloaded: {event.result.link}")
            else:
                print_error(f"Failed: {event.result.link}: {event.result.error}")
            progress.advance(bar)

    return results


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print(f"gytmdl-web version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Download YouTube Music links with gytmdl."""


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Interface to bind (env: HOST)."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to listen on (env: PORT).", min=1, max=65535),
    ] = None,
    password: Annotated[
        str | None,
        typer.Option(
            "--password",
            help="Shared secret expected in the Authorization header (env: PASSWORD).",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Download destination (env: OUTPUT_DIR)."),
    ] = None,
    ui_dir: Annotated[
        Path | None,
        typer.Option("--ui-dir", help="Static web UI to serve at / (env: UI_DIR)."),
    ] = None,
    downloader: Annotated[
        str | None,
        typer.Option("--downloader", help="gytmdl executable (env: GYTMDL_COMMAND)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log at DEBUG level."),
    ] = False,
) -> None:
    """Run the HTTP server."""
    settings = load_settings(
        host=host,
        port=port,
        password=password,
        output_dir=output_dir,
        ui_dir=ui_dir,
        downloader=downloader,
    )
    setup_logging("DEBUG" if verbose else settings.log_level)

    if not settings.auth_enabled:
        print_warning("No password set, anyone can submit downloads")

    print_info(f"Server listening on {settings.host}:{settings.port}")
    # uvicorn exits the process if the port cannot be bound
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


@app.command()
def fetch(
    links: Annotated[
        list[str],
        typer.Argument(help="One or more YouTube Music links.", show_default=False),
    ],
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Download destination (env: OUTPUT_DIR)."),
    ] = None,
    downloader: Annotated[
        str | None,
        typer.Option("--downloader", help="gytmdl executable (env: GYTMDL_COMMAND)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show task log output."),
    ] = False,
) -> None:
    """Download links locally, one at a time, without starting a server."""
    settings = load_settings(output_dir=output_dir, downloader=downloader)
    setup_logging("DEBUG" if verbose else "WARNING")

    results = run_task(links, settings)
    succeeded = sum(1 for r in results if r.succeeded)
    failed = len(links) - succeeded

    print_info(f"\nCompleted: {succeeded} succeeded, {failed} failed")
    raise typer.Exit(code=0 if failed == 0 else 1)


if __name__ == "__main__":
    app()
