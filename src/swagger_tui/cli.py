"""CLI entry point for swagger-tui."""

import logging
from pathlib import Path

import click
import requests

from swagger_tui.config import Config, default_config_path, validate_url
from swagger_tui.errors import SwaggerTuiError
from swagger_tui.parser.base import ApiEndpoint
from swagger_tui.parser.swagger import parse_openapi_file, parse_openapi_text

DEFAULT_LOG_FILE = Path("/tmp/swagger-tui.log")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Path, debug: bool) -> None:
    """Send logs to a file; the terminal belongs to curses while the app runs."""
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("swagger_tui")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.propagate = False


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except SwaggerTuiError as e:
        raise click.ClickException(str(e)) from e


def _check_url(url: str | None, option: str) -> None:
    if url is None:
        return
    error = validate_url(url)
    if error is not None:
        raise click.BadParameter(error, param_hint=option)


def _filter_endpoints(endpoints: list[ApiEndpoint], tag: str | None) -> list[ApiEndpoint]:
    """Keep endpoints carrying ``tag`` (all when None), sorted by path."""
    if tag is not None:
        endpoints = [ep for ep in endpoints if tag in ep.tags]
    return sorted(endpoints, key=lambda ep: ep.path)


@click.group()
def main():
    """swagger-tui: browse and call the endpoints of an OpenAPI/Swagger API from the terminal."""
    pass


@main.command()
@click.option("--url", default=None, help="Swagger/OpenAPI document URL (overrides the config file).")
@click.option("--base-url", default=None, help="Base URL requests are sent to (overrides the config file).")
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file path.")
@click.option("--log-file", default=DEFAULT_LOG_FILE, type=click.Path(path_type=Path), show_default=True, help="Debug log file.")
@click.option("--debug", is_flag=True, help="Log at DEBUG level.")
def run(url: str | None, base_url: str | None, config_path: Path | None, log_file: Path, debug: bool):
    """Start the interactive client."""
    _check_url(url, "--url")
    _check_url(base_url, "--base-url")
    config = _load_config(config_path)
    configure_logging(log_file, debug)

    from swagger_tui.app import App
    from swagger_tui.state.app_state import AppState
    from swagger_tui.state.store import StateStore
    from swagger_tui.ui.draw import CursesRenderer
    from swagger_tui.ui.terminal import CursesInput, run_curses

    state = AppState.initial(
        swagger_url=url or config.server.swagger_url or "",
        base_url=base_url or config.server.base_url or "",
    )
    logging.getLogger(__name__).info("Starting with swagger URL %r", state.data.swagger_url)

    def _main(screen):
        screen.keypad(True)
        app = App(StateStore(state), config, CursesInput(screen), CursesRenderer(screen))
        app.run()

    run_curses(_main)


@main.command()
@click.argument("doc_path", required=False, type=click.Path(exists=True, path_type=Path))
@click.option("--url", default=None, help="Fetch the document from this URL instead of a file.")
@click.option("--tag", default=None, help="Only list endpoints with this tag.")
def endpoints(doc_path: Path | None, url: str | None, tag: str | None):
    """List the endpoints of an API description."""
    if (doc_path is None) == (url is None):
        raise click.UsageError("Pass exactly one of DOC_PATH or --url.")
    try:
        if doc_path is not None:
            parsed = parse_openapi_file(doc_path)
        else:
            _check_url(url, "--url")
            try:
                response = requests.get(url, timeout=30)
                response.raise_for_status()
            except requests.RequestException as e:
                raise click.ClickException(f"Network error: {e}") from e
            parsed = parse_openapi_text(response.text)
    except SwaggerTuiError as e:
        raise click.ClickException(str(e)) from e

    selected = _filter_endpoints(parsed, tag)
    for ep in selected:
        summary = f"  {ep.summary}" if ep.summary else ""
        click.echo(f"{ep.method:7} {ep.path}{summary}")
    click.echo(f"{len(selected)} endpoints.")


@main.group("config")
def config_group():
    """Show or change the stored URLs."""
    pass


@config_group.command("show")
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file path.")
def config_show(config_path: Path | None):
    """Print the stored configuration."""
    config = _load_config(config_path)
    click.echo(f"config:      {config.path or default_config_path()}")
    click.echo(f"swagger_url: {config.server.swagger_url or '(not set)'}")
    click.echo(f"base_url:    {config.server.base_url or '(not set)'}")


@config_group.command("set-url")
@click.argument("swagger_url")
@click.option("--base-url", default=None, help="Base URL requests are sent to.")
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file path.")
def config_set_url(swagger_url: str, base_url: str | None, config_path: Path | None):
    """Store the swagger URL (and optionally the base URL)."""
    _check_url(swagger_url, "SWAGGER_URL")
    _check_url(base_url, "--base-url")
    config = _load_config(config_path)
    try:
        path = config.set_urls(swagger_url, base_url)
    except SwaggerTuiError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Saved to {path}")
