"""CLI entry point for http-manager."""

import json
import logging
from pathlib import Path

import click

from http_manager.catalog import Catalog, load_catalog
from http_manager.dispatcher import resolve_method
from http_manager.engine import HttpManager
from http_manager.errors import HttpManagerError
from http_manager.models import Configuration, PreparedRequest
from http_manager.settings import Settings
from http_manager.transport import RequestsTransport

MASK = "***"


def _load(catalog_path: Path, settings: Settings) -> Catalog:
    try:
        return load_catalog(catalog_path, teams_enabled=settings.teams_enabled)
    except HttpManagerError as e:
        raise click.ClickException(str(e)) from e


def _masked(request: PreparedRequest, configuration: Configuration) -> dict:
    secret_headers = {h.lower() for h in configuration.provider.credential_config.headers}
    data = request.model_dump()
    data["headers"] = {
        name: MASK if name.lower() in secret_headers else value
        for name, value in request.headers.items()
    }
    return data


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log each execution step.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """HTTP Manager — run declaratively described API calls."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("config_id")
@click.option("--team-id", type=int, default=None, help="Only resolve configurations of this team.")
@click.option("--timeout", type=float, default=None, help="Transport timeout in seconds.")
@click.option("--dry-run", is_flag=True, help="Validate and print the request without sending it.")
@click.pass_obj
def execute(settings: Settings, catalog_path: Path, config_id: str, team_id: int | None, timeout: float | None, dry_run: bool):
    """Execute a configuration from a definitions file."""
    catalog = _load(catalog_path, settings)
    transport = RequestsTransport(timeout=timeout if timeout is not None else settings.timeout)
    manager = HttpManager(repository=catalog, transport=transport)

    try:
        if dry_run:
            configuration = catalog.get(config_id, team_id=team_id)
            request = manager.prepare(configuration)
            resolve_method(request.method)
            click.echo(json.dumps(_masked(request, configuration), indent=2))
            return
        response = manager.execute(config_id, team_id=team_id)
    except HttpManagerError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"HTTP {response.status_code}")
    if response.body:
        click.echo(response.body)


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("config_id", required=False)
@click.option("--team-id", type=int, default=None, help="Only check configurations of this team.")
@click.pass_obj
def validate(settings: Settings, catalog_path: Path, config_id: str | None, team_id: int | None):
    """Validate one or all configurations without sending anything."""
    catalog = _load(catalog_path, settings)
    manager = HttpManager(repository=catalog)

    try:
        configurations = [catalog.get(config_id, team_id=team_id)] if config_id else catalog.configurations(team_id)
    except HttpManagerError as e:
        raise click.ClickException(str(e)) from e

    failures = 0
    for configuration in configurations:
        try:
            manager.validate(configuration)
        except HttpManagerError as e:
            failures += 1
            click.echo(f"FAIL {configuration.id}: {e}")
        else:
            click.echo(f"OK   {configuration.id}")

    if failures:
        raise click.ClickException(f"{failures} of {len(configurations)} configurations failed validation")


@main.command("list")
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--team-id", type=int, default=None, help="Only list configurations of this team.")
@click.pass_obj
def list_configurations(settings: Settings, catalog_path: Path, team_id: int | None):
    """List configurations with their endpoint method and path."""
    catalog = _load(catalog_path, settings)
    for configuration in catalog.configurations(team_id):
        endpoint = configuration.endpoint
        click.echo(f"{configuration.id}\t{endpoint.method} {endpoint.path}\t{configuration.name}")
