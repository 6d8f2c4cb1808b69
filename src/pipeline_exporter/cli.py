"""CLI entry point for the GitLab CI pipelines exporter."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import uvicorn

from pipeline_exporter.api import HealthChecker, create_app
from pipeline_exporter.config import ConfigError, ExporterConfig, load_config
from pipeline_exporter.fleet import FleetCoordinator
from pipeline_exporter.gitlab import GitlabClient
from pipeline_exporter.logging import setup_logging
from pipeline_exporter.metrics import MetricStore
from pipeline_exporter.resolver import ProjectResolver, ResolverError

logger = logging.getLogger("pipeline_exporter.cli")

DEFAULT_CONFIG_PATH = "/etc/config.yml"
DEFAULT_LISTEN_ADDRESS = ":8080"


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split "host:port" into its parts. An empty host means all interfaces.

    Raises:
        click.BadParameter: If the port is missing or not a number.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise click.BadParameter(f"expected [host]:port, got '{address}'")
    return (host.strip("[]") or "0.0.0.0", int(port))


def _load(config_path: Path) -> ExporterConfig:
    config = load_config(config_path)
    config.validate_targets()
    return config


config_option = click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Config file path",
)
verbose_option = click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")


@click.group()
@click.version_option(package_name="gitlab-ci-pipelines-exporter")
def main() -> None:
    """Export GitLab CI pipeline status as Prometheus metrics."""
    pass


@main.command()
@config_option
@click.option(
    "--listen-address",
    default=DEFAULT_LISTEN_ADDRESS,
    show_default=True,
    help="Listening address",
)
@verbose_option
def run(config_path: Path, listen_address: str, verbose: bool) -> None:
    """Poll the configured projects and serve /metrics."""
    setup_logging(level="DEBUG" if verbose else None)
    host, port = parse_listen_address(listen_address)

    try:
        config = _load(config_path)
    except ConfigError as e:
        logger.critical("%s", e)
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    logger.info("Starting exporter")
    logger.info("Polling %s every %ss", config.gitlab.url, config.polling_interval_seconds)
    logger.info(
        "%d explicit ref(s) and %d wildcard(s) configured",
        config.total_refs(),
        len(config.wildcards),
    )

    client = GitlabClient(url=config.gitlab.url, token=config.gitlab.token)
    store = MetricStore()

    try:
        projects = ProjectResolver(client).merge(config.projects, config.wildcards)
    except ResolverError as e:
        logger.critical("%s", e)
        click.echo(f"Error: {e}", err=True)
        client.close()
        sys.exit(1)

    fleet = FleetCoordinator(
        client=client,
        store=store,
        interval=config.polling_interval_seconds,
    )
    fleet.start(projects)

    health_checker = HealthChecker(
        gitlab_url=config.gitlab.url,
        tracked_refs=len(fleet.threads),
    )
    app = create_app(store, health_checker)

    try:
        uvicorn.run(app, host=host, port=port, log_level="debug" if verbose else "info")
    finally:
        fleet.stop()
        client.close()


@main.command()
@config_option
def validate(config_path: Path) -> None:
    """Check the config file and list the projects and refs that would be polled."""
    try:
        config = _load(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    client = GitlabClient(url=config.gitlab.url, token=config.gitlab.token)
    try:
        projects = ProjectResolver(client).merge(config.projects, config.wildcards)
    except ResolverError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        client.close()

    for project in projects:
        click.echo(f"{project.name}: {', '.join(project.refs) or '(no refs)'}")
    total_refs = sum(len(project.refs) for project in projects)
    click.echo(f"{len(projects)} project(s), {total_refs} ref(s)")


if __name__ == "__main__":
    main()
