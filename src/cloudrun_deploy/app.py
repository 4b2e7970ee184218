"""Root Typer app — the single build, push, and deploy command."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import typer
from rich.prompt import Prompt

from cloudrun_deploy import __version__
from cloudrun_deploy.client.docker import DockerClient
from cloudrun_deploy.client.errors import error_handler
from cloudrun_deploy.client.gcloud import GCloudClient
from cloudrun_deploy.client.tools import ToolRunner
from cloudrun_deploy.config.constants import (
    APP_NAME,
    DEFAULT_LOG_LEVEL,
    ENV_BUCKET,
    ENV_LOG_LEVEL,
    REQUIRED_TOOLS,
)
from cloudrun_deploy.config.manager import ConfigManager
from cloudrun_deploy.deploy.orchestrator import Deployer
from cloudrun_deploy.output import formatter

app = typer.Typer(
    name=APP_NAME,
    help="Build a Docker image, push it to the registry, and deploy it to Cloud Run.",
    add_completion=False,
    rich_markup_mode="rich",
)

logger = logging.getLogger(__name__)


def _get_manager() -> ConfigManager:
    return ConfigManager()


def _make_runner() -> ToolRunner:
    return ToolRunner()


def _prompt_bucket(suggestion: str) -> str | None:
    try:
        return Prompt.ask(
            f"Enter your Cloud Storage bucket name (e.g., {suggestion})",
            console=formatter.console,
            default="",
            show_default=False,
        )
    except EOFError:
        return None


def _ask_bucket(suggestion: str) -> str | None:
    formatter.warn(f"{ENV_BUCKET} not set")
    return _prompt_bucket(suggestion)


def _confirm() -> bool:
    """Ask to proceed. Only a reply starting with y or Y counts as yes."""
    try:
        reply = Prompt.ask(
            "[yellow]Proceed with build and deployment? \\[y/N][/]",
            console=formatter.console,
            default="",
            show_default=False,
        )
    except EOFError:
        formatter.plain()
        return False
    return reply.strip()[:1] in ("y", "Y")


def version_callback(value: bool) -> None:
    if value:
        print(f"{APP_NAME} {__version__}")
        raise typer.Exit()


@app.command()
@error_handler
def deploy(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."),
    ] = None,
) -> None:
    """Build, push, and deploy the service in the current directory.

    All settings come from environment variables (or a .env file).
    """
    mgr = _get_manager()
    log_level = mgr.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL
    formatter.setup_logging(log_level)
    loaded = mgr.load_env_file()
    if loaded:
        dotenv_level = mgr.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL
        if dotenv_level != log_level:
            formatter.setup_logging(dotenv_level)
        formatter.info(f"Loaded environment variables from {mgr.env_file}")
        logger.debug("Loaded %d variables from %s", len(loaded), mgr.env_file)

    runner = _make_runner()
    runner.require(*REQUIRED_TOOLS)
    gcloud = GCloudClient(runner)
    docker = DockerClient(runner)

    config = mgr.resolve(
        gcloud.get_project,
        _ask_bucket,
        on_project=lambda project: formatter.info(f"Using GCP Project: {project}"),
    )
    formatter.output_summary(config.summary(), title="Deployment Configuration:")

    if not _confirm():
        formatter.warn("Deployment cancelled")
        return

    Deployer(config, gcloud, docker).run()


def main() -> None:
    app()
