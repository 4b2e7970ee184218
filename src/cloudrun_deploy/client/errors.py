"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console
from rich.markup import escape

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class DeployCLIError(Exception):
    """Base exception for cloudrun-deploy."""

    exit_code: int = 1


class MissingToolError(DeployCLIError):
    """A required command-line tool is not on PATH."""


class ConfigurationError(DeployCLIError):
    """Required configuration is missing or invalid."""


class ToolExecutionError(DeployCLIError):
    """An external command exited with a non-zero status."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip()
        super().__init__(f"{message}: {detail}" if detail else message)


class RegistryAuthError(ToolExecutionError):
    """Configuring Docker credentials for the registry failed."""


class BuildError(ToolExecutionError):
    """docker build failed."""


class PushError(ToolExecutionError):
    """docker push failed."""


class DeployError(ToolExecutionError):
    """gcloud run deploy (or the follow-up describe) failed."""


class IdentityTokenError(ToolExecutionError):
    """gcloud could not mint an identity token for the health check."""


class HealthCheckError(DeployCLIError):
    """The deployed service did not answer its health endpoint."""


def error_handler(func: F) -> F:
    """Decorator that catches DeployCLIError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DeployCLIError as exc:
            err_console.print(f"[red]\\[ERROR][/] {escape(str(exc))}", soft_wrap=True)
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[red]\\[ERROR][/] {escape(str(exc))}", soft_wrap=True)
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
