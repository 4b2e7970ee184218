"""Shared test fixtures."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from cloudrun_deploy.config import constants
from cloudrun_deploy.config.models import DeployConfig

SERVICE_URL = "https://ext-image-processing-api-handler-abc123-uc.a.run.app"

_DEPLOY_ENV_VARS = [
    value for name, value in vars(constants).items() if name.startswith("ENV_") and isinstance(value, str)
]


class FakeTools:
    """Stands in for ``shutil.which`` and ``subprocess.run``.

    Commands are matched by argument prefix. Every call is recorded.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.missing: set[str] = set()
        self.failures: dict[tuple[str, ...], int] = {}
        self.stdout: dict[tuple[str, ...], str] = {
            ("gcloud", "config", "get-value", "project"): "my-project\n",
            ("gcloud", "run", "services", "describe"): f"{SERVICE_URL}\n",
            ("gcloud", "auth", "print-identity-token"): "id-token-123\n",
        }

    def fail(self, *prefix: str, code: int = 1) -> None:
        self.failures[prefix] = code

    def which(self, tool: str) -> str | None:
        return None if tool in self.missing else f"/usr/bin/{tool}"

    def run(self, cmd: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        cmd = list(cmd)
        self.calls.append(cmd)
        code = next((c for p, c in self.failures.items() if _matches(cmd, p)), 0)
        out = next((o for p, o in self.stdout.items() if _matches(cmd, p)), "")
        captured = kwargs.get("capture_output", False)
        return subprocess.CompletedProcess(
            cmd,
            code,
            stdout=out if captured else None,
            stderr=("boom" if code else "") if captured else None,
        )

    def ran(self, *prefix: str) -> bool:
        return any(_matches(cmd, prefix) for cmd in self.calls)

    def index(self, *prefix: str) -> int:
        return next(i for i, cmd in enumerate(self.calls) if _matches(cmd, prefix))

    def find(self, *prefix: str) -> list[str]:
        return self.calls[self.index(*prefix)]


def _matches(cmd: list[str], prefix: tuple[str, ...]) -> bool:
    return tuple(cmd[: len(prefix)]) == prefix


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run every test in an empty directory with no deployment variables set."""
    monkeypatch.chdir(tmp_path)
    with patch.dict(os.environ):
        for name in _DEPLOY_ENV_VARS:
            os.environ.pop(name, None)
        yield tmp_path


@pytest.fixture
def tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    fake = FakeTools()
    monkeypatch.setattr("cloudrun_deploy.client.tools.shutil.which", fake.which)
    monkeypatch.setattr("cloudrun_deploy.client.tools.subprocess.run", fake.run)
    return fake


@pytest.fixture
def sample_config() -> DeployConfig:
    """Return a config with defaults for everything but project and bucket."""
    return DeployConfig(project="my-project", bucket="my-bucket")


@pytest.fixture
def service_url() -> str:
    return SERVICE_URL
