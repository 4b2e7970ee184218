"""Runs external command-line tools (gcloud, docker) via subprocess."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from cloudrun_deploy.client.errors import MissingToolError, ToolExecutionError
from cloudrun_deploy.config.constants import REQUIRED_TOOLS

logger = logging.getLogger(__name__)


class ToolRunner:
    """Synchronous, fail-fast wrapper around ``subprocess.run``."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd

    @staticmethod
    def which(tool: str) -> str | None:
        return shutil.which(tool)

    def require(self, *tools: str) -> None:
        """Raise MissingToolError for the first tool not found on PATH."""
        for tool in tools or tuple(REQUIRED_TOOLS):
            if self.which(tool) is None:
                hint = REQUIRED_TOOLS.get(tool, f"{tool} is not installed or not on PATH.")
                raise MissingToolError(hint)
            logger.debug("Found %s", tool)

    def run(
        self,
        args: Sequence[str],
        *,
        capture: bool = False,
        check: bool = True,
        error: type[ToolExecutionError] = ToolExecutionError,
        message: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run one command to completion.

        Output streams to the terminal unless *capture* is set. With *check*,
        a non-zero exit raises *error* carrying *message*.
        """
        cmd = list(args)
        logger.debug("Running: %s", shlex.join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=capture,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise MissingToolError(f"{cmd[0]} is not installed or not on PATH.") from exc
        logger.debug("%s exited with %d", cmd[0], result.returncode)
        if check and result.returncode != 0:
            raise error(
                message or f"Command failed: {shlex.join(cmd)}",
                returncode=result.returncode,
                stderr=(result.stderr or "") if capture else "",
            )
        return result
