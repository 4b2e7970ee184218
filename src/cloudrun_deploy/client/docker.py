"""docker CLI client — build and push images."""

from __future__ import annotations

from cloudrun_deploy.client.errors import BuildError, PushError
from cloudrun_deploy.client.tools import ToolRunner
from cloudrun_deploy.config.constants import BUILD_PLATFORM, DEFAULT_BUILD_CONTEXT


class DockerClient:
    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    def build(
        self,
        image: str,
        *,
        context: str = DEFAULT_BUILD_CONTEXT,
        dockerfile: str | None = None,
        platform: str = BUILD_PLATFORM,
    ) -> None:
        cmd = ["docker", "build", "--platform", platform, "-t", image]
        if dockerfile:
            cmd.extend(["-f", dockerfile])
        cmd.append(context)
        self.runner.run(cmd, error=BuildError, message="Docker build failed")

    def push(self, image: str) -> None:
        self.runner.run(["docker", "push", image], error=PushError, message="Docker push failed")
