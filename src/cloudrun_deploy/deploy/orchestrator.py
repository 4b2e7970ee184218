"""Deployment orchestrator — registry auth, build, push, deploy, report.

The run is a straight line. Each stage raises on failure and nothing after
it runs; there is no rollback and no retry.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from cloudrun_deploy.client.docker import DockerClient
from cloudrun_deploy.client.gcloud import GCloudClient
from cloudrun_deploy.client.health import check_health, health_url
from cloudrun_deploy.config.models import DeployConfig
from cloudrun_deploy.output import formatter

logger = logging.getLogger(__name__)


class DeploymentResult(BaseModel):
    """Outcome of a successful deployment."""

    service_url: str
    health_url: str
    image: str
    healthy: bool | None = None


class Deployer:
    """Runs one build → push → deploy sequence for a resolved config."""

    def __init__(
        self,
        config: DeployConfig,
        gcloud: GCloudClient,
        docker: DockerClient,
    ) -> None:
        self.config = config
        self.gcloud = gcloud
        self.docker = docker

    def authenticate(self) -> None:
        formatter.info("Configuring Docker authentication for GCR...")
        self.gcloud.configure_docker(self.config.registry)

    def build(self) -> None:
        formatter.info(f"Building Docker image for AMD64 platform: {self.config.full_image}")
        self.docker.build(
            self.config.full_image,
            context=self.config.build_context,
            dockerfile=self.config.dockerfile,
            platform=self.config.build_platform,
        )

    def push(self) -> None:
        formatter.info("Pushing image to Google Container Registry...")
        self.docker.push(self.config.full_image)

    def deploy(self) -> str:
        formatter.info("Deploying to Cloud Run...")
        self.gcloud.deploy(self.config)
        formatter.info("Deployment successful!")
        return self.gcloud.describe_url(self.config.service_name, self.config.region)

    def run(self) -> DeploymentResult:
        self.authenticate()
        self.build()
        self.push()
        url = self.deploy()
        result = DeploymentResult(
            service_url=url,
            health_url=health_url(url),
            image=self.config.full_image,
        )
        self.report(result)
        if self.config.verify_health:
            token = None if self.config.allow_unauthenticated else self.gcloud.identity_token()
            formatter.info(f"Checking {result.health_url}...")
            status = check_health(url, token=token)
            logger.debug("Health endpoint answered %d", status)
            result = result.model_copy(update={"healthy": True})
            formatter.info("Service is healthy.")
        return result

    @staticmethod
    def report(result: DeploymentResult) -> None:
        formatter.info(f"Service URL: {result.service_url}")
        formatter.info(f"Health check: {result.health_url}")
        formatter.plain()
        formatter.info("Test the API with:")
        formatter.plain(f"  curl {result.health_url}")
