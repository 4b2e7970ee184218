"""Deployment orchestration."""

from cloudrun_deploy.deploy.orchestrator import Deployer, DeploymentResult

__all__ = ["Deployer", "DeploymentResult"]
