"""gcloud CLI client — project lookup, registry auth, Cloud Run deploy."""

from __future__ import annotations

from cloudrun_deploy.client.errors import (
    ConfigurationError,
    DeployError,
    IdentityTokenError,
    RegistryAuthError,
)
from cloudrun_deploy.client.tools import ToolRunner
from cloudrun_deploy.config.models import DeployConfig

_UNSET_VALUES = ("", "(unset)")

# Alternate --set-env-vars delimiters, tried in order
_ALT_DELIMITERS = ("@", "|", ";", "#", "~", "%")


def format_env_vars(env: dict[str, str]) -> str:
    """Render ``--set-env-vars`` input.

    Pairs are comma-joined. If any value itself contains a comma, gcloud's
    alternate delimiter syntax (``^@^K=V@K=V``) is used with the first
    delimiter that appears in no key or value.
    """
    pairs = [f"{key}={value}" for key, value in env.items()]
    if not any("," in value for value in env.values()):
        return ",".join(pairs)
    for delim in _ALT_DELIMITERS:
        if not any(delim in pair for pair in pairs):
            return f"^{delim}^" + delim.join(pairs)
    raise ConfigurationError(
        "Cannot pass service environment to gcloud: every delimiter "
        f"({' '.join(_ALT_DELIMITERS)}) appears in a value"
    )


def deploy_command(config: DeployConfig) -> list[str]:
    """Build the ``gcloud run deploy`` argument list for *config*."""
    cmd = [
        "gcloud", "run", "deploy", config.service_name,
        "--image", config.full_image,
        "--platform", config.platform,
        "--region", config.region,
        "--memory", config.memory,
        "--cpu", config.cpu,
        "--timeout", str(config.timeout),
        "--concurrency", str(config.concurrency),
        "--max-instances", str(config.max_instances),
        "--set-env-vars", format_env_vars(config.service_env),
    ]
    if config.service_account:
        cmd.append(f"--service-account={config.service_account}")
    cmd.append(config.auth_flag)
    return cmd


class GCloudClient:
    """Thin wrapper over the ``gcloud`` commands the deployment needs."""

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    def get_project(self) -> str | None:
        """Return the active gcloud project, or ``None`` when unset."""
        result = self.runner.run(
            ["gcloud", "config", "get-value", "project"],
            capture=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        project = (result.stdout or "").strip()
        return None if project in _UNSET_VALUES else project

    def configure_docker(self, registry: str) -> None:
        self.runner.run(
            ["gcloud", "auth", "configure-docker", registry, "--quiet"],
            error=RegistryAuthError,
            message=f"Docker authentication for {registry} failed",
        )

    def deploy(self, config: DeployConfig) -> None:
        self.runner.run(deploy_command(config), error=DeployError, message="Deployment failed")

    def describe_url(self, service_name: str, region: str) -> str:
        """Return the public URL of a deployed service."""
        result = self.runner.run(
            [
                "gcloud", "run", "services", "describe", service_name,
                "--region", region,
                "--format=value(status.url)",
            ],
            capture=True,
            error=DeployError,
            message=f"Could not describe service {service_name}",
        )
        url = (result.stdout or "").strip()
        if not url:
            raise DeployError(f"Service {service_name} has no URL yet")
        return url

    def identity_token(self) -> str:
        """Return an identity token for calling a private Cloud Run service."""
        result = self.runner.run(
            ["gcloud", "auth", "print-identity-token"],
            capture=True,
            error=IdentityTokenError,
            message="Could not obtain an identity token for the health check",
        )
        token = (result.stdout or "").strip()
        if not token:
            raise IdentityTokenError("gcloud returned an empty identity token")
        return token
