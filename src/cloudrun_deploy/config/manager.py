"""Configuration manager — load .env, resolve settings from the environment."""

from __future__ import annotations

import os
from collections.abc import Callable, MutableMapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError

from cloudrun_deploy.client.errors import ConfigurationError
from cloudrun_deploy.config.constants import (
    ENV_ALLOW_UNAUTHENTICATED,
    ENV_BUCKET,
    ENV_BUILD_CONTEXT,
    ENV_CONCURRENCY,
    ENV_CORS_ALLOW_LIST,
    ENV_CPU,
    ENV_DOCKERFILE,
    ENV_FILE,
    ENV_HOSTNAME,
    ENV_IMAGE_TAG,
    ENV_MAX_INSTANCES,
    ENV_MEMORY,
    ENV_PROJECT,
    ENV_REGION,
    ENV_REGISTRY,
    ENV_SERVICE_ACCOUNT,
    ENV_SERVICE_NAME,
    ENV_TIMEOUT,
    ENV_VERIFY_HEALTH,
)
from cloudrun_deploy.config.models import DeployConfig

# DeployConfig field -> environment variable that overrides it
_FIELD_ENV = {
    "service_name": ENV_SERVICE_NAME,
    "region": ENV_REGION,
    "memory": ENV_MEMORY,
    "cpu": ENV_CPU,
    "timeout": ENV_TIMEOUT,
    "concurrency": ENV_CONCURRENCY,
    "max_instances": ENV_MAX_INSTANCES,
    "hostname": ENV_HOSTNAME,
    "cors_allow_list": ENV_CORS_ALLOW_LIST,
    "registry": ENV_REGISTRY,
    "image_tag": ENV_IMAGE_TAG,
    "service_account": ENV_SERVICE_ACCOUNT,
    "build_context": ENV_BUILD_CONTEXT,
    "dockerfile": ENV_DOCKERFILE,
}

_FLAG_ENV = {
    "allow_unauthenticated": ENV_ALLOW_UNAUTHENTICATED,
    "verify_health": ENV_VERIFY_HEALTH,
}


class ConfigManager:
    """Resolves a DeployConfig from the environment and a .env file."""

    def __init__(
        self,
        env_file: Path | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self.env_file = env_file or ENV_FILE
        self.environ = os.environ if environ is None else environ

    def load_env_file(self) -> dict[str, str]:
        """Load the .env file into the environment, overriding existing values.

        Returns the variables applied; empty when there is no file.
        """
        if not self.env_file.is_file():
            return {}
        applied = {key: value for key, value in dotenv_values(self.env_file).items() if value is not None}
        self.environ.update(applied)
        return applied

    def get(self, name: str) -> str | None:
        """Return an environment value, treating empty strings as unset."""
        value = self.environ.get(name)
        return value if value else None

    def get_flag(self, name: str) -> bool:
        value = self.get(name)
        return value is not None and value.strip().lower() == "true"

    def resolve_project(self, project_lookup: Callable[[], str | None]) -> str:
        """Resolve the GCP project.

        Precedence: environment > gcloud's active configuration.
        """
        project = self.get(ENV_PROJECT) or project_lookup()
        if not project:
            raise ConfigurationError(
                "No GCP project set. Please set it with: gcloud config set project PROJECT_ID"
            )
        return project

    def resolve_bucket(self, project: str, bucket_prompt: Callable[[str], str | None]) -> str:
        """Resolve the Cloud Storage bucket, prompting when it is not set."""
        bucket = self.get(ENV_BUCKET)
        if bucket:
            return bucket
        bucket = bucket_prompt(f"{project}.appspot.com")
        if not bucket or not bucket.strip():
            raise ConfigurationError("Cloud Storage bucket name is required")
        return bucket.strip()

    def build(self, project: str, bucket: str) -> DeployConfig:
        """Build the configuration record; unset fields keep their defaults."""
        data: dict[str, Any] = {"project": project, "bucket": bucket}
        for field, env_name in _FIELD_ENV.items():
            value = self.get(env_name)
            if value is not None:
                data[field] = value
        for field, env_name in _FLAG_ENV.items():
            data[field] = self.get_flag(env_name)
        try:
            return DeployConfig(**data)
        except ValidationError as exc:
            raise ConfigurationError(_describe_validation_error(exc)) from exc

    def resolve(
        self,
        project_lookup: Callable[[], str | None],
        bucket_prompt: Callable[[str], str | None],
        on_project: Callable[[str], None] | None = None,
    ) -> DeployConfig:
        """Resolve every setting: environment override, else default.

        *on_project* is called with the project once it is known, before the
        bucket is resolved.
        """
        project = self.resolve_project(project_lookup)
        if on_project is not None:
            on_project(project)
        bucket = self.resolve_bucket(project, bucket_prompt)
        return self.build(project, bucket)


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "config"
        name = _FIELD_ENV.get(field, field)
        problems.append(f"{name}: {err['msg']}")
    return "Invalid configuration: " + "; ".join(problems)
