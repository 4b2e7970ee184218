"""Pydantic model for the deployment configuration."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cloudrun_deploy.config.constants import (
    BUILD_PLATFORM,
    DEFAULT_BUILD_CONTEXT,
    DEFAULT_CONCURRENCY,
    DEFAULT_CORS_ALLOW_LIST,
    DEFAULT_CPU,
    DEFAULT_HOSTNAME,
    DEFAULT_IMAGE_TAG,
    DEFAULT_MAX_INSTANCES,
    DEFAULT_MEMORY,
    DEFAULT_PLATFORM,
    DEFAULT_REGION,
    DEFAULT_REGISTRY,
    DEFAULT_SERVICE_NAME,
    DEFAULT_TIMEOUT,
)

_MEMORY_RE = re.compile(r"^\d+(Ki|Mi|Gi)$")


class DeployConfig(BaseModel):
    """Resolved, read-only settings for one build-push-deploy run."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(min_length=1, description="GCP project ID")
    bucket: str = Field(min_length=1, description="Cloud Storage bucket name")
    service_name: str = Field(default=DEFAULT_SERVICE_NAME, min_length=1)
    region: str = Field(default=DEFAULT_REGION, min_length=1)
    platform: str = DEFAULT_PLATFORM
    memory: str = Field(default=DEFAULT_MEMORY, description="Memory limit, e.g. 1024Mi")
    cpu: str = Field(default=DEFAULT_CPU, description="CPU share, e.g. 0.5833")
    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0, le=3600, description="Request timeout in seconds")
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1, le=1000)
    max_instances: int = Field(default=DEFAULT_MAX_INSTANCES, gt=0)
    hostname: str = DEFAULT_HOSTNAME
    cors_allow_list: str = DEFAULT_CORS_ALLOW_LIST
    registry: str = Field(default=DEFAULT_REGISTRY, min_length=1)
    image_tag: str = Field(default=DEFAULT_IMAGE_TAG, min_length=1)
    service_account: str | None = None
    allow_unauthenticated: bool = False
    build_context: str = DEFAULT_BUILD_CONTEXT
    dockerfile: str | None = None
    build_platform: str = BUILD_PLATFORM
    verify_health: bool = False

    @field_validator("memory")
    @classmethod
    def validate_memory(cls, v: str) -> str:
        if not _MEMORY_RE.match(v):
            raise ValueError("memory must look like 512Mi or 2Gi")
        return v

    @field_validator("cpu")
    @classmethod
    def validate_cpu(cls, v: str) -> str:
        try:
            value = float(v)
        except ValueError:
            raise ValueError(f"cpu must be a number, got {v!r}") from None
        if value <= 0:
            raise ValueError("cpu must be greater than 0")
        return v

    @field_validator("registry")
    @classmethod
    def validate_registry(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def image_repo(self) -> str:
        return f"{self.registry}/{self.project}/{self.service_name}"

    @property
    def full_image(self) -> str:
        return f"{self.image_repo}:{self.image_tag}"

    @property
    def auth_flag(self) -> str:
        if self.allow_unauthenticated:
            return "--allow-unauthenticated"
        return "--no-allow-unauthenticated"

    @property
    def service_env(self) -> dict[str, str]:
        """Environment variables handed to the running service."""
        return {
            "GCLOUD_PROJECT": self.project,
            "PROJECT_ID": self.project,
            "CLOUD_STORAGE_BUCKET": self.bucket,
            "STORAGE_BUCKET": self.bucket,
            "CORS_ORIGIN_ALLOW_LIST": self.cors_allow_list,
            "LOCATION": self.region,
            "FUNCTION_SIGNATURE_TYPE": "http",
            "NODE_ENV": "production",
            "HOSTNAME": self.hostname,
        }

    def summary(self) -> dict[str, str]:
        """Key/value view shown before the confirmation prompt."""
        return {
            "Service Name": self.service_name,
            "Region": self.region,
            "Memory": self.memory,
            "CPU": self.cpu,
            "Timeout": f"{self.timeout}s",
            "Concurrency": str(self.concurrency),
            "Max Instances": str(self.max_instances),
            "Cloud Storage Bucket": self.bucket,
            "CORS Allow List": self.cors_allow_list,
            "Docker Image": self.full_image,
        }
