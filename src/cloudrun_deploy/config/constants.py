"""Defaults, environment variable names, and constants."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "cloudrun-deploy"

ENV_FILE = Path(".env")

# Environment variable names
ENV_SERVICE_NAME = "DEPLOY_SERVICE_NAME"
ENV_REGION = "REGION"
ENV_MEMORY = "DEPLOY_MEMORY"
ENV_CPU = "DEPLOY_CPU"
ENV_TIMEOUT = "DEPLOY_TIMEOUT"
ENV_CONCURRENCY = "DEPLOY_CONCURRENCY"
ENV_MAX_INSTANCES = "DEPLOY_MAX_INSTANCES"
ENV_HOSTNAME = "HOSTNAME"
ENV_PROJECT = "GCLOUD_PROJECT"
ENV_BUCKET = "CLOUD_STORAGE_BUCKET"
ENV_CORS_ALLOW_LIST = "CORS_ORIGIN_ALLOW_LIST"
ENV_REGISTRY = "DEPLOY_REGISTRY"
ENV_IMAGE_TAG = "IMAGE_TAG"
ENV_SERVICE_ACCOUNT = "SERVICE_ACCOUNT"
ENV_ALLOW_UNAUTHENTICATED = "ALLOW_UNAUTHENTICATED"
ENV_BUILD_CONTEXT = "DEPLOY_BUILD_CONTEXT"
ENV_DOCKERFILE = "DEPLOY_DOCKERFILE"
ENV_VERIFY_HEALTH = "DEPLOY_VERIFY_HEALTH"
ENV_LOG_LEVEL = "DEPLOY_LOG_LEVEL"

# Service defaults
DEFAULT_SERVICE_NAME = "ext-image-processing-api-handler"
DEFAULT_REGION = "us-central1"
DEFAULT_PLATFORM = "managed"
DEFAULT_MEMORY = "1024Mi"
DEFAULT_CPU = "0.5833"
DEFAULT_TIMEOUT = 60
DEFAULT_CONCURRENCY = 1
DEFAULT_MAX_INSTANCES = 34
DEFAULT_HOSTNAME = "xinjiangshao.com"
DEFAULT_CORS_ALLOW_LIST = "*"
DEFAULT_REGISTRY = "gcr.io"
DEFAULT_IMAGE_TAG = "latest"
DEFAULT_BUILD_CONTEXT = "."
DEFAULT_LOG_LEVEL = "WARNING"

# Cloud Run runs amd64 images only
BUILD_PLATFORM = "linux/amd64"

HEALTH_PATH = "/health"
HEALTH_TIMEOUT = 10.0

# Install hints for required tools, checked in this order
REQUIRED_TOOLS = {
    "gcloud": (
        "gcloud CLI is not installed. Please install it from: "
        "https://cloud.google.com/sdk/docs/install"
    ),
    "docker": (
        "Docker is not installed. Please install it from: "
        "https://docs.docker.com/get-docker/"
    ),
}
