"""Build, push, and deploy a container image to Cloud Run."""

__version__ = "0.1.0"
