"""Post-deploy liveness check against the service's health endpoint."""

from __future__ import annotations

import httpx

from cloudrun_deploy.client.errors import HealthCheckError
from cloudrun_deploy.config.constants import HEALTH_PATH, HEALTH_TIMEOUT


def health_url(service_url: str) -> str:
    return f"{service_url.rstrip('/')}{HEALTH_PATH}"


def check_health(
    service_url: str,
    timeout: float = HEALTH_TIMEOUT,
    token: str | None = None,
) -> int:
    """GET the health endpoint once, returning the status code.

    A *token* is sent as a bearer identity token, which private Cloud Run
    services require.

    Raises HealthCheckError on a transport error or a non-2xx answer.
    """
    url = health_url(service_url)
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    try:
        response = httpx.get(url, headers=headers, timeout=timeout, follow_redirects=True)
    except httpx.TimeoutException as exc:
        raise HealthCheckError(f"Health check at {url} timed out: {exc}") from exc
    except httpx.HTTPError as exc:
        raise HealthCheckError(f"Cannot reach {url}: {exc}") from exc
    if not response.is_success:
        raise HealthCheckError(
            f"Health check at {url} returned {response.status_code}"
        )
    return response.status_code
