"""Probe the wall service health endpoint."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"


@dataclass(frozen=True)
class APIHealthResult:
    """Outcome of a single health probe."""

    ok: bool
    status_code: Optional[int]
    detail: str
    latency_ms: Optional[float]
    version: Optional[str] = None
    payload: Optional[dict[str, Any]] = None


def _evaluate_payload(payload: Any, expected_version: Optional[str]) -> tuple[bool, str, Optional[str]]:
    if not isinstance(payload, dict):
        return False, "Health endpoint returned a non-object payload", None
    version = payload.get("version")
    version = version if isinstance(version, str) else None
    if payload.get("status") != "ok":
        return False, f"Service reported status {payload.get('status')!r}", version
    if expected_version is not None and version != expected_version:
        return False, f"Service version {version!r} does not match {expected_version!r}", version
    return True, "API health check succeeded", version


def check_api_health(
    base_url: str,
    *,
    timeout: float = 5.0,
    expected_version: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> APIHealthResult:
    """Call ``GET /api/health`` and report whether the wall service is up.

    Args:
        base_url: Root URL of the service, without the ``/api`` prefix.
        timeout: Request timeout in seconds when creating an internal client.
        expected_version: When given, a different reported version fails the probe.
        client: Optional pre-configured ``httpx.Client``.
    """

    url = f"{base_url.rstrip('/')}{HEALTH_PATH}"
    should_close = client is None
    session = client or httpx.Client(timeout=timeout)
    start_time = time.monotonic()
    try:
        response = session.get(url)
    except httpx.HTTPError as exc:
        latency_ms = (time.monotonic() - start_time) * 1000
        logger.error("Health probe request failed", extra={"url": url, "error": str(exc)})
        return APIHealthResult(
            ok=False,
            status_code=None,
            detail=f"Request to {url} failed: {exc}",
            latency_ms=latency_ms,
        )
    finally:
        if should_close:
            session.close()

    latency_ms = (time.monotonic() - start_time) * 1000
    if response.status_code != httpx.codes.OK:
        logger.warning("Health probe returned %s", response.status_code, extra={"url": url})
        return APIHealthResult(
            ok=False,
            status_code=response.status_code,
            detail=f"Health endpoint returned {response.status_code}",
            latency_ms=latency_ms,
        )

    try:
        payload = response.json()
    except ValueError:
        payload = None
    ok, detail, version = _evaluate_payload(payload, expected_version)
    log = logger.info if ok else logger.warning
    log(detail, extra={"url": url, "latency_ms": latency_ms, "version": version})
    return APIHealthResult(
        ok=ok,
        status_code=response.status_code,
        detail=detail,
        latency_ms=latency_ms,
        version=version,
        payload=payload if isinstance(payload, dict) else None,
    )


__all__ = ["APIHealthResult", "HEALTH_PATH", "check_api_health"]
