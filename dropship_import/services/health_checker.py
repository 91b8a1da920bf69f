# dropship_import/services/health_checker.py

"""Proxy endpoint connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass
from urllib.parse import quote, urlparse

from dropship_import.config.settings import Settings
from dropship_import.services.document_fetcher import DocumentFetcher

logger = logging.getLogger("dropship_import.health")


@dataclass
class HealthResult:
    """Result of a single endpoint health check."""

    endpoint_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def endpoint_id(template: str) -> str:
    """Short display name for a proxy template (its hostname)."""
    return urlparse(template).hostname or template


def probe_endpoint(template: str, fetcher: DocumentFetcher) -> HealthResult:
    """Fetch the probe URL through one proxy endpoint."""
    name = endpoint_id(template)
    probe_url = template.format(url=quote(Settings.HEALTH_PROBE_URL, safe=""))

    start = time.monotonic()
    try:
        resp = fetcher.session.get(
            probe_url,
            headers=Settings.DEFAULT_HEADERS,
            timeout=Settings.HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code != 200:
            return HealthResult(
                endpoint_id=name,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > Settings.HEALTH_SLOW_MS:
            return HealthResult(
                endpoint_id=name,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            endpoint_id=name,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            endpoint_id=name,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent probes against every configured proxy endpoint."""

    def __init__(self, fetcher: DocumentFetcher | None = None) -> None:
        self.endpoints = Settings.PROXY_ENDPOINTS
        self.fetcher = fetcher or DocumentFetcher()

    async def check_all(self) -> list[HealthResult]:
        """Probe every endpoint concurrently."""
        tasks = [
            asyncio.to_thread(probe_endpoint, template, self.fetcher)
            for template in self.endpoints
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.endpoint_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
