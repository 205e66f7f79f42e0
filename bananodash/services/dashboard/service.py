"""BananoMiner lookup used by the `/api` proxy route.

One GET per call, no retry. Every way the lookup can fail surfaces as
`UpstreamError` so the dispatcher has a single failure branch.
"""

import json
from typing import Any
from urllib.parse import quote

import httpx

from bananodash.common.logging import logger
from bananodash.common.metrics import upstream_latency_seconds, upstream_requests_total


def _reject_constant(token: str) -> Any:
    # NaN/Infinity parse in Python but cannot be re-encoded as JSON.
    raise ValueError(f"non-standard JSON constant {token}")


class UpstreamError(Exception):
    """The upstream call failed or answered with a non-success status."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason if status_code is None else f"{reason} (status={status_code})")
        self.reason = reason
        self.status_code = status_code


class MinerStatsClient:
    """Fetches `user_address/{wallet}` statistics from BananoMiner."""

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        service_name: str = "bananominer-dashboard",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.transport = transport
        self.service_name = service_name

    def user_address_url(self, wallet: str) -> str:
        # Single path segment; the wallet itself is passed through unvalidated.
        return f"{self.base_url}/user_address/{quote(wallet, safe='')}"

    def _fail(self, outcome: str, status_code: int | None = None) -> UpstreamError:
        upstream_requests_total.labels(service=self.service_name, outcome=outcome).inc()
        return UpstreamError(outcome, status_code)

    async def fetch_user_address(self, wallet: str) -> Any:
        """Return the decoded upstream JSON for one wallet."""

        url = self.user_address_url(wallet)
        with upstream_latency_seconds.labels(service=self.service_name).time():
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    resp = await client.get(url, headers={"User-Agent": self.user_agent})
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.warning("upstream request failed: %s", exc)
                raise self._fail("network_error") from exc

        if not resp.is_success:
            logger.warning("upstream rejected lookup status=%s", resp.status_code)
            raise self._fail("http_error", resp.status_code)
        try:
            payload = json.loads(resp.content, parse_constant=_reject_constant)
        except ValueError as exc:
            logger.warning("upstream returned non-JSON body")
            raise self._fail("invalid_json", resp.status_code) from exc

        upstream_requests_total.labels(service=self.service_name, outcome="ok").inc()
        return payload
