# descript_proxy/clients/descript_client.py
# ------------------------------------------------------------
# Outbound HTTP for the proxy: share pages, transcript JSON and
# webhook deliveries all go through DescriptClient.fetch().
#
# - Adds a browser-ish User-Agent unless the caller sent one
#   (some origins block obvious bots).
# - Always asks for a fresh copy; nothing is cached here.
# - Redirects are followed by the underlying AsyncClient.
# - With a timeout set, the whole call (connect + body) is bounded
#   and cancelled on overrun. timeout=None means no bound at all.
# ------------------------------------------------------------
from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from descript_proxy.config import USER_AGENT

logger = logging.getLogger(__name__)


class FetchTimeoutError(TimeoutError):
    """An outbound call ran past its budget and was cancelled."""


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """FastAPI dependency: one AsyncClient per incoming request."""
    async with httpx.AsyncClient(follow_redirects=True, timeout=None) as client:
        yield client


class DescriptClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        timeout: Optional[float] = None,
        user_agent: str = USER_AGENT,
    ):
        self.http = http
        self.timeout = timeout
        self.user_agent = user_agent

    def _headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged: Dict[str, str] = {"Cache-Control": "no-cache"}
        merged.update(headers or {})
        if not any(name.lower() == "user-agent" for name in merged):
            merged["User-Agent"] = self.user_agent
        return merged

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send one request; raises FetchTimeoutError if the budget runs out."""
        call = self.http.request(method, url, headers=self._headers(headers), json=json)
        if self.timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("%s %s aborted after %ss", method, url, self.timeout)
            raise FetchTimeoutError(f"{method} {url} aborted after {self.timeout:g}s") from exc
