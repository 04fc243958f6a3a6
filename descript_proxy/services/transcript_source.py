# descript_proxy/services/transcript_source.py
# ------------------------------------------------------------
# The fetch steps both surfaces share: share page HTML, then the
# transcript JSON it points at. Failures come back as typed
# exceptions; each route decides the status code and wording.
# ------------------------------------------------------------
from __future__ import annotations

import logging
from typing import Any

from descript_proxy.clients.descript_client import DescriptClient

logger = logging.getLogger(__name__)


class UpstreamStatusError(RuntimeError):
    """An upstream answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"{url} responded with HTTP {status_code}")
        self.url = url
        self.status_code = status_code


class TranscriptParseError(ValueError):
    """The transcript document body was not valid JSON."""


async def fetch_share_page(client: DescriptClient, share_url: str) -> str:
    """Return the share page HTML; raises UpstreamStatusError on non-2xx."""
    logger.info("Fetching share page: %s", share_url)
    resp = await client.fetch("GET", share_url)
    if not resp.is_success:
        raise UpstreamStatusError(share_url, resp.status_code)
    return resp.text


async def fetch_transcript_document(client: DescriptClient, transcript_url: str) -> Any:
    """Return the decoded transcript JSON (any JSON value)."""
    resp = await client.fetch("GET", transcript_url)
    if not resp.is_success:
        raise UpstreamStatusError(transcript_url, resp.status_code)
    try:
        return resp.json()
    except ValueError as exc:
        raise TranscriptParseError(f"Transcript at {transcript_url} is not valid JSON") from exc
