# descript_proxy/routes/webhook_proxy.py
# ------------------------------------------------------------
# Webhook-forwarding surface.
#
#   POST / { descript_url, make_webhook_url }
#     1) fetch the share page
#     2) find the transcript JSON URL in its <meta> tags
#     3) fetch + parse the transcript JSON
#     4) normalize it to flat text
#     5) POST the result to the webhook (exactly once, no retry)
#
#   GET /  -> static success stub, for connectivity checks.
#
# Both are also served at /api/descript-proxy, with or without a
# trailing slash.
#
# Every outcome is a ProxyResponse JSON body with an explicit status.
# A failed webhook delivery still returns 200, with success=false and
# the transcript + metadata populated.
# ------------------------------------------------------------
from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from descript_proxy.clients.descript_client import DescriptClient, get_http_client
from descript_proxy.config import REQUEST_TIMEOUT_SECONDS
from descript_proxy.models.proxy import ProxyMetadata, ProxyResponse
from descript_proxy.services.html_meta import find_transcript_json_url
from descript_proxy.services.normalizer import normalize_transcript
from descript_proxy.services.transcript_source import (
    TranscriptParseError,
    UpstreamStatusError,
    fetch_share_page,
    fetch_transcript_document,
)
from descript_proxy.utils.time import elapsed_ms

logger = logging.getLogger(__name__)

router = APIRouter(tags=["descript-proxy"])

# Older deployments posted here; served directly so callers get no redirect.
ALIAS_PATH = "/api/descript-proxy"


# ---- helpers --------------------------------------------------------
def _reply(payload: ProxyResponse, status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload.model_dump(exclude_unset=True), status_code=status_code)


def _fail(status_code: int, error: str, **metadata: Any) -> JSONResponse:
    return _reply(
        ProxyResponse(success=False, metadata=ProxyMetadata(**metadata), error=error),
        status_code=status_code,
    )


def _error_message(err: BaseException) -> str:
    return str(err) or err.__class__.__name__


# ---- endpoints ------------------------------------------------------
@router.get("/")
@router.get(ALIAS_PATH, include_in_schema=False)
@router.get(f"{ALIAS_PATH}/", include_in_schema=False)
async def proxy_stub() -> JSONResponse:
    return _reply(ProxyResponse(success=True, metadata=ProxyMetadata(processing_time=0)))


@router.post("/")
@router.post(ALIAS_PATH, include_in_schema=False)
@router.post(f"{ALIAS_PATH}/", include_in_schema=False)
async def forward_transcript(
    request: Request,
    http: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    started = time.monotonic()

    # Validate input before any network call.
    try:
        body = await request.json()
    except ValueError:
        return _fail(400, "Invalid JSON body")
    if not isinstance(body, dict):
        body = {}

    descript_url = body.get("descript_url")
    webhook_url = body.get("make_webhook_url")

    if not descript_url or not isinstance(descript_url, str):
        return _fail(400, "Missing or invalid 'descript_url'")
    if not webhook_url or not isinstance(webhook_url, str):
        return _fail(400, "Missing or invalid 'make_webhook_url'", source_url=descript_url)

    client = DescriptClient(http, timeout=REQUEST_TIMEOUT_SECONDS)
    try:
        return await _run_pipeline(client, descript_url, webhook_url, started)
    except Exception as e:
        logger.exception("Unexpected failure while proxying %s", descript_url)
        return _fail(500, f"Unexpected error: {_error_message(e)}")


async def _run_pipeline(
    client: DescriptClient,
    descript_url: str,
    webhook_url: str,
    started: float,
) -> JSONResponse:
    # 1) Share page
    try:
        html = await fetch_share_page(client, descript_url)
    except UpstreamStatusError as e:
        return _fail(502, f"Failed to fetch Descript page: HTTP {e.status_code}", source_url=descript_url)

    # 2) Transcript pointer
    transcript_json_url = find_transcript_json_url(html)
    if not transcript_json_url:
        return _fail(422, "Unable to locate transcript JSON URL in page HTML", source_url=descript_url)
    logger.info("Found transcript JSON URL: %s", transcript_json_url)

    # 3) Transcript document
    try:
        document = await fetch_transcript_document(client, transcript_json_url)
    except UpstreamStatusError as e:
        return _fail(
            502,
            f"Failed to fetch transcript JSON: HTTP {e.status_code}",
            source_url=descript_url,
            transcript_json_url=transcript_json_url,
        )
    except TranscriptParseError:
        return _fail(
            422,
            "Transcript JSON parsing failed",
            source_url=descript_url,
            transcript_json_url=transcript_json_url,
        )

    # 4) Normalize
    normalized = normalize_transcript(document)
    if normalized.is_empty:
        return _fail(
            422,
            "Transcript JSON did not contain recognizable text",
            source_url=descript_url,
            transcript_json_url=transcript_json_url,
        )
    logger.info("Normalized %s transcript (%d chars)", normalized.shape, len(normalized.text))

    outgoing = ProxyResponse(
        success=True,
        transcript=normalized.text,
        metadata=ProxyMetadata(
            source_url=descript_url,
            transcript_json_url=transcript_json_url,
            processing_time=elapsed_ms(started),
        ),
    )

    # 5) Webhook delivery; the caller hears about the outcome either way
    delivery_error = await _deliver(client, webhook_url, outgoing)
    if delivery_error is None:
        return _reply(outgoing)
    return _reply(
        ProxyResponse(
            success=False,
            transcript=outgoing.transcript,
            metadata=outgoing.metadata,
            error=delivery_error,
        )
    )


async def _deliver(client: DescriptClient, webhook_url: str, outgoing: ProxyResponse) -> Optional[str]:
    """POST the result to the webhook. Returns an error message, or None on 2xx."""
    logger.info("Posting results to webhook: %s", webhook_url)
    try:
        resp = await client.fetch(
            "POST",
            webhook_url,
            headers={"Content-Type": "application/json"},
            json=outgoing.model_dump(exclude_unset=True),
        )
    except Exception:
        logger.exception("Error POSTing to webhook %s", webhook_url)
        return "Failed to deliver results to Make webhook"

    if resp.is_success:
        return None
    logger.warning("Webhook responded with status %s", resp.status_code)
    return f"Make webhook returned HTTP {resp.status_code}"
