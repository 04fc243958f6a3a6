# descript_proxy/routes/transcript.py
# ------------------------------------------------------------
# Passthrough surface: resolve a share URL to its transcript pointer
# and, with expand, return the raw transcript JSON inline.
#
#   GET  /api/transcript?u=<share url>&expand=true
#   POST /api/transcript { url, expand }
#
# Only https://share.descript.com/view/<alphanumeric id> is accepted.
# Outbound calls are unbounded unless PASSTHROUGH_TIMEOUT_SECONDS is set.
# ------------------------------------------------------------
from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from descript_proxy.clients.descript_client import DescriptClient, get_http_client
from descript_proxy.config import PASSTHROUGH_TIMEOUT_SECONDS
from descript_proxy.models.proxy import TranscriptLookupResponse
from descript_proxy.services.html_meta import find_transcript_url_strict
from descript_proxy.services.transcript_source import (
    TranscriptParseError,
    UpstreamStatusError,
    fetch_share_page,
    fetch_transcript_document,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transcript", tags=["transcript"])

SHARE_URL_RE = re.compile(r"https://share\.descript\.com/view/[A-Za-z0-9]+")


def is_share_url(value: Any) -> bool:
    return isinstance(value, str) and SHARE_URL_RE.fullmatch(value) is not None


def _truthy(value: Any) -> bool:
    """JavaScript truthiness: empty lists and objects count as true."""
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True


def _respond(payload: TranscriptLookupResponse, status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload.model_dump(by_alias=True, exclude_unset=True), status_code=status_code)


def _bad(error: str, status_code: int = 400) -> JSONResponse:
    return _respond(TranscriptLookupResponse(ok=False, error=error), status_code=status_code)


@router.get("")
async def lookup_transcript(
    u: Optional[str] = Query(None, description="Descript share URL"),
    expand: Optional[str] = Query(None, description="'true' to inline the transcript JSON"),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    share_url = (u or "").strip()
    if not is_share_url(share_url):
        return _bad("invalid descript share url")
    return await _lookup(http, share_url, expand=expand == "true")


@router.post("")
async def lookup_transcript_post(
    request: Request,
    http: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    share_url = body.get("url")
    if not is_share_url(share_url):
        return _bad("invalid descript share url")
    return await _lookup(http, share_url, expand=_truthy(body.get("expand")))


async def _lookup(http: httpx.AsyncClient, share_url: str, expand: bool) -> JSONResponse:
    client = DescriptClient(http, timeout=PASSTHROUGH_TIMEOUT_SECONDS)
    try:
        try:
            html = await fetch_share_page(client, share_url)
        except UpstreamStatusError as e:
            return _bad(f"failed to fetch descript page ({e.status_code})", 502)

        transcript_url = find_transcript_url_strict(html)
        if not transcript_url:
            return _bad("transcript meta not found", 404)
        if not expand:
            return _respond(TranscriptLookupResponse(ok=True, transcript_url=transcript_url))

        try:
            document = await fetch_transcript_document(client, transcript_url)
        except UpstreamStatusError as e:
            return _bad(f"failed to fetch transcript json ({e.status_code})", 502)
        except TranscriptParseError:
            return _bad("transcript json parsing failed", 422)

        return _respond(TranscriptLookupResponse(ok=True, transcript_url=transcript_url, transcript=document))
    except Exception as e:
        logger.exception("Transcript lookup failed for %s", share_url)
        return _bad(str(e) or e.__class__.__name__, 500)
