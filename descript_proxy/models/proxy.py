# descript_proxy/models/proxy.py
# ------------------------------------------------------------
# Response envelopes for both HTTP surfaces.
# Routes serialize with exclude_unset=True so fields that were never
# assigned stay out of the JSON body.
# ------------------------------------------------------------
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProxyMetadata(BaseModel):
    """
    Where a transcript came from and how long it took.
    - source_url:          the share page the caller asked for
    - transcript_json_url: the pointer found inside that page
    - processing_time:     milliseconds from request start to webhook post
    """
    source_url: Optional[str] = None
    transcript_json_url: Optional[str] = None
    processing_time: Optional[int] = None


class ProxyResponse(BaseModel):
    """Webhook-forwarding result. Also the body POSTed to the webhook."""
    success: bool
    transcript: Optional[str] = None
    metadata: ProxyMetadata = Field(default_factory=ProxyMetadata)
    error: Optional[str] = None


class TranscriptLookupResponse(BaseModel):
    """Passthrough result: the pointer, plus the raw document when expanded."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    transcript_url: Optional[str] = Field(default=None, alias="transcriptUrl")
    transcript: Any = None
    error: Optional[str] = None
