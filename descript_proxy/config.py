# descript_proxy/config.py
# ------------------------------------------------------------
# Runtime knobs, read once from the environment (.env supported).
# Every value has a default, so the service runs with no .env at all.
# ------------------------------------------------------------
from __future__ import annotations

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _as_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _optional_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    return float(raw)


# Upper bound for each outbound call made by the webhook-forwarding surface.
REQUEST_TIMEOUT_SECONDS: float = _as_float("REQUEST_TIMEOUT_SECONDS", 30.0)

# The passthrough surface is unbounded unless this is set.
PASSTHROUGH_TIMEOUT_SECONDS: Optional[float] = _optional_float("PASSTHROUGH_TIMEOUT_SECONDS")

USER_AGENT: str = os.getenv(
    "UPSTREAM_USER_AGENT",
    "Mozilla/5.0 (compatible; DescriptProxy/1.0; +https://vercel.com)",
)

ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
