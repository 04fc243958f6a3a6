# descript_proxy/services/html_meta.py
# ------------------------------------------------------------
# Pull the transcript JSON URL out of a Descript share page.
#
# Share pages carry:
#   <meta property="descript:transcript" content="https://..." />
#
# Matching is pattern based, not a real HTML parse. Quote characters
# inside attribute values, or a '>' inside an earlier attribute, can
# fool it. Tag and attribute names match case-insensitively; the
# property value itself must match exactly.
# ------------------------------------------------------------
import re
from typing import Optional

META_PROPERTY = "descript:transcript"

# Stage 1: the first <meta ...> tag whose property is the sentinel,
# wherever the attribute sits inside the tag.
_META_TAG_RE = re.compile(
    r"<meta\s+[^>]*property=[\"'](?-i:" + re.escape(META_PROPERTY) + r")[\"'][^>]*>",
    re.IGNORECASE,
)
# Stage 2: the content attribute within that tag.
_CONTENT_RE = re.compile(r"content=[\"']([^\"']+)[\"']", re.IGNORECASE)

# Single-pass form used by the passthrough surface: property first,
# double quotes only.
_STRICT_META_RE = re.compile(
    r"<meta\s+property=\"(?-i:" + re.escape(META_PROPERTY) + r")\"\s+content=\"([^\"]+)\"",
    re.IGNORECASE,
)


def find_transcript_json_url(html: str) -> Optional[str]:
    """Content of the first descript:transcript meta tag, any attribute order."""
    tag = _META_TAG_RE.search(html)
    if not tag:
        return None
    content = _CONTENT_RE.search(tag.group(0))
    return content.group(1) if content else None


def find_transcript_url_strict(html: str) -> Optional[str]:
    """Like find_transcript_json_url, but only for property="..." content="..." order."""
    match = _STRICT_META_RE.search(html)
    return match.group(1) if match else None
