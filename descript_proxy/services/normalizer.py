# descript_proxy/services/normalizer.py
# ------------------------------------------------------------
# Raw transcript JSON -> flat text.
#
# Descript has served several document layouts over time. Each one
# gets a small decoder; they are tried in a fixed order and the first
# decoder that yields at least one non-empty line wins:
#
#   segments   [{speaker, text, start}]            -> "[HH:MM:SS] Speaker: text"
#   monologues [{speaker, start, elements:[{value}]}]
#   paragraphs same as segments
#   words      [{text}]                             -> "w1 w2 w3"
#   text       top-level string, used verbatim
#
# Nothing is validated up front. Fields of the wrong type are treated
# as missing rather than rejected.
# ------------------------------------------------------------
from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from descript_proxy.models.transcript import NormalizedTranscript, TranscriptShape
from descript_proxy.utils.time import format_timestamp


def _js_number(value: float) -> str:
    """Render a float as JavaScript's String(n) does.

    Plain digits for 1e-6 <= |n| < 1e21, exponent form outside that
    range ("1e+21", "1.5e-7").
    """
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    if 1e-6 <= abs(value) < 1e21:
        # 1e-05 -> 0.00001
        return format(Decimal(text), "f")
    mantissa, _, exponent = text.partition("e")
    sign = "-" if exponent.startswith("-") else "+"
    return f"{mantissa}e{sign}{int(exponent.lstrip('+-'))}"


def _coerce_text(value: Any) -> Optional[str]:
    """Only JSON strings and numbers become text; everything else is absent."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value) if abs(value) < 10**21 else _js_number(float(value))
    if isinstance(value, float) and math.isfinite(value):
        # JSON has a single number type: 5.0 and 5 both read as "5"
        return _js_number(value)
    return None


def _join_nonblank(parts: Iterable[Optional[str]], sep: str = " ") -> str:
    return sep.join(p for p in parts if p and p.strip())


def _compose_line(start: Any, speaker: Optional[str], text: Optional[str]) -> str:
    stamp = format_timestamp(start)
    prefix = _join_nonblank([
        f"[{stamp}]" if stamp else None,
        f"{speaker}:" if speaker else None,
    ])
    return _join_nonblank([prefix, text])


def _as_record(item: Any) -> Dict[str, Any]:
    return item if isinstance(item, dict) else {}


def _segment_lines(items: List[Any]) -> List[str]:
    lines: List[str] = []
    for item in items:
        entry = _as_record(item)
        line = _compose_line(
            entry.get("start"),
            _coerce_text(entry.get("speaker")),
            _coerce_text(entry.get("text")),
        )
        if line:
            lines.append(line)
    return lines


def _monologue_lines(items: List[Any]) -> List[str]:
    lines: List[str] = []
    for item in items:
        entry = _as_record(item)
        elements = entry.get("elements")
        text = None
        if isinstance(elements, list):
            values = (_coerce_text(_as_record(el).get("value")) for el in elements)
            text = _join_nonblank(values, sep="")
        line = _compose_line(entry.get("start"), _coerce_text(entry.get("speaker")), text)
        if line:
            lines.append(line)
    return lines


def _word_lines(items: List[Any]) -> List[str]:
    joined = _join_nonblank(_coerce_text(_as_record(w).get("text")) for w in items)
    return [joined] if joined else []


# Priority order matters: a document carrying both segments and words
# is rendered from its segments.
_LIST_DECODERS: Tuple[Tuple[TranscriptShape, Callable[[List[Any]], List[str]]], ...] = (
    ("segments", _segment_lines),
    ("monologues", _monologue_lines),
    ("paragraphs", _segment_lines),
    ("words", _word_lines),
)


def normalize_transcript(document: Any) -> NormalizedTranscript:
    """Decode the first recognizable layout of `document` into flat text.

    Returns an empty NormalizedTranscript (shape None) when no layout
    produced any text; callers treat that as a content failure.
    """
    if not isinstance(document, dict):
        return NormalizedTranscript()

    for shape, decode in _LIST_DECODERS:
        items = document.get(shape)
        if not isinstance(items, list):
            continue
        lines = decode(items)
        if lines:
            return NormalizedTranscript(text="\n".join(lines), shape=shape)

    text = document.get("text")
    if isinstance(text, str) and text:
        return NormalizedTranscript(text=text, shape="text")

    return NormalizedTranscript()


def transcript_to_text(document: Any) -> str:
    return normalize_transcript(document).text
