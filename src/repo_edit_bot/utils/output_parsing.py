"""Parsing of untrusted, unstructured model output."""

import json
import re
from typing import Any, NamedTuple

from repo_edit_bot.models import ParseStatus

_WRAPPED_RE = re.compile(r"\A```[\w-]*[ \t]*\n?(.*?)\n?```\Z", re.DOTALL)
_EMBEDDED_RE = re.compile(r"```[\w-]*[ \t]*\n(.*?)\n?```", re.DOTALL)


class ParsedOutput(NamedTuple):
    """Tagged parse result; ``value`` is only meaningful on SUCCESS."""

    kind: ParseStatus
    value: Any = None
    raw: str = ""


def strip_code_fences(text: str) -> str:
    """Unwrap a payload from markdown code fences (```json ... ```).

    Fences inside the payload (e.g. in a JSON string) are left untouched.
    """
    stripped = (text or "").strip()
    wrapped = _WRAPPED_RE.match(stripped)
    if wrapped:
        return wrapped.group(1).strip()
    if stripped[:1] in ("{", "["):
        return stripped
    embedded = _EMBEDDED_RE.search(stripped)
    if embedded:
        return embedded.group(1).strip()
    return stripped


def parse_json_output(text: str | None) -> ParsedOutput:
    """Parse a model response as JSON after stripping code fences.

    Returns:
        EMPTY for blank output, MALFORMED when the payload is not JSON,
        SUCCESS with the decoded value otherwise.
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        return ParsedOutput(ParseStatus.EMPTY, raw=cleaned)
    try:
        return ParsedOutput(ParseStatus.SUCCESS, json.loads(cleaned), cleaned)
    except json.JSONDecodeError:
        return ParsedOutput(ParseStatus.MALFORMED, raw=cleaned)
