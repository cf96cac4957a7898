"""Utilities for the repo edit bot."""

from repo_edit_bot.utils.output_parsing import (
    ParsedOutput,
    parse_json_output,
    strip_code_fences,
)
from repo_edit_bot.utils.project_detector import detect_project_type

__all__ = [
    "ParsedOutput",
    "detect_project_type",
    "parse_json_output",
    "strip_code_fences",
]
