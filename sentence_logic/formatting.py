# sentence_logic/formatting.py
"""Output line rendering: ``<original line>\\t<logical form text>``."""

from __future__ import annotations

from sentence_logic.errors import OutputFormatError
from sentence_logic.records import ParsedRecord

FIELD_SEPARATOR = "\t"
FORBIDDEN_CHARS = ("\t", "\n", "\r")


def logical_form_text(logical_form: object | None) -> str:
    if logical_form is None:
        return ""
    text = str(logical_form)
    bad = [repr(c) for c in FORBIDDEN_CHARS if c in text]
    if bad:
        raise OutputFormatError(f"Logical form text contains {', '.join(bad)}: {text!r}")
    return text


def format_output_line(parsed: ParsedRecord) -> str:
    return f"{parsed.record.line}{FIELD_SEPARATOR}{logical_form_text(parsed.logical_form)}"


def split_output_line(text: str) -> tuple[str, str]:
    """Split an output line on its last tab into (original line, logical form text)."""
    line, sep, lf_text = text.rpartition(FIELD_SEPARATOR)
    if not sep:
        raise ValueError(f"Not an output line (no tab): {text!r}")
    return line, lf_text
