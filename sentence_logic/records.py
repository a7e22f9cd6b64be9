# sentence_logic/records.py
"""Record reading and sentence extraction.

Input files hold one record per line. A line may carry several tab-delimited
columns; the sentence is in the first column, unless the first column is a
numeric identifier, in which case the sentence is in the second column. The
original line is always carried along verbatim for output.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Record:
    position: int
    line: str
    sentence: str


def extract_sentence(line: str) -> str:
    """Return the sentence column of a line. Never raises."""
    fields = line.split("\t")
    # An empty first field counts as numeric, matching all() on an empty string.
    if len(fields) > 1 and all(ch.isdecimal() for ch in fields[0]):
        return fields[1]
    return fields[0]


def read_lines(path: Path | str) -> list[str]:
    """Read UTF-8 lines with their terminators stripped.

    Undecodable bytes are kept as surrogate escapes so they reach the output unchanged.
    """
    with Path(path).open("r", encoding="utf-8", errors="surrogateescape") as f:
        return [line[:-1] if line.endswith("\n") else line for line in f]


def make_records(lines: Iterable[str]) -> list[Record]:
    return [Record(position=i, line=line, sentence=extract_sentence(line)) for i, line in enumerate(lines)]


@dataclass(frozen=True)
class ParsedRecord:
    """A record paired with its logical form, or None when no form was produced.

    ``admitted`` tells whether a parse passed the tree filter and reached the generator.
    """

    record: Record
    logical_form: Any | None = None
    admitted: bool = False
