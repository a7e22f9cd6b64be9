"""Tests for output line formatting"""

import pytest

from sentence_logic.errors import OutputFormatError
from sentence_logic.formatting import format_output_line, split_output_line
from sentence_logic.logical_forms import Predicate
from sentence_logic.records import ParsedRecord, Record


def _parsed(line, lf):
    return ParsedRecord(record=Record(position=0, line=line, sentence=line), logical_form=lf)


def test_format_with_logical_form():
    """Original line, a tab, then the logical form text"""
    line = format_output_line(_parsed("42\tThe cat sat.", Predicate("sat", ("cat",))))
    assert line == "42\tThe cat sat.\tsat(cat)"


def test_format_without_logical_form():
    """An absent form renders as an empty last column"""
    assert format_output_line(_parsed("The sky is blue.", None)) == "The sky is blue.\t"


@pytest.mark.parametrize("bad", ["a\tb", "a\nb", "a\rb"])
def test_format_rejects_schema_breaking_text(bad):
    """Tabs and line breaks in the form text are rejected, not written"""
    with pytest.raises(OutputFormatError):
        format_output_line(_parsed("line", bad))


@pytest.mark.parametrize(
    ("line", "lf"),
    [
        ("42\tThe cat sat.", "sat(cat)"),
        ("The sky is blue.", ""),
        ("a\tb\tc\t", "and(x(y), z(w))"),
        ("", ""),
    ],
)
def test_split_recovers_line_and_form(line, lf):
    """Splitting on the last tab recovers both parts exactly"""
    assert split_output_line(format_output_line(_parsed(line, lf or None))) == (line, lf)


def test_split_requires_a_tab():
    with pytest.raises(ValueError):
        split_output_line("no tab here")
