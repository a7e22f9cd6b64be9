"""Tests for the syntactic parser adapter"""

import pytest
import spacy
from conftest import A_DOG, CAT_SAT, FakeParser

from sentence_logic.errors import ConfigError
from sentence_logic.parser import DEFAULT_SPACY_MODEL, SpacyDependencyParser, get_parser, parse

HAS_SPACY_MODEL = spacy.util.is_package(DEFAULT_SPACY_MODEL)

requires_model = pytest.mark.skipif(not HAS_SPACY_MODEL, reason=f"spaCy model {DEFAULT_SPACY_MODEL} not installed")


def test_parse_keeps_admissible_tree():
    parser = FakeParser({"The cat sat.": CAT_SAT})
    assert parse(parser, "The cat sat.") is CAT_SAT


def test_parse_drops_rejected_tree():
    """A tree failing the filter is treated as no parse"""
    assert parse(FakeParser({"A dog.": A_DOG}), "A dog.") is None


def test_parse_without_tree():
    assert parse(FakeParser({}), "anything") is None


def test_parse_propagates_parser_errors():
    """Parser faults are left for the bounded executor"""
    with pytest.raises(RuntimeError):
        parse(FakeParser({}, fail={"x"}), "x")


def test_get_parser_is_a_singleton():
    """One shared parser per model name, built without loading the model"""
    first = get_parser("some_model_name")
    assert get_parser("some_model_name") is first
    assert get_parser("other_model_name") is not first


def test_missing_model_is_a_config_error():
    parser = SpacyDependencyParser("definitely_not_a_spacy_model")
    with pytest.raises(ConfigError, match="definitely_not_a_spacy_model"):
        parser.load()


@pytest.mark.slow
@requires_model
def test_spacy_parse_verb_sentence():
    """spaCy gives a VBD root with an nsubj child for a simple clause"""
    tree = get_parser().parse_sentence("The cat sat on the mat.").dependency_tree

    assert tree is not None
    assert tree.token.word == "sat"
    assert tree.token.pos_tag == "VBD"
    assert tree.get_child_with_label("nsubj").token.word == "cat"
    assert parse(get_parser(), "The cat sat on the mat.") is not None


@pytest.mark.slow
@requires_model
def test_spacy_parse_empty_text():
    assert get_parser().parse_sentence("").dependency_tree is None
