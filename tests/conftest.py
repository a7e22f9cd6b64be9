"""Shared fixtures: hand-built dependency trees and a scriptable fake parser."""

from __future__ import annotations

import threading

import pytest

from sentence_logic.dependency import DependencyTree, Token
from sentence_logic.parser import ParseResult


def node(word, tag, index=0, children=(), lemma=None):
    return DependencyTree(Token(word=word, lemma=lemma or word.lower(), pos_tag=tag, index=index), tuple(children))


# "The cat sat." -> sat(cat)
CAT_SAT = node(
    "sat",
    "VBD",
    2,
    [(node("cat", "NN", 1, [(node("The", "DT", 0), "det")]), "nsubj"), (node(".", ".", 3), "punct")],
    lemma="sit",
)

# "The sky is blue." -> blue(sky)
SKY_BLUE = node(
    "blue",
    "JJ",
    3,
    [(node("sky", "NN", 1, [(node("The", "DT", 0), "det")]), "nsubj"), (node("is", "VBZ", 2, lemma="be"), "cop")],
)

# "A dog." -> noun root without copula, rejected by the filter
A_DOG = node("dog", "NN", 1, [(node("A", "DT", 0), "det")])

# "Ran quickly." -> verb root without subject, rejected by the filter
RAN_QUICKLY = node("Ran", "VBD", 0, [(node("quickly", "RB", 1), "advmod")], lemma="run")


class FakeParser:
    """Returns canned trees; hangs on sentences in ``hang`` and raises on sentences in ``fail``."""

    def __init__(self, trees=None, *, hang=(), fail=(), release=None):
        self.trees = dict(trees or {})
        self.hang = set(hang)
        self.fail = set(fail)
        self.release = release or threading.Event()
        self.calls = []

    def parse_sentence(self, text):
        self.calls.append(text)
        if text in self.hang:
            self.release.wait()
        if text in self.fail:
            raise RuntimeError(f"parser exploded on {text!r}")
        return ParseResult(dependency_tree=self.trees.get(text))


class CountingGenerator:
    """Wraps another generator and counts how often it is called."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    def get_logical_form(self, tree):
        self.calls += 1
        return self.inner.get_logical_form(tree)


@pytest.fixture
def release():
    """Event that unblocks hung fake work; set at teardown so abandoned threads finish."""
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture
def trees():
    return {
        "The cat sat.": CAT_SAT,
        "The sky is blue.": SKY_BLUE,
        "A dog.": A_DOG,
        "Ran quickly.": RAN_QUICKLY,
    }
