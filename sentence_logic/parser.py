# sentence_logic/parser.py
"""Syntactic parser adapter.

The dependency parser is an external collaborator. The spaCy-backed parser is
shared by every worker in the process: it is built lazily on first use and only
read afterwards.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Protocol

import spacy

from sentence_logic.dependency import DependencyTree, is_admissible, tree_from_spacy
from sentence_logic.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SPACY_MODEL = "en_core_web_sm"


@dataclass(frozen=True)
class ParseResult:
    dependency_tree: DependencyTree | None = None


class DependencyParser(Protocol):
    def parse_sentence(self, text: str) -> ParseResult: ...


class SpacyDependencyParser:
    """Dependency parser backed by a spaCy pipeline."""

    def __init__(self, model: str = DEFAULT_SPACY_MODEL) -> None:
        self.model = model
        self._nlp: Any = None
        self._lock = threading.Lock()

    def _pipeline(self) -> Any:
        if self._nlp is None:
            with self._lock:
                if self._nlp is None:
                    logger.info("Loading spaCy: %s", self.model)
                    try:
                        self._nlp = spacy.load(self.model)
                    except OSError as exc:
                        raise ConfigError(f"Cannot load spaCy model {self.model!r}: {exc}") from exc
        return self._nlp

    def load(self) -> None:
        """Load the spaCy pipeline now instead of on the first sentence."""
        self._pipeline()

    def parse_sentence(self, text: str) -> ParseResult:
        if not text.strip():
            return ParseResult()
        doc = self._pipeline()(text)
        sents = list(doc.sents)
        if not sents:
            return ParseResult()
        return ParseResult(dependency_tree=tree_from_spacy(sents[0].root))


_PARSERS: dict[str, SpacyDependencyParser] = {}
_PARSERS_LOCK = threading.Lock()


def get_parser(model: str = DEFAULT_SPACY_MODEL) -> SpacyDependencyParser:
    """Return the process-wide parser for ``model``, creating it on first call."""
    with _PARSERS_LOCK:
        parser = _PARSERS.get(model)
        if parser is None:
            parser = SpacyDependencyParser(model)
            _PARSERS[model] = parser
        return parser


def parse(parser: DependencyParser, sentence: str) -> DependencyTree | None:
    """Parse ``sentence`` and keep the tree only if it passes the admissibility filter."""
    tree = parser.parse_sentence(sentence).dependency_tree
    if tree is None or not is_admissible(tree):
        return None
    return tree
