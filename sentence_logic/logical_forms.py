# sentence_logic/logical_forms.py
"""Logical forms and the adapter around the logical-form generator.

The generator is configured from the ``logical forms`` section of the step
configuration. A ``generator`` key names an external implementation as
``module:Class``; without it the built-in PredicateLogicGenerator is used.
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union

from sentence_logic.dependency import COPULA_LABEL, SUBJECT_LABEL, VERB_TAG_PREFIX, DependencyTree
from sentence_logic.errors import ConfigError

OBJECT_LABELS = ("dobj", "obj")
PREPOSITION_LABEL = "prep"
PREPOSITION_OBJECT_LABEL = "pobj"
CONJUNCT_LABEL = "conj"


@dataclass(frozen=True)
class Predicate:
    name: str
    args: tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.name}({', '.join(self.args)})"


@dataclass(frozen=True)
class Conjunction:
    parts: tuple[Predicate, ...]

    def __str__(self) -> str:
        return f"and({', '.join(str(p) for p in self.parts)})"


Logic = Union[Predicate, Conjunction]


class LogicalFormGenerator(Protocol):
    def get_logical_form(self, tree: DependencyTree) -> Any | None: ...


class PredicateLogicGenerator:
    """
    Small rule-based generator producing predicate-argument forms.

    "The cat sat." -> ``sat(cat)``; "The sky is blue." -> ``blue(sky)``;
    "The cat sat on the mat." -> ``and(sat(cat), sat_on(cat, mat))``.
    """

    VALID_PARAMS = ("use lemmas", "include prepositions", "max depth")

    def __init__(self, *, use_lemmas: bool = False, include_prepositions: bool = True, max_depth: int = 50) -> None:
        self.use_lemmas = use_lemmas
        self.include_prepositions = include_prepositions
        self.max_depth = max_depth

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> PredicateLogicGenerator:
        extras = sorted(set(params) - set(cls.VALID_PARAMS))
        if extras:
            raise ConfigError(f"Unexpected logical forms parameters: {extras}")
        max_depth = params.get("max depth", 50)
        if not isinstance(max_depth, int) or max_depth < 1:
            raise ConfigError(f"'max depth' must be a positive integer, got {max_depth!r}")
        return cls(
            use_lemmas=bool(params.get("use lemmas", False)),
            include_prepositions=bool(params.get("include prepositions", True)),
            max_depth=max_depth,
        )

    def _name(self, tree: DependencyTree) -> str:
        text = tree.token.lemma if self.use_lemmas and tree.token.lemma else tree.token.word
        return text.lower()

    def _predicates(self, tree: DependencyTree, subject: str | None, depth: int) -> list[Predicate]:
        if depth > self.max_depth:
            raise ValueError(f"Conjunct chain deeper than max depth {self.max_depth}")

        subj_tree = tree.get_child_with_label(SUBJECT_LABEL)
        if subj_tree is not None:
            subject = self._name(subj_tree)
        if subject is None:
            return []

        is_verb = tree.token.pos_tag.startswith(VERB_TAG_PREFIX)
        if not is_verb and tree.get_child_with_label(COPULA_LABEL) is None:
            return []

        name = self._name(tree)
        args = [subject]
        if is_verb:
            for label in OBJECT_LABELS:
                obj = tree.get_child_with_label(label)
                if obj is not None:
                    args.append(self._name(obj))
                    break

        out = [Predicate(name, tuple(args))]
        if self.include_prepositions:
            for prep in tree.get_children_with_label(PREPOSITION_LABEL):
                pobj = prep.get_child_with_label(PREPOSITION_OBJECT_LABEL)
                if pobj is not None:
                    out.append(Predicate(f"{name}_{self._name(prep)}", (subject, self._name(pobj))))

        for conj in tree.get_children_with_label(CONJUNCT_LABEL):
            out.extend(self._predicates(conj, subject, depth + 1))
        return out

    def get_logical_form(self, tree: DependencyTree) -> Logic | None:
        predicates = self._predicates(tree, None, 0)
        if not predicates:
            return None
        if len(predicates) == 1:
            return predicates[0]
        return Conjunction(tuple(predicates))


def load_generator(params: Mapping[str, Any] | None) -> LogicalFormGenerator:
    """Build the generator named by ``params['generator']``, forwarding the remaining keys."""
    remaining = dict(params or {})
    target = remaining.pop("generator", None)
    if target is None:
        return PredicateLogicGenerator.from_params(remaining)

    module_name, sep, class_name = str(target).partition(":")
    if not sep or not module_name or not class_name:
        raise ConfigError(f"'generator' must look like 'module:Class', got {target!r}")
    try:
        cls = getattr(importlib.import_module(module_name), class_name)
    except (ImportError, AttributeError) as exc:
        raise ConfigError(f"Cannot load logical form generator {target!r}: {exc}") from exc
    return cls(remaining)


def generate(generator: LogicalFormGenerator, tree: DependencyTree | None) -> Any | None:
    """Run the generator on an admissible tree. Generator exceptions propagate unchanged."""
    if tree is None:
        return None
    return generator.get_logical_form(tree)
