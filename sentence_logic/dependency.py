# sentence_logic/dependency.py
"""Dependency trees and the admissibility filter applied before logical-form generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

VERB_TAG_PREFIX = "V"
SUBJECT_LABEL = "nsubj"
COPULA_LABEL = "cop"


@dataclass(frozen=True)
class Token:
    word: str
    lemma: str
    pos_tag: str
    index: int = 0


@dataclass(frozen=True)
class DependencyTree:
    """A token with labeled edges to its dependents."""

    token: Token
    children: tuple[tuple[DependencyTree, str], ...] = field(default_factory=tuple)

    def get_child_with_label(self, label: str) -> DependencyTree | None:
        for child, child_label in self.children:
            if child_label == label:
                return child
        return None

    def get_children_with_label(self, label: str) -> list[DependencyTree]:
        return [child for child, child_label in self.children if child_label == label]

    def words(self) -> list[str]:
        """Words of the subtree in sentence order."""
        nodes: list[Token] = []
        stack: list[DependencyTree] = [self]
        while stack:
            node = stack.pop()
            nodes.append(node.token)
            stack.extend(child for child, _ in node.children)
        return [t.word for t in sorted(nodes, key=lambda t: t.index)]

    def render(self, indent: int = 0, label: str = "ROOT") -> str:
        """Multi-line rendering for diagnostics."""
        pad = "  " * indent
        lines = [f"{pad}{label} -> {self.token.word} ({self.token.pos_tag})"]
        for child, child_label in self.children:
            lines.append(child.render(indent + 1, child_label))
        return "\n".join(lines)


def is_admissible(tree: DependencyTree) -> bool:
    """
    Decide whether a tree can be handed to the logical-form generator.

    A verb-rooted tree needs an overt nominal subject; any other root needs a
    copula (e.g. "The sky is blue", rooted at "blue").
    """
    if tree.token.pos_tag.startswith(VERB_TAG_PREFIX):
        return tree.get_child_with_label(SUBJECT_LABEL) is not None
    return tree.get_child_with_label(COPULA_LABEL) is not None


def tree_from_spacy(root: Any) -> DependencyTree:
    """Convert a spaCy token (usually ``sent.root``) into a DependencyTree."""
    token = Token(word=root.text, lemma=root.lemma_, pos_tag=root.tag_, index=root.i)
    children = tuple((tree_from_spacy(child), child.dep_) for child in root.children)
    return DependencyTree(token=token, children=children)
