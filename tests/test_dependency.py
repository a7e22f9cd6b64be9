"""Tests for dependency trees and the admissibility filter"""

from conftest import A_DOG, CAT_SAT, RAN_QUICKLY, SKY_BLUE, node

from sentence_logic.dependency import is_admissible


def test_verb_root_with_subject_is_admissible():
    """VBD root with an nsubj child passes"""
    assert is_admissible(CAT_SAT)


def test_verb_root_without_subject_is_rejected():
    """The same verb root without nsubj fails"""
    tree = node("sat", "VBD", 2, [(node(".", ".", 3), "punct")])
    assert not is_admissible(tree)
    assert not is_admissible(RAN_QUICKLY)


def test_noun_root_with_copula_is_admissible():
    """NN root with a cop child passes"""
    tree = node("cat", "NN", 3, [(node("Tom", "NNP", 0), "nsubj"), (node("is", "VBZ", 1), "cop")])
    assert is_admissible(tree)
    assert is_admissible(SKY_BLUE)


def test_noun_root_without_copula_is_rejected():
    """NN root without cop fails, even with a subject"""
    assert not is_admissible(A_DOG)
    assert not is_admissible(node("cat", "NN", 1, [(node("Tom", "NNP", 0), "nsubj")]))


def test_verb_root_ignores_copula():
    """A verb root is judged on nsubj only"""
    tree = node("is", "VBZ", 1, [(node("be", "VB", 0), "cop")])
    assert not is_admissible(tree)


def test_only_direct_children_count():
    """Grandchildren labeled nsubj do not make the root admissible"""
    tree = node("said", "VBD", 1, [(node("left", "VBD", 3, [(node("he", "PRP", 2), "nsubj")]), "ccomp")])
    assert not is_admissible(tree)


def test_child_lookup_and_words():
    """Child lookup by label and word order of a subtree"""
    subject = CAT_SAT.get_child_with_label("nsubj")
    assert subject is not None
    assert subject.token.word == "cat"
    assert CAT_SAT.get_child_with_label("dobj") is None
    assert CAT_SAT.words() == ["The", "cat", "sat", "."]


def test_render_lists_every_node():
    """Diagnostic rendering shows labels, words and tags"""
    text = CAT_SAT.render()
    assert text.splitlines()[0] == "ROOT -> sat (VBD)"
    assert "nsubj -> cat (NN)" in text
    assert "det -> The (DT)" in text
