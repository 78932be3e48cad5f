from __future__ import annotations

import pytest

from schemes import CloneNotSupportedError, Component, FamilyKind, HierarchyOrder
from schemes import InformationComponent as IC


def link(parent: IC, child: IC) -> None:
    parent.add_child(child)
    child.add_parent(parent)


def test_new_component_is_root_and_leaf() -> None:
    c = Component()
    assert c.is_root()
    assert c.is_leaf()
    assert c.parents == ()
    assert c.children == ()
    assert c.has_valid_family()


def test_add_none_is_refused() -> None:
    c = IC("a")
    assert c.add_parent(None) is False
    assert c.add_child(None) is False
    assert c.is_root() and c.is_leaf()


def test_edge_mutators_are_one_sided() -> None:
    a, b = IC("a"), IC("b")
    assert a.add_child(b)
    assert a.is_parent_of(b)
    assert not b.is_child_of(a)
    assert b.is_root()
    assert not a.has_valid_family()
    assert b.has_valid_family()

    a.force_family_together()
    assert b.is_child_of(a)
    assert a.has_valid_family()
    assert b.has_valid_family()


def test_duplicates_allowed_and_removed_one_at_a_time() -> None:
    a, b = IC("a"), IC("b")
    a.add_child(b)
    a.add_child(b)
    assert a.children == (b, b)
    assert a.remove_child(b)
    assert a.children == (b,)
    assert a.remove_child(b)
    assert not a.remove_child(b)


def test_remove_prefers_identical_over_equal() -> None:
    a = IC("a")
    twin_1, twin_2 = IC("x"), IC("x")
    a.add_parent(twin_1)
    a.add_parent(twin_2)
    assert a.remove_parent(twin_2)
    assert a.parents[0] is twin_1

    # falls back to the first equal element
    assert a.remove_parent(IC("x"))
    assert a.parents == ()


def test_parent_and_child_checks_use_equality() -> None:
    a = IC("a")
    a.add_child(IC("x", "d"))
    assert a.is_parent_of(IC("x", "d"))
    assert not a.is_parent_of(IC("x", "other"))


def test_iterator_selects_family() -> None:
    a, b, c = IC("a"), IC("b"), IC("c")
    link(a, b)
    link(b, c)
    assert list(b.iterator(FamilyKind.PARENT)) == [a]
    assert list(b.iterator(FamilyKind.CHILD)) == [c]
    assert list(b.iterator(1)) == [a]
    assert list(b.iterator(2)) == [c]
    assert list(b.iter_parents()) == [a]
    assert list(b.iter_children()) == [c]


@pytest.mark.parametrize("kind", [0, 3, -1])
def test_iterator_rejects_unknown_kind(kind: int) -> None:
    with pytest.raises(IndexError, match="Illegal iterator type!"):
        IC("a").iterator(kind)


def test_ancestry_over_chain() -> None:
    a, b, c, d = IC("a"), IC("b"), IC("c"), IC("d")
    link(a, b)
    link(b, c)
    assert a.is_ancestor_of(c)
    assert c.is_descendant_of(a)
    assert not c.is_ancestor_of(a)
    assert not a.is_ancestor_of(a)
    assert not a.is_ancestor_of(d)
    assert not d.is_descendant_of(a)


def test_ancestry_is_by_identity() -> None:
    a, b = IC("a"), IC("b")
    link(a, b)
    assert not a.is_ancestor_of(IC("b"))


def test_cycles_terminate_and_are_invalid() -> None:
    a, b, c = IC("a"), IC("b"), IC("c")
    link(a, b)
    link(b, c)
    link(c, a)
    assert a.is_ancestor_of(a)
    assert a.is_descendant_of(a)
    assert not a.has_valid_family()
    assert not b.has_valid_family()


def test_compare_hierarchy() -> None:
    a, b, c, other = IC("a"), IC("b"), IC("c"), IC("other")
    link(a, b)
    link(b, c)
    assert a.compare_hierarchy(c) is HierarchyOrder.LESS
    assert c.compare_hierarchy(a) is HierarchyOrder.GREATER
    assert a.compare_hierarchy(other) is HierarchyOrder.INCOMPARABLE
    assert a.compare_hierarchy(a) is HierarchyOrder.INCOMPARABLE


def test_force_family_apart_detaches_from_neighbours_only() -> None:
    a, b, c = IC("a"), IC("b"), IC("c")
    link(a, b)
    link(b, c)
    b.force_family_apart()
    assert not a.is_parent_of(b)
    assert not c.is_child_of(b)
    # b still remembers its own edges
    assert b.parents == (a,)
    assert b.children == (c,)
    assert not b.has_valid_family()


def test_force_family_together_does_not_duplicate() -> None:
    a, b = IC("a"), IC("b")
    link(a, b)
    a.force_family_together()
    b.force_family_together()
    assert a.children == (b,)
    assert b.parents == (a,)


def test_plain_component_cannot_clone() -> None:
    with pytest.raises(CloneNotSupportedError):
        Component().clone()


def test_plain_components_compare_by_identity() -> None:
    a, b = Component(), Component()
    assert a == a
    assert a != b


def test_deep_equals_follows_both_directions() -> None:
    a, b, c = IC("a"), IC("b"), IC("c")
    link(a, b)
    link(b, c)
    a2, b2, c2 = IC("a"), IC("b"), IC("c")
    link(a2, b2)
    link(b2, c2)
    assert b.deep_equals(b2)

    c2.add_child(IC("extra"))
    assert not b.deep_equals(b2)
    assert not b.deep_equals(None)
    assert not b.deep_equals(a2)


def test_deep_equals_handles_cycles() -> None:
    a, b = IC("a"), IC("b")
    link(a, b)
    link(b, a)
    a2, b2 = IC("a"), IC("b")
    link(a2, b2)
    link(b2, a2)
    assert a.deep_equals(a2)


def test_deep_equals_on_long_chain() -> None:
    """Chains deeper than the recursion limit are compared without recursion."""
    def chain(length: int) -> IC:
        head = prev = IC("n0")
        for i in range(1, length):
            node = IC(f"n{i}")
            link(prev, node)
            prev = node
        return head

    assert chain(5000).deep_equals(chain(5000))
