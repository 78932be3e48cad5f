from __future__ import annotations

from schemes import InformationComponent as IC


class Tagged(IC):
    __slots__ = ()


def test_defaults_are_empty_strings() -> None:
    c = IC()
    assert c.name == ""
    assert c.description == ""
    assert str(c) == ""


def test_equality_by_name_and_description() -> None:
    assert IC("a", "d") == IC("a", "d")
    assert IC("a", "d") != IC("a", "e")
    assert IC("a", "d") != IC("b", "d")
    assert hash(IC("a", "d")) == hash(IC("a", "d"))


def test_none_differs_from_empty() -> None:
    assert IC(None, None) == IC(None, None)
    assert IC(None, "") != IC("", "")
    assert IC("", None) != IC("", "")


def test_equality_requires_same_type() -> None:
    assert IC("a") != Tagged("a")
    assert Tagged("a") == Tagged("a")
    assert IC("a") != "a"
    assert IC("a") is not None


def test_equality_ignores_edges() -> None:
    a, b = IC("a"), IC("a")
    a.add_child(IC("child"))
    assert a == b


def test_clone_copies_payload_only() -> None:
    parent, c, child = IC("p"), IC("c", "desc"), IC("k")
    c.add_parent(parent)
    c.add_child(child)
    copy = c.clone()
    assert copy == c
    assert copy is not c
    assert copy.is_root() and copy.is_leaf()


def test_clone_keeps_subclass() -> None:
    assert type(Tagged("t").clone()) is Tagged


def test_str_is_name() -> None:
    assert str(IC("The game", "whatever")) == "The game"
    assert "The game" in repr(IC("The game"))


def test_descendants_of_leaf_is_empty() -> None:
    assert IC("alone").descendants_to_string() == ""


def test_descendants_tree() -> None:
    root, a, b, a1 = IC("root"), IC("a"), IC("b"), IC("a1")
    root.add_child(a)
    root.add_child(b)
    a.add_child(a1)
    for c in (root, a):
        c.force_family_together()

    assert root.descendants_to_string() == "├a\n └a1\n└b\n"


def test_shared_descendant_is_expanded_once() -> None:
    root, left, right, shared, deep = IC("root"), IC("left"), IC("right"), IC("shared"), IC("deep")
    root.add_child(left)
    root.add_child(right)
    left.add_child(shared)
    right.add_child(shared)
    right.add_child(left)
    shared.add_child(deep)

    # "left" belongs to level 0 and is expanded there; the second visit
    # below "right" is cut off
    assert root.descendants_to_string() == (
        "├left\n"
        " └shared\n"
        "  └deep\n"
        "└right\n"
        " ├shared → ...\n"
        " └left → ...\n"
    )


def test_cycle_does_not_loop_forever() -> None:
    a, b = IC("a"), IC("b")
    a.add_child(b)
    b.add_child(a)
    text = a.descendants_to_string()
    assert text.startswith("└b\n")
    assert text.count("\n") <= 3
