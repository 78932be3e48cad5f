from __future__ import annotations

import enum
from collections import deque
from typing import Iterator, List, Optional, Sequence, Set, Tuple, Union

from ..errors import CloneNotSupportedError


class FamilyKind(enum.IntEnum):
    """Direction of a component's edge list."""

    PARENT = 1
    CHILD = 2


class HierarchyOrder(enum.Enum):
    """
    Result of comparing two components by ancestry.

    This is a partial order: two components that are neither ancestor nor
    descendant of each other are INCOMPARABLE, which is not the same as
    being equal.
    """

    LESS = -1
    INCOMPARABLE = 0
    GREATER = 1


def _remove_first(items: List[Component], item: Component) -> bool:
    """Remove the first identical occurrence of item, else the first equal one."""
    for pos, candidate in enumerate(items):
        if candidate is item:
            del items[pos]
            return True
    for pos, candidate in enumerate(items):
        if candidate == item:
            del items[pos]
            return True
    return False


def family_matches(
    own: Sequence[Component],
    other: Sequence[Component],
    kind: FamilyKind,
    checked: Optional[Set[int]] = None,
) -> bool:
    """
    Structural comparison of two edge lists, following `kind` edges.

    Both lists must have the same length. Every not yet checked component
    of `own` needs an equal counterpart in `other`; the first counterpart
    found is then compared the same way, depth first. `checked` holds the
    ids of components of `own`'s graph that were already matched, which
    cuts diamonds and cycles.

    The walk keeps its own stack of (iterator, counterpart list) frames so
    that deep chains do not hit the interpreter's recursion limit.
    """
    if checked is None:
        checked = set()
    if len(own) != len(other):
        return False

    stack: List[Tuple[Iterator[Component], Sequence[Component]]] = [(iter(own), other)]
    while stack:
        own_it, other_family = stack[-1]
        descended = False
        for own_comp in own_it:
            if id(own_comp) in checked:
                continue
            match = next((c for c in other_family if own_comp == c), None)
            if match is None:
                return False
            checked.add(id(own_comp))
            own_next = own_comp._family(kind)
            other_next = match._family(kind)
            if len(own_next) != len(other_next):
                return False
            stack.append((iter(own_next), other_next))
            descended = True
            break
        if not descended:
            stack.pop()
    return True


class Component:
    """
    Node of a scheme: two ordered edge lists, parents and children.

    Edge mutators only ever touch the receiver. Mirroring the edge on the
    other end is the caller's business (or `force_family_together`'s).
    Duplicates are allowed, None is not.

    Plain components carry no payload, so they compare by identity.
    """

    __slots__ = ("_parents", "_children")

    def __init__(self) -> None:
        self._parents: List[Component] = []
        self._children: List[Component] = []

    # ------------------------------------------------------------------ #
    # Edge accessors
    # ------------------------------------------------------------------ #
    @property
    def parents(self) -> Tuple[Component, ...]:
        return tuple(self._parents)

    @property
    def children(self) -> Tuple[Component, ...]:
        return tuple(self._children)

    def _family(self, kind: FamilyKind) -> List[Component]:
        if kind is FamilyKind.PARENT:
            return self._parents
        return self._children

    def iter_parents(self) -> Iterator[Component]:
        return iter(self._parents)

    def iter_children(self) -> Iterator[Component]:
        return iter(self._children)

    def iterator(self, kind: Union[FamilyKind, int]) -> Iterator[Component]:
        """
        Iterate over the parents (PARENT / 1) or children (CHILD / 2).

        Raises
        ------
        IndexError
            For any other kind.
        """
        if kind == FamilyKind.PARENT:
            return self.iter_parents()
        if kind == FamilyKind.CHILD:
            return self.iter_children()
        raise IndexError("Illegal iterator type!")

    # ------------------------------------------------------------------ #
    # Relations
    # ------------------------------------------------------------------ #
    def is_parent_of(self, component: Component) -> bool:
        return component in self._children

    def is_child_of(self, component: Component) -> bool:
        return component in self._parents

    def _reaches(self, target: Component, kind: FamilyKind) -> bool:
        to_check = deque(self._family(kind))
        checked: Set[int] = set()
        while to_check:
            current = to_check.popleft()
            if current is target:
                return True
            if id(current) in checked:
                continue
            checked.add(id(current))
            to_check.extend(
                c for c in current._family(kind) if id(c) not in checked
            )
        return False

    def is_ancestor_of(self, component: Component) -> bool:
        """True if `component` can be reached by following children."""
        return self._reaches(component, FamilyKind.CHILD)

    def is_descendant_of(self, component: Component) -> bool:
        """True if `component` can be reached by following parents."""
        return self._reaches(component, FamilyKind.PARENT)

    def is_root(self) -> bool:
        return not self._parents

    def is_leaf(self) -> bool:
        return not self._children

    def has_valid_family(self) -> bool:
        """
        No directed cycle runs through this component and every edge is
        mirrored on the other end.
        """
        if self.is_ancestor_of(self) or self.is_descendant_of(self):
            return False
        if any(not p.is_parent_of(self) for p in self._parents):
            return False
        return all(c.is_child_of(self) for c in self._children)

    def compare_hierarchy(self, other: Component) -> HierarchyOrder:
        """
        LESS if self is an ancestor of other, GREATER if it is a
        descendant, INCOMPARABLE otherwise.

        Antisymmetry only holds for valid families; in a cycle the
        ancestor test wins.
        """
        if self.is_ancestor_of(other) or other.is_descendant_of(self):
            return HierarchyOrder.LESS
        if self.is_descendant_of(other) or other.is_ancestor_of(self):
            return HierarchyOrder.GREATER
        return HierarchyOrder.INCOMPARABLE

    # ------------------------------------------------------------------ #
    # Mutators (one-sided)
    # ------------------------------------------------------------------ #
    def add_parent(self, component: Optional[Component]) -> bool:
        if component is None:
            return False
        self._parents.append(component)
        return True

    def add_child(self, component: Optional[Component]) -> bool:
        if component is None:
            return False
        self._children.append(component)
        return True

    def remove_parent(self, component: Component) -> bool:
        return _remove_first(self._parents, component)

    def remove_child(self, component: Component) -> bool:
        return _remove_first(self._children, component)

    def force_family_together(self) -> None:
        """Add the missing back edges on every parent and child."""
        for parent in self._parents:
            if not parent.is_parent_of(self):
                parent.add_child(self)
        for child in self._children:
            if not child.is_child_of(self):
                child.add_parent(self)

    def force_family_apart(self) -> None:
        """Remove this component from every parent and child referencing it."""
        for parent in self._parents:
            if parent.is_parent_of(self):
                parent.remove_child(self)
        for child in self._children:
            if child.is_child_of(self):
                child.remove_parent(self)

    # ------------------------------------------------------------------ #
    # Copying and comparison
    # ------------------------------------------------------------------ #
    def clone(self) -> Component:
        """
        Return a payload-only copy without any edges.

        Plain components have no payload to copy and refuse.
        """
        raise CloneNotSupportedError(f"{type(self).__name__} does not support clone()")

    def deep_equals(self, other: Optional[Component]) -> bool:
        """
        Equal to `other`, and so are the graphs hanging below and above
        both components.
        """
        if other is None or self != other:
            return False
        if not family_matches(self._children, other._children, FamilyKind.CHILD):
            return False
        return family_matches(self._parents, other._parents, FamilyKind.PARENT)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(parents={len(self._parents)}, "
            f"children={len(self._children)})"
        )
