from __future__ import annotations

import logging
from typing import (
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    TypeVar,
    Union,
    overload,
)

from .component import Component, FamilyKind, family_matches

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Component)


def _index_of(items: List[E], item: object) -> int:
    """Position of the first element that is or equals item, -1 if absent."""
    for pos, candidate in enumerate(items):
        if candidate is item or candidate == item:
            return pos
    return -1


def _discard(cache: List[E], item: E) -> None:
    for pos, candidate in enumerate(cache):
        if candidate is item:
            del cache[pos]
            return


class Scheme(Sequence[E]):
    """
    Ordered collection of components plus root and leaf caches.

    Structure:
      - members: components in insertion order; the same component may
        appear more than once.
      - roots:   members that had no parents when they were cached.
      - leaves:  members that had no children when they were cached.

    Both caches keep insertion order and follow every add/remove/clear.
    Edges edited on members after insertion are not tracked; call
    `validate_roots_and_leaves` to rebuild the caches.

    Members are shared: a component can sit in several schemes and may
    link to components outside of this one (associated components).

    The read-only sequence protocol is supported; mutation goes through
    the methods below, which report success as a bool instead of raising
    for ordinary misses.
    """

    def __init__(self, components: Optional[Iterable[E]] = None) -> None:
        self._members: List[E] = []
        self._roots: List[E] = []
        self._leaves: List[E] = []
        if components is not None:
            self._members.extend(c for c in components if c is not None)
            self.validate_roots_and_leaves()

    # ------------------------------------------------------------------ #
    # Cache maintenance
    # ------------------------------------------------------------------ #
    def _cache(self, component: E) -> None:
        if component.is_root():
            self._roots.append(component)
        if component.is_leaf():
            self._leaves.append(component)

    def _uncache(self, component: E) -> None:
        _discard(self._roots, component)
        _discard(self._leaves, component)

    def validate_roots_and_leaves(self) -> None:
        """Rebuild both caches from the current members and their edges."""
        self._roots.clear()
        self._leaves.clear()
        for component in self._members:
            self._cache(component)

    # ------------------------------------------------------------------ #
    # Sequence protocol
    # ------------------------------------------------------------------ #
    @overload
    def __getitem__(self, index: int) -> E: ...

    @overload
    def __getitem__(self, index: slice) -> List[E]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[E, List[E]]:
        return self._members[index]

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[E]:
        return iter(self._members)

    def __contains__(self, component: object) -> bool:
        return _index_of(self._members, component) >= 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scheme):
            return NotImplemented
        return self._members == other._members

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------ #
    # Roots and leaves
    # ------------------------------------------------------------------ #
    def get_roots(self) -> List[E]:
        return list(self._roots)

    def get_root(self, index: int) -> E:
        return self._roots[index]

    def get_leaves(self) -> List[E]:
        return list(self._leaves)

    def get_leaf(self, index: int) -> E:
        return self._leaves[index]

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    def contains_ancestor_of(self, component: Component) -> bool:
        return any(m.is_ancestor_of(component) for m in self._members)

    def contains_descendant_of(self, component: Component) -> bool:
        return any(m.is_descendant_of(component) for m in self._members)

    def contains(
        self,
        component: Component,
        include_ancestors: bool = False,
        include_descendants: bool = False,
    ) -> bool:
        """
        Membership test, optionally widened to members that are ancestors
        or descendants of `component`.
        """
        return (
            component in self
            or (include_ancestors and self.contains_ancestor_of(component))
            or (include_descendants and self.contains_descendant_of(component))
        )

    def all_families_valid(self) -> bool:
        return all(m.has_valid_family() for m in self._members)

    # ------------------------------------------------------------------ #
    # Mutators
    # ------------------------------------------------------------------ #
    def add(self, component: Optional[E]) -> bool:
        if component is None:
            return False
        self._members.append(component)
        self._cache(component)
        logger.debug("Added %r to scheme (size=%d)", component, len(self._members))
        return True

    def _check_insert_index(self, index: int) -> None:
        if not 0 <= index <= len(self._members):
            raise IndexError(f"Index {index} out of range for scheme of size {len(self._members)}")

    def add_at(self, index: int, component: Optional[E]) -> bool:
        """
        Insert `component` before position `index`.

        Raises
        ------
        IndexError
            If `index` is not within 0..len(self).
        """
        self._check_insert_index(index)
        if component is None:
            return False
        self._members.insert(index, component)
        self._cache(component)
        return True

    def add_all(self, components: Iterable[Optional[E]]) -> bool:
        changed = False
        for component in components:
            changed = self.add(component) or changed
        return changed

    def add_all_at(self, index: int, components: Iterable[Optional[E]]) -> bool:
        """Insert all components at `index`, keeping their order."""
        self._check_insert_index(index)
        batch = [c for c in components if c is not None]
        if not batch:
            return False
        self._members[index:index] = batch
        for component in batch:
            self._cache(component)
        return True

    def set(self, index: int, component: E) -> E:
        """
        Replace the member at `index` and return the previous one.

        The replacement enters the caches by the same rule as `add`.
        """
        if component is None:
            raise ValueError("A scheme cannot hold None")
        previous = self._members[index]
        self._members[index] = component
        self._uncache(previous)
        self._cache(component)
        return previous

    def remove(self, component: object) -> bool:
        pos = _index_of(self._members, component)
        if pos < 0:
            return False
        self.remove_at(pos)
        return True

    def remove_at(self, index: int) -> E:
        removed = self._members.pop(index)
        self._uncache(removed)
        logger.debug("Removed %r from scheme (size=%d)", removed, len(self._members))
        return removed

    def remove_all(self, components: Iterable[object]) -> bool:
        """Remove every member equal to one of `components`."""
        doomed = [c for c in components if isinstance(c, Component)]
        return self._remove_where(lambda m: _index_of(doomed, m) >= 0)

    def retain_all(self, components: Iterable[object]) -> bool:
        """Remove every member not equal to one of `components`."""
        kept = list(components)
        return self._remove_where(lambda m: _index_of(kept, m) < 0)

    def _remove_where(self, predicate: Callable[[E], bool]) -> bool:
        survivors: List[E] = []
        removed: List[E] = []
        for member in self._members:
            (removed if predicate(member) else survivors).append(member)
        if not removed:
            return False
        self._members = survivors
        for member in removed:
            self._uncache(member)
        return True

    def clear(self) -> None:
        self._members.clear()
        self._roots.clear()
        self._leaves.clear()

    # ------------------------------------------------------------------ #
    # Deep equality and deep copy
    # ------------------------------------------------------------------ #
    def deep_equals(self, other: Optional[Scheme]) -> bool:
        """
        Structural equality, as seen from the roots down and from the
        leaves up.

        Components (and closed cycles) reachable from neither the roots
        nor the leaves are not compared.
        """
        if other is None:
            return False
        if not family_matches(self._roots, other.get_roots(), FamilyKind.CHILD):
            return False
        return family_matches(self._leaves, other.get_leaves(), FamilyKind.PARENT)

    def deep_copy(self) -> Scheme:
        """
        Return a new scheme of fresh clones with the same edge structure.

        Every component connected to a member, whatever the direction, is
        cloned exactly once; clones of associated components stay outside
        of the new scheme. Edge lists are mapped element by element, so
        order, duplicates and one-sided edges survive.

        Raises
        ------
        CloneNotSupportedError
            If a reachable component cannot be cloned.
        """
        clones: Dict[int, Component] = {}
        originals: List[Component] = []

        for member in self._members:
            if id(member) in clones:
                continue
            pending = [member]
            clones[id(member)] = member.clone()
            originals.append(member)
            while pending:
                current = pending.pop()
                for neighbour in (*current._parents, *current._children):
                    if id(neighbour) not in clones:
                        clones[id(neighbour)] = neighbour.clone()
                        originals.append(neighbour)
                        pending.append(neighbour)

        for original in originals:
            clone = clones[id(original)]
            clone._parents = [clones[id(p)] for p in original._parents]
            clone._children = [clones[id(c)] for c in original._children]

        copy = type(self)()
        copy._members = [clones[id(m)] for m in self._members]  # type: ignore[misc]
        copy.validate_roots_and_leaves()
        logger.debug(
            "Deep copied scheme: %d members, %d components cloned",
            len(copy._members),
            len(originals),
        )
        return copy

    # ------------------------------------------------------------------ #
    # Ordering
    # ------------------------------------------------------------------ #
    def halfsort_hierarchically(self) -> None:
        """
        Reorder members so that every ancestor comes before its
        descendants.

        Members without ancestry between them keep their relative order
        where possible; the result is deterministic. Caches are rebuilt
        by re-adding the members in their new order.
        """
        from .matrix import hierarchical_order  # local import avoids cycles

        order = hierarchical_order(self)
        reordered = [self._members[pos] for pos in order]
        self.clear()
        for component in reordered:
            self.add(component)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #
    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={len(self._members)}, "
            f"roots={len(self._roots)}, "
            f"leaves={len(self._leaves)})"
        )
