from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING, Dict, List, Tuple

import numpy as np
import graphblas as gb
from graphblas import Matrix

from .component import Component

if TYPE_CHECKING:
    from .scheme import Scheme

logger = logging.getLogger(__name__)


def index_components(scheme: Scheme) -> Tuple[List[Component], Dict[int, int]]:
    """
    Number every component connected to the members of `scheme`.

    Members come first, in order of their first occurrence, followed by
    associated components in breadth-first discovery order (parents and
    children alike). Returns the components and a mapping id -> index.
    """
    components: List[Component] = []
    index: Dict[int, int] = {}
    for member in scheme:
        if id(member) not in index:
            index[id(member)] = len(components)
            components.append(member)

    pos = 0
    while pos < len(components):
        current = components[pos]
        pos += 1
        for neighbour in (*current.iter_parents(), *current.iter_children()):
            if id(neighbour) not in index:
                index[id(neighbour)] = len(components)
                components.append(neighbour)
    return components, index


def adjacency_matrix(scheme: Scheme) -> Tuple[Matrix, List[Component]]:
    """
    Boolean adjacency matrix (parent -> child) over `index_components`.

    An edge is present if either end records it, so one-sided links count.
    Parallel edges collapse into a single True entry.
    """
    components, index = index_components(scheme)
    size = len(components)

    sources: List[int] = []
    targets: List[int] = []
    for i, component in enumerate(components):
        for child in component.iter_children():
            sources.append(i)
            targets.append(index[id(child)])
        for parent in component.iter_parents():
            sources.append(index[id(parent)])
            targets.append(i)

    if not sources:
        return Matrix(gb.dtypes.BOOL, nrows=size, ncols=size), components

    mat = gb.Matrix.from_coo(
        np.asarray(sources, dtype=np.int64),
        np.asarray(targets, dtype=np.int64),
        np.ones(len(sources), dtype=bool),
        dtype=gb.dtypes.BOOL,
        nrows=size,
        ncols=size,
        dup_op=gb.binary.lor,
    )
    return mat, components


def reachability_matrix(scheme: Scheme) -> Tuple[Matrix, List[Component]]:
    """
    Transitive closure of `adjacency_matrix`: entry (i, j) is True when
    component j can be reached from component i over one or more edges.

    Computed by repeated squaring with the lor_land semiring until the
    number of entries stops growing.
    """
    adjacency, components = adjacency_matrix(scheme)
    closure = adjacency.dup()
    while True:
        paths = closure.mxm(closure, gb.semiring.lor_land).new()
        grown = closure.ewise_add(paths, gb.binary.lor).new()
        if grown.nvals == closure.nvals:
            return closure, components
        closure = grown


def hierarchical_order(scheme: Scheme) -> List[int]:
    """
    Member positions of `scheme` reordered so that ancestors precede
    their descendants.

    Position a must come before position b when a's component reaches
    b's and not the other way round; mutually reachable components (a
    cycle) are left unconstrained. Among the positions whose predecessors
    are all placed, the lowest original position goes first, so an
    already ordered scheme keeps its order.
    """
    size = len(scheme)
    if size < 2:
        return list(range(size))

    closure, components = reachability_matrix(scheme)
    node_count = len(components)
    rows, cols, _ = closure.to_coo()
    reach = np.zeros((node_count, node_count), dtype=bool)
    reach[rows, cols] = True

    index = {id(c): i for i, c in enumerate(components)}
    nodes = np.fromiter((index[id(m)] for m in scheme), dtype=np.int64, count=size)
    among = reach[np.ix_(nodes, nodes)]
    before = among & ~among.T
    np.fill_diagonal(before, False)

    in_degree = before.sum(axis=0)
    ready = [int(pos) for pos in np.flatnonzero(in_degree == 0)]
    heapq.heapify(ready)
    order: List[int] = []
    while ready:
        pos = heapq.heappop(ready)
        order.append(pos)
        for succ in np.flatnonzero(before[pos]):
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                heapq.heappush(ready, int(succ))

    if len(order) < size:
        # unreachable for a strict partial order; keep whatever is left stable
        placed = set(order)
        order.extend(pos for pos in range(size) if pos not in placed)

    logger.debug(
        "Hierarchical order over %d members (%d components indexed)", size, node_count
    )
    return order
