"""
schemes.graph
=============

In-memory scheme model.

Public API:

- Component             : graph node with ordered parent and child edge lists.
- InformationComponent  : component carrying a name and a description.
- Scheme                : ordered components + root/leaf caches, deep equality/copy.
- InformationScheme     : scheme of information components; search, text tree,
                          XML save/load and DOT export.
- FamilyKind            : PARENT / CHILD edge direction.
- HierarchyOrder        : result of the partial ancestor/descendant comparison.
- adjacency_matrix      : python-graphblas adjacency matrix over a scheme.
- reachability_matrix   : transitive closure of the adjacency matrix.

All other modules in this package are considered internal implementation details.
"""

from __future__ import annotations

from .component import Component, FamilyKind, HierarchyOrder
from .information import InformationComponent
from .scheme import Scheme
from .information_scheme import InformationScheme
from .matrix import adjacency_matrix, reachability_matrix

__all__ = [
    "Component",
    "FamilyKind",
    "HierarchyOrder",
    "InformationComponent",
    "Scheme",
    "InformationScheme",
    "adjacency_matrix",
    "reachability_matrix",
]
