from __future__ import annotations

import logging
import os
import re
from collections import deque
from typing import Callable, List, Pattern, Set, TextIO, Type, Union

from ..config import get_settings
from .information import InformationComponent
from .scheme import Scheme

logger = logging.getLogger(__name__)

PathOrStream = Union[str, "os.PathLike[str]", TextIO]


class InformationScheme(Scheme[InformationComponent]):
    """
    Scheme of information components.

    Adds what the payload makes possible: lookup by name or regular
    expression, a printable tree, and persistence as an XML scheme
    document (load and save) or a Graphviz DOT graph (export only).

    `component_factory` builds the components of loaded documents from
    (name, description); override it to load into a subclass.
    """

    component_factory: Type[InformationComponent] = InformationComponent

    # ------------------------------------------------------------------ #
    # Search
    # ------------------------------------------------------------------ #
    def _search(
        self, matches: Callable[[str], bool], fifo: bool
    ) -> List[InformationComponent]:
        if fifo:
            return [c for c in self if c.name is not None and matches(c.name)]

        # breadth first from the roots, children only
        result: List[InformationComponent] = []
        to_check = deque(self._roots)
        checked: Set[int] = set()
        while to_check:
            current = to_check.popleft()
            if id(current) in checked:
                continue
            checked.add(id(current))
            name = getattr(current, "name", None)
            if name is not None and matches(name):
                result.append(current)
            to_check.extend(c for c in current.iter_children() if id(c) not in checked)
        return result

    def get_by_string(self, name: str, fifo: bool = True) -> List[InformationComponent]:
        """
        Components whose name equals `name`.

        fifo=True scans the members in scheme order. fifo=False walks
        breadth first from the roots along children, which also finds
        associated components but misses members unreachable from a root.
        """
        return self._search(lambda candidate: candidate == name, fifo)

    def get_by_regex(
        self, pattern: Union[str, Pattern[str]], fifo: bool = True
    ) -> List[InformationComponent]:
        """
        Components whose whole name matches `pattern`; same traversal
        rules as `get_by_string`. An invalid pattern matches nothing.
        """
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            logger.warning("Ignoring invalid name pattern %r: %s", pattern, exc)
            return []
        return self._search(lambda candidate: regex.fullmatch(candidate) is not None, fifo)

    # ------------------------------------------------------------------ #
    # Text rendering
    # ------------------------------------------------------------------ #
    def roots_to_string(self) -> str:
        """Each root's name on its own line followed by its descendant tree."""
        return "".join(
            f"{root.name}\n{root.descendants_to_string()}" for root in self._roots
        )

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #
    def save(self, target: PathOrStream) -> None:
        """
        Write this scheme as an XML scheme document to a path or an open
        text stream.

        Members are written in their current order. Call
        `halfsort_hierarchically` first unless the order is already
        hierarchical, otherwise loading the document fails.
        """
        from ..serialization.xml_document import write_xml

        if isinstance(target, (str, os.PathLike)):
            settings = get_settings().xml
            with open(target, "w", encoding=settings.encoding, newline="") as fh:
                write_xml(self, fh, settings=settings)
        else:
            write_xml(self, target)

    def load(self, source: PathOrStream) -> None:
        """
        Append the components of an XML scheme document read from a path
        or an open text stream.

        Raises
        ------
        SchemeDependencyError
            A parent is referenced before it has been loaded.
        MalformedDocumentError
            The input is not a scheme document.
        """
        from ..serialization.xml_document import read_xml

        if isinstance(source, (str, os.PathLike)):
            settings = get_settings().xml
            with open(source, "r", encoding=settings.encoding, newline="") as fh:
                read_xml(fh, self, settings=settings)
        else:
            read_xml(source, self)

    def write_dot(self, target: PathOrStream) -> None:
        """Export this scheme as a Graphviz digraph to a path or text stream."""
        from ..serialization.dot import write_dot

        if isinstance(target, (str, os.PathLike)):
            with open(target, "w", encoding="utf-8", newline="") as fh:
                write_dot(self, fh)
        else:
            write_dot(self, target)
