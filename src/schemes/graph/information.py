from __future__ import annotations

from typing import Any, Dict, List, Optional

from .component import Component


class InformationComponent(Component):
    """
    Component carrying a name and a description.

    Equality and hashing only look at the payload, never at the edges.
    None is a valid payload value and differs from the empty string.
    The name is what scheme documents use to refer to a component.
    """

    __slots__ = ("_name", "_description")

    def __init__(self, name: Optional[str] = "", description: Optional[str] = "") -> None:
        super().__init__()
        self._name = name
        self._description = description

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def description(self) -> Optional[str]:
        return self._description

    def clone(self) -> InformationComponent:
        return type(self)(self._name, self._description)

    def descendants_to_string(self) -> str:
        """
        Render everything below this component as an indented text tree.

        One line per visit, prefixed by one space per level and a branch
        glyph. A component that is expanded elsewhere in the tree is
        printed once more with " → ..." instead of its subtree.
        """
        lines: List[str] = []
        # id -> level the component is due to be expanded on, -1 once expanded
        marked: Dict[int, int] = {}
        for child in self._children:
            marked[id(child)] = 0

        frames: List[List[Any]] = [[self._children, 0]]
        level = 0
        while frames:
            family, pos = frames[level]
            if pos >= len(family):
                frames.pop()
                level -= 1
                continue
            frames[level][1] = pos + 1
            current = family[pos]
            glyph = "├" if pos + 1 < len(family) else "└"
            line = " " * level + glyph + _label(current)

            state = marked.get(id(current))
            if state is None:
                marked[id(current)] = level
            elif state != level:
                if not current.is_leaf():
                    line += " → ..."
            else:
                marked[id(current)] = -1
                if not current.is_leaf():
                    grandchildren = current._children
                    frames.append([grandchildren, 0])
                    level += 1
                    for grandchild in grandchildren:
                        marked.setdefault(id(grandchild), level)
            lines.append(line + "\n")
        return "".join(lines)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(other) is not type(self):
            return False
        return (
            self._name == other._name  # type: ignore[attr-defined]
            and self._description == other._description  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((self._name, self._description))

    def __str__(self) -> str:
        return str(self._name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, description={self._description!r})"


def _label(component: Component) -> str:
    if isinstance(component, InformationComponent):
        return str(component.name)
    return str(component)
