from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, List, Optional, TextIO

from ..config import DotSettings, get_settings

if TYPE_CHECKING:
    from ..graph.information_scheme import InformationScheme

logger = logging.getLogger(__name__)

DOT_QUOTES = '"'
DOT_CHILDREN_START = " -> {"
DOT_CHILDREN_SEP = "; "
DOT_CHILDREN_END = "}"
DOT_END = "}"


def _quoted(component: object) -> str:
    return DOT_QUOTES + str(getattr(component, "name", component)) + DOT_QUOTES


def write_dot(
    scheme: InformationScheme,
    stream: TextIO,
    *,
    settings: Optional[DotSettings] = None,
) -> None:
    """
    Export `scheme` as a Graphviz digraph, one line per member in scheme
    order::

        digraph G {
          "Literature" -> { "Authors"; "Light Novels" }
          "DN (LN)"
        }

    Children outside of the scheme are listed as edge targets too.
    """
    if settings is None:
        settings = get_settings().dot

    eol = settings.line_ending
    stream.write(f"digraph {settings.graph_name} {{{eol}")
    for component in scheme:
        line: List[str] = [settings.indent, _quoted(component)]
        children = component.children
        if children:
            line.append(DOT_CHILDREN_START)
            line.append(" ")
            line.append(DOT_CHILDREN_SEP.join(_quoted(c) for c in children))
            line.append(" ")
            line.append(DOT_CHILDREN_END)
        line.append(eol)
        stream.write("".join(line))
    stream.write(DOT_END)
    logger.info("Wrote DOT graph with %d nodes", len(scheme))


def dumps_dot(scheme: InformationScheme, *, settings: Optional[DotSettings] = None) -> str:
    buffer = io.StringIO(newline="")
    write_dot(scheme, buffer, settings=settings)
    return buffer.getvalue()
