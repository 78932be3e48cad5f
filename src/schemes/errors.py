from __future__ import annotations

from typing import Optional


class SchemeError(RuntimeError):
    """Base exception for scheme-related failures."""
    pass


class SchemeDependencyError(SchemeError):
    """
    A component refers to a parent that cannot be resolved.

    Raised while loading a scheme document whose members are not in
    hierarchical order (a child appears before one of its parents).
    """

    def __init__(self, parent_name: str) -> None:
        super().__init__(f"Parent {parent_name} missing!")
        self.parent_name = parent_name


class MalformedDocumentError(SchemeError):
    """Unexpected event, element or end of input in a scheme document."""

    def __init__(self, message: str, tag: Optional[str] = None) -> None:
        super().__init__(message)
        self.tag = tag


class CloneNotSupportedError(SchemeError):
    """The component type does not know how to clone itself."""
    pass


__all__ = [
    "SchemeError",
    "SchemeDependencyError",
    "MalformedDocumentError",
    "CloneNotSupportedError",
]
