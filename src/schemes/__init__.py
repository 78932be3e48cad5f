try:
    from ._version import version as __version__  # populated by setuptools-scm
except ModuleNotFoundError:
    __version__ = "0.0.0"

from .errors import (
    CloneNotSupportedError,
    MalformedDocumentError,
    SchemeDependencyError,
    SchemeError,
)
from .graph import (
    Component,
    FamilyKind,
    HierarchyOrder,
    InformationComponent,
    InformationScheme,
    Scheme,
)

__all__ = [
    "__version__",
    "CloneNotSupportedError",
    "MalformedDocumentError",
    "SchemeDependencyError",
    "SchemeError",
    "Component",
    "FamilyKind",
    "HierarchyOrder",
    "InformationComponent",
    "InformationScheme",
    "Scheme",
]
