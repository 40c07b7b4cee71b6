"""docmap - schema model and typed-object to generic-document conversion."""

from importlib.metadata import version, PackageNotFoundError

from docmap.models import (
    Cardinality,
    GenericDocument,
    JoinableType,
    LongIndexing,
    PropertyDescriptor,
    Schema,
    StringIndexing,
    StringTokenizer,
    ValueKind,
)

try:
    __version__ = version("docmap")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "Cardinality",
    "GenericDocument",
    "JoinableType",
    "LongIndexing",
    "PropertyDescriptor",
    "Schema",
    "StringIndexing",
    "StringTokenizer",
    "ValueKind",
]
