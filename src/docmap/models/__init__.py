from docmap.models.binding import DocumentBinding
from docmap.models.document import GenericDocument
from docmap.models.enums import (
    Cardinality,
    JoinableType,
    LongIndexing,
    StringIndexing,
    StringTokenizer,
    ValueKind,
)
from docmap.models.property import PropertyDescriptor
from docmap.models.schema import Schema
from docmap.models.value import EmptyValue, ManyValues, PropertyValue, SingleValue

__all__ = [
    "Cardinality",
    "DocumentBinding",
    "EmptyValue",
    "GenericDocument",
    "JoinableType",
    "LongIndexing",
    "ManyValues",
    "PropertyDescriptor",
    "PropertyValue",
    "Schema",
    "SingleValue",
    "StringIndexing",
    "StringTokenizer",
    "ValueKind",
]
