from enum import StrEnum


class ValueKind(StrEnum):
    STRING = "string"
    LONG = "long"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    BYTES = "bytes"
    DOCUMENT = "document"


class Cardinality(StrEnum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    REPEATED = "repeated"


class StringTokenizer(StrEnum):
    NONE = "none"
    PLAIN = "plain"
    VERBATIM = "verbatim"


class StringIndexing(StrEnum):
    NONE = "none"
    EXACT_TERMS = "exact_terms"
    PREFIXES = "prefixes"


class JoinableType(StrEnum):
    NONE = "none"
    QUALIFIED_ID = "qualified_id"


class LongIndexing(StrEnum):
    NONE = "none"
    RANGE = "range"
