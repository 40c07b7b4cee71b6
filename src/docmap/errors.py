"""Exception hierarchy for schema construction, conversion and registration."""

from typing import Any


class DocmapError(Exception):
    """Base exception for all docmap errors."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
        }


class SchemaError(DocmapError):
    """Raised when a schema cannot be built from its descriptors."""


class InvalidSchemaError(SchemaError):
    def __init__(self, schema_name: str, reason: str) -> None:
        self.schema_name = schema_name
        super().__init__(f"Invalid schema '{schema_name}': {reason}", schema_name=schema_name)


class DuplicatePropertyError(SchemaError):
    def __init__(self, schema_name: str, property_name: str) -> None:
        self.schema_name = schema_name
        self.property_name = property_name
        super().__init__(
            f"Schema '{schema_name}' declares property '{property_name}' more than once",
            schema_name=schema_name,
            property_name=property_name,
        )


class InvalidFlagCombinationError(SchemaError):
    def __init__(self, schema_name: str, property_name: str, reason: str) -> None:
        self.schema_name = schema_name
        self.property_name = property_name
        self.reason = reason
        super().__init__(
            f"Property '{schema_name}.{property_name}' has invalid flags: {reason}",
            schema_name=schema_name,
            property_name=property_name,
            reason=reason,
        )


class ConversionError(DocmapError):
    """Raised when a typed object and a generic document cannot be converted."""


class MissingRequiredPropertyError(ConversionError):
    def __init__(self, schema_name: str, property_name: str) -> None:
        self.schema_name = schema_name
        self.property_name = property_name
        super().__init__(
            f"Required property '{schema_name}.{property_name}' is missing",
            schema_name=schema_name,
            property_name=property_name,
        )


class PropertyTypeError(ConversionError):
    def __init__(self, schema_name: str, property_name: str, expected: str, actual: str) -> None:
        self.schema_name = schema_name
        self.property_name = property_name
        super().__init__(
            f"Property '{schema_name}.{property_name}' expects {expected} values, got {actual}",
            schema_name=schema_name,
            property_name=property_name,
            expected=expected,
            actual=actual,
        )


class UnknownSchemaError(ConversionError):
    def __init__(self, type_id: str) -> None:
        self.type_id = type_id
        super().__init__(f"No document class registered for '{type_id}'", type_id=type_id)


class SchemaMismatchError(ConversionError):
    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Document has schema '{actual}' but '{expected}' was expected",
            expected=expected,
            actual=actual,
        )


class CyclicDataError(ConversionError):
    def __init__(self, schema_name: str, depth: int, reason: str) -> None:
        self.schema_name = schema_name
        self.depth = depth
        super().__init__(
            f"Nested documents under '{schema_name}' {reason} at depth {depth}",
            schema_name=schema_name,
            depth=depth,
        )


class RegistrationError(DocmapError):
    """Raised when the factory registry rejects a write."""


class SchemaConflictError(RegistrationError):
    def __init__(self, type_id: str) -> None:
        self.type_id = type_id
        super().__init__(
            f"Document class '{type_id}' is already registered with a different schema",
            type_id=type_id,
        )


class RegistryFrozenError(RegistrationError):
    def __init__(self, type_id: str) -> None:
        self.type_id = type_id
        super().__init__(f"Registry is frozen; cannot register '{type_id}'", type_id=type_id)
