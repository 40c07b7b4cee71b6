"""Schema builder that validates property descriptors into a Schema."""

from collections.abc import Iterable

import structlog

from docmap.errors import DuplicatePropertyError, InvalidFlagCombinationError, InvalidSchemaError
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


class SchemaBuilder:
    """Assembles a named Schema from analyzer-supplied property descriptors.

    Building is pure: the same descriptors always produce an equal Schema, and
    descriptor order is preserved.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger(__name__)

    def build(self, name: str, descriptors: Iterable[PropertyDescriptor]) -> Schema:
        """Build and validate a schema.

        Args:
            name: Schema name, unique within a registry.
            descriptors: Property descriptors in declaration order.

        Returns:
            The validated Schema.

        Raises:
            InvalidSchemaError: If the schema name is empty.
            DuplicatePropertyError: If two descriptors share a name.
            InvalidFlagCombinationError: If a descriptor sets illegal flags.
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidSchemaError(str(name), "schema name cannot be empty")

        properties = tuple(descriptors)
        seen: set[str] = set()
        for descriptor in properties:
            if descriptor.name in seen:
                raise DuplicatePropertyError(name, descriptor.name)
            seen.add(descriptor.name)
            self._validate_flags(name, descriptor)

        schema = Schema(name=name, properties=properties)
        self._logger.debug(
            "schema_built",
            schema_name=name,
            property_count=len(properties),
        )
        return schema

    def _validate_flags(self, schema_name: str, descriptor: PropertyDescriptor) -> None:
        def fail(reason: str) -> None:
            raise InvalidFlagCombinationError(schema_name, descriptor.name, reason)

        kind = descriptor.value_kind
        if kind is not ValueKind.STRING:
            if descriptor.string_tokenizer is not StringTokenizer.NONE:
                fail(f"tokenizer is only valid for string properties, not {kind.value}")
            if descriptor.string_indexing is not StringIndexing.NONE:
                fail(f"string indexing is only valid for string properties, not {kind.value}")
            if descriptor.joinable_type is not JoinableType.NONE:
                fail(f"joinable type is only valid for string properties, not {kind.value}")
        else:
            if (
                descriptor.string_indexing is not StringIndexing.NONE
                and descriptor.string_tokenizer is StringTokenizer.NONE
            ):
                fail("indexed string properties require a tokenizer")
            if descriptor.joinable_type is JoinableType.QUALIFIED_ID:
                if descriptor.string_indexing is not StringIndexing.NONE:
                    fail("joinable properties cannot also be indexed")
                if descriptor.cardinality is Cardinality.REPEATED:
                    fail("joinable properties cannot be repeated")

        if kind is not ValueKind.LONG and descriptor.long_indexing is not LongIndexing.NONE:
            fail(f"range indexing is only valid for long properties, not {kind.value}")

        if kind is ValueKind.DOCUMENT:
            if descriptor.document_type is None:
                fail("document properties must name their document type")
        else:
            if descriptor.document_type is not None:
                fail("document type is only valid for document properties")
            if descriptor.index_nested_properties:
                fail("nested property indexing is only valid for document properties")
