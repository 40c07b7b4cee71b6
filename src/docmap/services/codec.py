"""Document codec converting typed objects to and from generic documents."""

from typing import Any

import structlog

from docmap.config import CodecConfig
from docmap.errors import (
    CyclicDataError,
    MissingRequiredPropertyError,
    PropertyTypeError,
    SchemaMismatchError,
)
from docmap.models.binding import DocumentBinding
from docmap.models.document import GenericDocument
from docmap.models.enums import Cardinality, ValueKind
from docmap.models.property import PropertyDescriptor
from docmap.models.schema import Schema
from docmap.models.value import EmptyValue, ManyValues, PropertyValue, SingleValue, from_array
from docmap.services.registry import FactoryRegistry, default_registry

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1

_SCALAR_TYPES: dict[ValueKind, tuple[type, ...]] = {
    ValueKind.STRING: (str,),
    ValueKind.LONG: (int,),
    ValueKind.DOUBLE: (float, int),
    ValueKind.BOOLEAN: (bool,),
    ValueKind.BYTES: (bytes, bytearray, memoryview),
}


class DocumentCodec:
    """Converts between typed objects and GenericDocument instances.

    The codec holds no per-call state: both directions read only their
    arguments, the immutable schemas and the registry, so one instance can be
    shared across threads once registration is complete. Nested document
    properties are resolved through the registry at call time.
    """

    def __init__(
        self,
        registry: FactoryRegistry | None = None,
        config: CodecConfig | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._config = config or CodecConfig()
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def config(self) -> CodecConfig:
        return self._config

    def encode(
        self,
        schema: Schema,
        typed_object: Any,
        binding: DocumentBinding | None = None,
    ) -> GenericDocument:
        """Convert ``typed_object`` into a GenericDocument shaped by ``schema``.

        Args:
            schema: Schema of the object's document class.
            typed_object: Object exposing the schema's attributes plus namespace and id.
            binding: Attribute mapping for the object. Defaults to the registered
                factory's binding, or plain ``namespace``/``id`` attributes.

        Raises:
            MissingRequiredPropertyError: If a required attribute is None.
            PropertyTypeError: If a value does not match its property's kind.
            UnknownSchemaError: If a nested document class is not registered.
            CyclicDataError: If nested objects exceed the depth limit or refer
                back to an enclosing object.
        """
        if binding is None:
            binding = self._binding_for(schema.name, type(typed_object))
        document = self._encode(schema, binding, typed_object, depth=0, active=frozenset())
        self._logger.debug(
            "document_encoded",
            schema_name=schema.name,
            property_count=len(document.properties),
        )
        return document

    def decode(
        self,
        schema: Schema,
        document: GenericDocument,
        binding: DocumentBinding | None = None,
    ) -> Any:
        """Reconstruct a typed object from ``document``.

        Raises:
            SchemaMismatchError: If the document belongs to another schema.
            MissingRequiredPropertyError: If a required property is absent and
                strict decoding is enabled.
            PropertyTypeError: If a stored value does not match its property's kind.
            UnknownSchemaError: If no class is registered for the schema or for an
                embedded document.
            CyclicDataError: If embedded documents exceed the depth limit.
        """
        if binding is None:
            binding = self._registry.get(schema.name).binding
        typed_object = self._decode(schema, binding, document, depth=0)
        self._logger.debug(
            "document_decoded",
            schema_name=schema.name,
            document_id=document.id,
        )
        return typed_object

    def _binding_for(self, type_id: str, document_class: type) -> DocumentBinding:
        factory = self._registry.find(type_id)
        if factory is not None:
            return factory.binding
        return DocumentBinding(document_class=document_class)

    def _check_depth(self, schema: Schema, depth: int) -> None:
        if depth >= self._config.max_depth:
            raise CyclicDataError(
                schema.name,
                depth,
                f"exceed the maximum nesting depth of {self._config.max_depth}",
            )

    def _encode(
        self,
        schema: Schema,
        binding: DocumentBinding,
        typed_object: Any,
        depth: int,
        active: frozenset[int],
    ) -> GenericDocument:
        self._check_depth(schema, depth)
        if id(typed_object) in active:
            raise CyclicDataError(schema.name, depth, "refer back to an enclosing object")
        active = active | {id(typed_object)}

        properties: dict[str, tuple[Any, ...]] = {}
        for descriptor in schema.properties:
            raw = getattr(typed_object, descriptor.attribute_name, None)
            value = self._lift(schema, descriptor, raw)
            if isinstance(value, EmptyValue):
                if descriptor.cardinality is Cardinality.REQUIRED:
                    raise MissingRequiredPropertyError(schema.name, descriptor.name)
                continue

            if descriptor.is_document:
                nested = self._registry.get(descriptor.document_type or "")
                value = value.map(
                    lambda item: self._encode(
                        nested.get_schema(), nested.binding, item, depth + 1, active
                    )
                )
            else:
                value = value.map(lambda item: self._coerce(schema, descriptor, item))
            properties[descriptor.name] = value.to_array() or ()

        metadata = {
            field: getattr(typed_object, attribute)
            for field, attribute in binding.metadata_attributes().items()
            if getattr(typed_object, attribute, None) is not None
        }
        return GenericDocument(
            namespace=self._identity(schema, typed_object, binding.namespace_attribute),
            id=self._identity(schema, typed_object, binding.id_attribute),
            schema_name=schema.name,
            properties=properties,
            **metadata,
        )

    def _identity(self, schema: Schema, typed_object: Any, attribute: str) -> Any:
        value = getattr(typed_object, attribute, None)
        if value is None:
            raise MissingRequiredPropertyError(schema.name, attribute)
        return value

    def _decode(
        self,
        schema: Schema,
        binding: DocumentBinding,
        document: GenericDocument,
        depth: int,
    ) -> Any:
        if document.schema_name != schema.name:
            raise SchemaMismatchError(schema.name, document.schema_name)
        self._check_depth(schema, depth)

        values: dict[str, Any] = {
            binding.namespace_attribute: document.namespace,
            binding.id_attribute: document.id,
        }
        for descriptor in schema.properties:
            value = from_array(descriptor.cardinality, document.get_property(descriptor.name))
            if (
                isinstance(value, EmptyValue)
                and descriptor.cardinality is Cardinality.REQUIRED
                and self._config.strict_required
            ):
                raise MissingRequiredPropertyError(schema.name, descriptor.name)

            if descriptor.is_document:
                value = value.map(
                    lambda item: self._decode_nested(schema, descriptor, item, depth + 1)
                )
            else:
                value = value.map(lambda item: self._coerce(schema, descriptor, item))
            values[descriptor.attribute_name] = value.to_attribute()

        unknown = set(document.properties) - set(schema.property_names)
        if unknown:
            self._logger.debug(
                "unknown_properties_ignored",
                schema_name=schema.name,
                property_names=sorted(unknown),
            )

        for field, attribute in binding.metadata_attributes().items():
            values[attribute] = getattr(document, field)
        return binding.construct(values)

    def _decode_nested(
        self,
        schema: Schema,
        descriptor: PropertyDescriptor,
        item: Any,
        depth: int,
    ) -> Any:
        if not isinstance(item, GenericDocument):
            raise PropertyTypeError(schema.name, descriptor.name, "GenericDocument", type(item).__name__)
        nested = self._registry.get(item.schema_name)
        return self._decode(nested.get_schema(), nested.binding, item, depth)

    def _lift(self, schema: Schema, descriptor: PropertyDescriptor, raw: Any) -> PropertyValue:
        if raw is None:
            return EmptyValue()
        if descriptor.cardinality is not Cardinality.REPEATED:
            return SingleValue(raw)
        if isinstance(raw, (str, bytes, bytearray, memoryview)) or not hasattr(raw, "__iter__"):
            raise PropertyTypeError(
                schema.name,
                descriptor.name,
                f"a sequence of {descriptor.value_kind.value}",
                type(raw).__name__,
            )
        return ManyValues(tuple(raw))

    def _coerce(self, schema: Schema, descriptor: PropertyDescriptor, item: Any) -> Any:
        if not self._config.check_value_types:
            return item

        kind = descriptor.value_kind
        # bool is an int subclass but never a numeric property value
        if not isinstance(item, _SCALAR_TYPES[kind]) or (
            isinstance(item, bool) and kind is not ValueKind.BOOLEAN
        ):
            raise PropertyTypeError(schema.name, descriptor.name, kind.value, type(item).__name__)
        if kind is ValueKind.LONG and not _LONG_MIN <= item <= _LONG_MAX:
            raise PropertyTypeError(schema.name, descriptor.name, "64-bit long", f"out-of-range int {item}")
        if kind is ValueKind.DOUBLE:
            return float(item)
        if kind is ValueKind.BYTES:
            return bytes(item)
        return item
