"""Per-type document class factories and the functions that wire them up.

A ``DocumentClassFactory`` is the adapter one document class exposes to
registration and indexing code. Factories are built from a
``DocumentClassSpec`` (the shape reported by the class analyzer) and share a
registry, codec and dependency resolver.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

import structlog
from pydantic import ConfigDict, Field

from docmap.config import CodecConfig
from docmap.errors import DocmapError
from docmap.models.base import FrozenModel
from docmap.models.binding import DocumentBinding
from docmap.models.document import GenericDocument
from docmap.models.property import PropertyDescriptor
from docmap.models.schema import Schema
from docmap.services.codec import DocumentCodec
from docmap.services.dependency_resolver import DependencyResolver
from docmap.services.registry import FactoryRegistry, default_registry
from docmap.services.schema_builder import SchemaBuilder


class DocumentClassSpec(FrozenModel):
    """Analyzer output for one document class."""

    document_class: type
    properties: tuple[PropertyDescriptor, ...] = ()
    schema_name: str | None = None
    namespace_attribute: str = "namespace"
    id_attribute: str = "id"
    score_attribute: str | None = None
    creation_timestamp_attribute: str | None = None
    ttl_attribute: str | None = None
    constructor: Callable[..., Any] | None = Field(default=None)

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @property
    def type_id(self) -> str:
        return self.schema_name or self.document_class.__name__

    def binding(self) -> DocumentBinding:
        return DocumentBinding(
            document_class=self.document_class,
            namespace_attribute=self.namespace_attribute,
            id_attribute=self.id_attribute,
            score_attribute=self.score_attribute,
            creation_timestamp_attribute=self.creation_timestamp_attribute,
            ttl_attribute=self.ttl_attribute,
            constructor=self.constructor,
        )


class DocumentClassFactory:
    """Schema and conversion entry points for a single document class."""

    def __init__(
        self,
        schema: Schema,
        binding: DocumentBinding,
        codec: DocumentCodec,
        resolver: DependencyResolver,
    ) -> None:
        self._schema = schema
        self._binding = binding
        self._codec = codec
        self._resolver = resolver

    @property
    def document_class(self) -> type:
        return self._binding.document_class

    @property
    def binding(self) -> DocumentBinding:
        return self._binding

    def get_schema_name(self) -> str:
        return self._schema.name

    def get_schema(self) -> Schema:
        return self._schema

    def get_dependency_document_classes(self) -> tuple[str, ...]:
        return self._resolver.get_dependency_document_classes(self._schema)

    def to_generic_document(self, document: Any) -> GenericDocument:
        return self._codec.encode(self._schema, document, self._binding)

    def from_generic_document(self, generic_document: GenericDocument) -> Any:
        return self._codec.decode(self._schema, generic_document, self._binding)

    def __repr__(self) -> str:
        return f"DocumentClassFactory(schema_name={self._schema.name!r}, document_class={self.document_class.__qualname__})"


def create_document_class_factory(
    spec: DocumentClassSpec,
    registry: FactoryRegistry | None = None,
    config: CodecConfig | None = None,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> DocumentClassFactory:
    """Build an unregistered factory for ``spec``.

    Nested document properties resolve through ``registry`` when the factory
    converts, so the nested classes only need to be registered by then.

    Raises:
        DuplicatePropertyError: If two descriptors share a name.
        InvalidFlagCombinationError: If a descriptor sets illegal flags.
    """
    logger = logger or structlog.get_logger(__name__)
    registry = registry if registry is not None else default_registry()

    schema = SchemaBuilder(logger=logger).build(spec.type_id, spec.properties)
    return DocumentClassFactory(
        schema=schema,
        binding=spec.binding(),
        codec=DocumentCodec(registry=registry, config=config, logger=logger),
        resolver=DependencyResolver(registry=registry, logger=logger),
    )


def register_document_classes(
    specs: Iterable[DocumentClassSpec],
    registry: FactoryRegistry | None = None,
    config: CodecConfig | None = None,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> list[DocumentClassFactory]:
    """Register a group of document classes that may reference each other.

    Every type identifier is reserved before any factory is built, then each
    slot is filled. Slots are filled all at once: if any schema fails to
    build, conflicts with a registered schema, or the registry is frozen,
    nothing is registered, the slots this call reserved are released and the
    error propagates.
    """
    registry = registry if registry is not None else default_registry()
    specs = list(specs)

    reserved = [spec.type_id for spec in specs if registry.reserve_new(spec.type_id)]

    try:
        factories = [
            create_document_class_factory(spec, registry=registry, config=config, logger=logger)
            for spec in specs
        ]
        return registry.fill_all(factories)
    except DocmapError:
        for type_id in reserved:
            registry.release(type_id)
        raise


def register_document_class(
    document_class: type,
    properties: Sequence[PropertyDescriptor],
    *,
    schema_name: str | None = None,
    namespace_attribute: str = "namespace",
    id_attribute: str = "id",
    score_attribute: str | None = None,
    creation_timestamp_attribute: str | None = None,
    ttl_attribute: str | None = None,
    constructor: Callable[..., Any] | None = None,
    registry: FactoryRegistry | None = None,
    config: CodecConfig | None = None,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> DocumentClassFactory:
    """Describe and register a single document class.

    Re-registering the same class with an identical schema returns the
    existing factory.

    Raises:
        SchemaConflictError: If the schema name is registered with a different schema.
    """
    spec = DocumentClassSpec(
        document_class=document_class,
        properties=tuple(properties),
        schema_name=schema_name,
        namespace_attribute=namespace_attribute,
        id_attribute=id_attribute,
        score_attribute=score_attribute,
        creation_timestamp_attribute=creation_timestamp_attribute,
        ttl_attribute=ttl_attribute,
        constructor=constructor,
    )
    (factory,) = register_document_classes([spec], registry=registry, config=config, logger=logger)
    return factory
