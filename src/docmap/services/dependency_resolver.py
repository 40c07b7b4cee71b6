"""Resolves the nested document classes a schema depends on."""

import structlog

from docmap.models.schema import Schema
from docmap.services.registry import FactoryRegistry, default_registry


class DependencyResolver:
    """Computes the transitive closure of document-typed properties.

    Results list every reachable type identifier exactly once, with each one
    placed after the identifiers it depends on whenever the references are
    acyclic. Cyclic references (including a schema that refers to itself) are
    legal; a visited set keeps resolution finite.
    """

    def __init__(
        self,
        registry: FactoryRegistry | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._logger = logger or structlog.get_logger(__name__)

    def get_dependency_document_classes(self, schema: Schema) -> tuple[str, ...]:
        """Return the type identifiers reachable from ``schema``'s document properties.

        Identifiers that are not registered (or only reserved) are listed but
        not expanded further.
        """
        visited: set[str] = set()
        ordered: list[str] = []
        unresolved: list[str] = []

        def visit(current: Schema) -> None:
            for descriptor in current.document_properties():
                type_id = descriptor.document_type
                if type_id is None or type_id in visited:
                    continue
                visited.add(type_id)
                factory = self._registry.find(type_id)
                if factory is None:
                    unresolved.append(type_id)
                else:
                    visit(factory.get_schema())
                ordered.append(type_id)

        visit(schema)

        if unresolved:
            self._logger.debug(
                "unresolved_document_dependencies",
                schema_name=schema.name,
                type_ids=unresolved,
            )
        return tuple(ordered)

    def resolve_schemas(self, schema: Schema) -> tuple[Schema, ...]:
        """Return the registered schemas of ``schema``'s dependencies, in order."""
        schemas: list[Schema] = []
        for type_id in self.get_dependency_document_classes(schema):
            factory = self._registry.find(type_id)
            if factory is not None:
                schemas.append(factory.get_schema())
        return tuple(schemas)
