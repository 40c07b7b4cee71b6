"""Process-wide registry of document class factories.

Entries are written once during initialization and then only read. Writes are
serialized with a lock; reads are lock-free so that conversions running on
several threads never contend once registration has finished.

Registration is two-phase: ``reserve`` claims a slot for a type identifier
before its factory exists, and ``fill`` completes it. This lets a group of
document classes that reference each other be registered without any of them
having to be fully built first.
"""

import threading
from typing import TYPE_CHECKING

import structlog

from docmap.errors import RegistryFrozenError, SchemaConflictError, UnknownSchemaError

if TYPE_CHECKING:
    from docmap.services.factory import DocumentClassFactory


class FactoryRegistry:
    """Maps type identifiers to their DocumentClassFactory."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._lock = threading.RLock()
        self._slots: list["DocumentClassFactory | None"] = []
        self._index: dict[str, int] = {}
        self._by_class: dict[type, str] = {}
        self._frozen = False
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """End the initialization phase; later writes are rejected."""
        with self._lock:
            self._frozen = True
        self._logger.info("registry_frozen", type_count=len(self._index))

    def reserve(self, type_id: str) -> int:
        """Claim a slot for ``type_id`` and return its index.

        Reserving an identifier that already has a slot returns the existing
        index.
        """
        with self._lock:
            existing = self._index.get(type_id)
            if existing is not None:
                return existing
            self._ensure_writable(type_id)
            self._slots.append(None)
            index = len(self._slots) - 1
            self._index[type_id] = index
            self._logger.debug("registry_slot_reserved", type_id=type_id, slot=index)
            return index

    def reserve_new(self, type_id: str) -> bool:
        """Reserve ``type_id`` and report whether this call created the slot."""
        with self._lock:
            if type_id in self._index:
                return False
            self.reserve(type_id)
            return True

    def release(self, type_id: str) -> None:
        """Drop a reservation that was never filled."""
        with self._lock:
            index = self._index.get(type_id)
            if index is None or self._slots[index] is not None:
                return
            del self._index[type_id]
            self._logger.debug("registry_slot_released", type_id=type_id, slot=index)

    def fill(self, type_id: str, factory: "DocumentClassFactory") -> "DocumentClassFactory":
        """Complete the slot for ``type_id`` with ``factory``.

        Filling an already-filled slot with an identical schema is a no-op and
        returns the factory registered first.

        Raises:
            SchemaConflictError: If the slot holds a factory with a different schema.
            RegistryFrozenError: If the registry is frozen and the slot is not filled.
        """
        with self._lock:
            index = self._index.get(type_id)
            current = self._slots[index] if index is not None else None
            if current is not None:
                if current.get_schema() != factory.get_schema():
                    self._logger.warning("schema_conflict", type_id=type_id)
                    raise SchemaConflictError(type_id)
                self._logger.debug("document_class_already_registered", type_id=type_id)
                return current

            if index is None:
                index = self.reserve(type_id)
            self._ensure_writable(type_id)
            self._slots[index] = factory
            self._by_class.setdefault(factory.document_class, type_id)

        self._logger.info(
            "document_class_registered",
            type_id=type_id,
            document_class=factory.document_class.__qualname__,
            property_count=len(factory.get_schema().properties),
        )
        return factory

    def fill_all(self, factories: "list[DocumentClassFactory]") -> "list[DocumentClassFactory]":
        """Fill a slot for each factory, or none of them.

        Every factory is checked against the current slots before any slot is
        written, so a conflict or a frozen registry leaves the registry as it was.

        Raises:
            SchemaConflictError: If any factory conflicts with a registered schema.
            RegistryFrozenError: If the registry is frozen and a slot is not filled.
        """
        with self._lock:
            pending: dict[str, "DocumentClassFactory"] = {}
            for factory in factories:
                type_id = factory.get_schema_name()
                current = self.find(type_id) or pending.get(type_id)
                if current is None:
                    self._ensure_writable(type_id)
                    pending[type_id] = factory
                elif current.get_schema() != factory.get_schema():
                    self._logger.warning("schema_conflict", type_id=type_id)
                    raise SchemaConflictError(type_id)
            return [self.fill(factory.get_schema_name(), factory) for factory in factories]

    def register(self, factory: "DocumentClassFactory") -> "DocumentClassFactory":
        """Register ``factory`` under its schema name in one step."""
        return self.fill(factory.get_schema_name(), factory)

    def find(self, type_id: str) -> "DocumentClassFactory | None":
        index = self._index.get(type_id)
        if index is None:
            return None
        return self._slots[index]

    def get(self, type_id: str) -> "DocumentClassFactory":
        factory = self.find(type_id)
        if factory is None:
            raise UnknownSchemaError(type_id)
        return factory

    def get_by_class(self, document_class: type) -> "DocumentClassFactory":
        type_id = self._by_class.get(document_class)
        if type_id is None:
            raise UnknownSchemaError(document_class.__qualname__)
        return self.get(type_id)

    def type_ids(self) -> tuple[str, ...]:
        """Registered identifiers in registration order, placeholders excluded."""
        return tuple(
            type_id for type_id, index in sorted(self._index.items(), key=lambda item: item[1])
            if self._slots[index] is not None
        )

    def __contains__(self, type_id: object) -> bool:
        return isinstance(type_id, str) and self.find(type_id) is not None

    def __len__(self) -> int:
        return len(self.type_ids())

    def _ensure_writable(self, type_id: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(type_id)


_default_registry = FactoryRegistry()


def default_registry() -> FactoryRegistry:
    """Return the process-wide registry."""
    return _default_registry
