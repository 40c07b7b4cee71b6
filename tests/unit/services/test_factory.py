"""Tests for document class factories and their wiring helpers."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from docmap.config import CodecConfig
from docmap.errors import (
    DuplicatePropertyError,
    InvalidFlagCombinationError,
    MissingRequiredPropertyError,
    RegistryFrozenError,
    SchemaConflictError,
)
from docmap.models.document import GenericDocument
from docmap.models.enums import Cardinality, JoinableType, ValueKind
from docmap.models.property import PropertyDescriptor
from docmap.services.factory import (
    DocumentClassFactory,
    DocumentClassSpec,
    create_document_class_factory,
    register_document_class,
    register_document_classes,
)
from docmap.services.registry import FactoryRegistry


@dataclass
class Gift:
    namespace: str
    id: str
    object: str | None = None


class Author(BaseModel):
    namespace: str
    id: str
    name: str
    books: list["Book"] = []


class Book(BaseModel):
    namespace: str
    id: str
    title: str
    author: Author | None = None


Author.model_rebuild()

GIFT_OBJECT = PropertyDescriptor(
    name="object",
    value_kind=ValueKind.STRING,
    joinable_type=JoinableType.QUALIFIED_ID,
)


class TestDocumentClassFactory:
    """Tests for the per-type adapter contract."""

    def test_exposes_schema_contract(self) -> None:
        registry = FactoryRegistry()

        factory = register_document_class(Gift, [GIFT_OBJECT], registry=registry)

        assert isinstance(factory, DocumentClassFactory)
        assert factory.get_schema_name() == "Gift"
        assert factory.get_schema().properties == (GIFT_OBJECT,)
        assert factory.get_dependency_document_classes() == ()
        assert factory.document_class is Gift

    def test_converts_both_ways(self) -> None:
        factory = register_document_class(Gift, [GIFT_OBJECT], registry=FactoryRegistry())

        document = factory.to_generic_document(Gift(namespace="ns1", id="id1", object="widget"))

        assert document.schema_name == "Gift"
        assert document.properties == {"object": ("widget",)}
        assert factory.from_generic_document(document) == Gift(namespace="ns1", id="id1", object="widget")

    def test_schema_name_override(self) -> None:
        factory = register_document_class(Gift, [GIFT_OBJECT], schema_name="Present", registry=FactoryRegistry())

        assert factory.get_schema_name() == "Present"
        assert factory.to_generic_document(Gift(namespace="n", id="i")).schema_name == "Present"

    def test_unregistered_factory_still_converts(self) -> None:
        spec = DocumentClassSpec(document_class=Gift, properties=(GIFT_OBJECT,))

        factory = create_document_class_factory(spec, registry=FactoryRegistry())
        document = factory.to_generic_document(Gift(namespace="n", id="i", object="o"))

        assert factory.from_generic_document(document).object == "o"

    def test_uses_injected_config(self) -> None:
        required = PropertyDescriptor(name="object", value_kind=ValueKind.STRING, cardinality=Cardinality.REQUIRED)
        factory = register_document_class(
            Gift,
            [required],
            registry=FactoryRegistry(),
            config=CodecConfig(strict_required=True),
        )

        with pytest.raises(MissingRequiredPropertyError):
            factory.from_generic_document(GenericDocument(namespace="n", id="i", schema_name="Gift"))


class TestRegisterDocumentClass:
    """Tests for register_document_class."""

    def test_identical_registration_returns_existing_factory(self) -> None:
        registry = FactoryRegistry()
        first = register_document_class(Gift, [GIFT_OBJECT], registry=registry)

        second = register_document_class(Gift, [GIFT_OBJECT], registry=registry)

        assert second is first

    def test_conflicting_registration_fails(self) -> None:
        registry = FactoryRegistry()
        register_document_class(Gift, [GIFT_OBJECT], registry=registry)

        with pytest.raises(SchemaConflictError):
            register_document_class(
                Gift,
                [PropertyDescriptor(name="object", value_kind=ValueKind.LONG)],
                registry=registry,
            )

    def test_invalid_schema_releases_reservation(self) -> None:
        registry = FactoryRegistry()
        invalid = PropertyDescriptor(name="object", value_kind=ValueKind.LONG, joinable_type=JoinableType.QUALIFIED_ID)

        with pytest.raises(InvalidFlagCombinationError):
            register_document_class(Gift, [invalid], registry=registry)

        assert registry.find("Gift") is None
        assert "Gift" not in registry
        assert register_document_class(Gift, [GIFT_OBJECT], registry=registry) is registry.get("Gift")

    def test_duplicate_properties_are_rejected(self) -> None:
        with pytest.raises(DuplicatePropertyError):
            register_document_class(Gift, [GIFT_OBJECT, GIFT_OBJECT], registry=FactoryRegistry())


class TestRegisterDocumentClasses:
    """Tests for registering mutually-referencing classes together."""

    def _specs(self) -> list[DocumentClassSpec]:
        return [
            DocumentClassSpec(
                document_class=Author,
                properties=(
                    PropertyDescriptor(name="name", value_kind=ValueKind.STRING, cardinality=Cardinality.REQUIRED),
                    PropertyDescriptor(
                        name="books",
                        value_kind=ValueKind.DOCUMENT,
                        document_type="Book",
                        cardinality=Cardinality.REPEATED,
                    ),
                ),
            ),
            DocumentClassSpec(
                document_class=Book,
                properties=(
                    PropertyDescriptor(name="title", value_kind=ValueKind.STRING, cardinality=Cardinality.REQUIRED),
                    PropertyDescriptor(name="author", value_kind=ValueKind.DOCUMENT, document_type="Author"),
                ),
            ),
        ]

    def test_registers_cycle(self) -> None:
        registry = FactoryRegistry()

        factories = register_document_classes(self._specs(), registry=registry)

        assert [factory.get_schema_name() for factory in factories] == ["Author", "Book"]
        assert registry.type_ids() == ("Author", "Book")
        assert sorted(factories[0].get_dependency_document_classes()) == ["Author", "Book"]

    def test_round_trips_pydantic_models(self) -> None:
        registry = FactoryRegistry()
        author_factory, _ = register_document_classes(self._specs(), registry=registry)
        book = Book(
            namespace="lib",
            id="b1",
            title="Notes",
            author=Author(namespace="lib", id="a2", name="Grace"),
        )
        author = Author(namespace="lib", id="a1", name="Ada", books=[book])

        document = author_factory.to_generic_document(author)

        (embedded,) = document.get_property("books")
        assert embedded.schema_name == "Book"
        assert embedded.get_property("author")[0].get_property("name") == ("Grace",)
        assert author_factory.from_generic_document(document) == author

    def test_failed_batch_releases_all_reservations(self) -> None:
        registry = FactoryRegistry()
        specs = self._specs() + [
            DocumentClassSpec(
                document_class=Gift,
                properties=(GIFT_OBJECT, GIFT_OBJECT),
            )
        ]

        with pytest.raises(DuplicatePropertyError):
            register_document_classes(specs, registry=registry)

        assert registry.type_ids() == ()
        assert registry.find("Author") is None

    def test_conflict_in_batch_registers_nothing(self) -> None:
        registry = FactoryRegistry()
        existing = register_document_class(Gift, [GIFT_OBJECT], registry=registry)
        conflicting_gift = DocumentClassSpec(
            document_class=Gift,
            properties=(PropertyDescriptor(name="object", value_kind=ValueKind.LONG),),
        )

        with pytest.raises(SchemaConflictError):
            register_document_classes(
                [self._specs()[0], conflicting_gift, self._specs()[1]],
                registry=registry,
            )

        assert registry.type_ids() == ("Gift",)
        assert registry.get("Gift") is existing
        assert registry.find("Author") is None
        assert registry.reserve_new("Book")

    def test_conflicting_duplicates_within_batch_register_nothing(self) -> None:
        registry = FactoryRegistry()
        specs = [
            DocumentClassSpec(document_class=Gift, properties=(GIFT_OBJECT,)),
            DocumentClassSpec(
                document_class=Gift,
                properties=(PropertyDescriptor(name="object", value_kind=ValueKind.LONG),),
            ),
        ]

        with pytest.raises(SchemaConflictError):
            register_document_classes(specs, registry=registry)

        assert registry.type_ids() == ()

    def test_frozen_registry_batch_registers_nothing(self) -> None:
        registry = FactoryRegistry()
        registry.reserve("Author")
        registry.reserve("Book")
        registry.freeze()

        with pytest.raises(RegistryFrozenError):
            register_document_classes(self._specs(), registry=registry)

        assert registry.type_ids() == ()

    def test_failure_keeps_reservations_made_elsewhere(self) -> None:
        registry = FactoryRegistry()
        registry.reserve("Author")
        specs = self._specs() + [
            DocumentClassSpec(document_class=Gift, properties=(GIFT_OBJECT, GIFT_OBJECT)),
        ]

        with pytest.raises(DuplicatePropertyError):
            register_document_classes(specs, registry=registry)

        assert not registry.reserve_new("Author")
        assert registry.reserve_new("Book")
        assert registry.reserve_new("Gift")
