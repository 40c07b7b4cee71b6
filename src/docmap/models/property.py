from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from docmap.models.base import FrozenModel, ensure_non_empty_text
from docmap.models.enums import (
    Cardinality,
    JoinableType,
    LongIndexing,
    StringIndexing,
    StringTokenizer,
    ValueKind,
)


class PropertyDescriptor(FrozenModel):
    """Static metadata for one property of a document class.

    Produced by the class analyzer. Flag legality is checked when the
    descriptor is assembled into a schema, not here, so that a schema build
    can report every problem with the schema's name attached.
    """

    name: str
    value_kind: ValueKind
    cardinality: Cardinality = Cardinality.OPTIONAL
    string_tokenizer: StringTokenizer = StringTokenizer.NONE
    string_indexing: StringIndexing = StringIndexing.NONE
    joinable_type: JoinableType = JoinableType.NONE
    long_indexing: LongIndexing = LongIndexing.NONE
    document_type: str | None = None
    index_nested_properties: bool = False
    attribute: str | None = Field(default=None)

    @field_validator("name")
    @classmethod
    def _ensure_name(cls, value: str, info: ValidationInfo) -> str:
        return ensure_non_empty_text(value, info.field_name or "name")

    @field_validator("attribute", "document_type")
    @classmethod
    def _ensure_optional_text(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is None:
            return None
        return ensure_non_empty_text(value, info.field_name or "value")

    @property
    def attribute_name(self) -> str:
        """Name of the typed-object attribute backing this property."""
        return self.attribute or self.name

    @property
    def is_repeated(self) -> bool:
        return self.cardinality is Cardinality.REPEATED

    @property
    def is_document(self) -> bool:
        return self.value_kind is ValueKind.DOCUMENT

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "value_kind": self.value_kind.value,
            "cardinality": self.cardinality.value,
        }
        if self.value_kind is ValueKind.STRING:
            data["string_tokenizer"] = self.string_tokenizer.value
            data["string_indexing"] = self.string_indexing.value
            data["joinable_type"] = self.joinable_type.value
        elif self.value_kind is ValueKind.LONG:
            data["long_indexing"] = self.long_indexing.value
        elif self.value_kind is ValueKind.DOCUMENT:
            data["document_type"] = self.document_type
            data["index_nested_properties"] = self.index_nested_properties
        return data
