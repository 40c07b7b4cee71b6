from typing import Any

from pydantic import ValidationInfo, field_validator

from docmap.models.base import FrozenModel, ensure_non_empty_text
from docmap.models.property import PropertyDescriptor


class Schema(FrozenModel):
    """Named, ordered set of property descriptors.

    Build instances through ``SchemaBuilder.build`` so that name uniqueness and
    flag legality are enforced. Equality is structural, which is what the
    factory registry relies on to tell an idempotent re-registration from a
    conflicting one.
    """

    name: str
    properties: tuple[PropertyDescriptor, ...] = ()

    @field_validator("name")
    @classmethod
    def _ensure_name(cls, value: str, info: ValidationInfo) -> str:
        return ensure_non_empty_text(value, info.field_name or "name")

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(descriptor.name for descriptor in self.properties)

    def get_property(self, name: str) -> PropertyDescriptor | None:
        for descriptor in self.properties:
            if descriptor.name == name:
                return descriptor
        return None

    def document_properties(self) -> tuple[PropertyDescriptor, ...]:
        return tuple(descriptor for descriptor in self.properties if descriptor.is_document)

    def to_dict(self) -> dict[str, Any]:
        """Externalize the schema with property order preserved."""
        return {
            "name": self.name,
            "properties": [descriptor.to_dict() for descriptor in self.properties],
        }
