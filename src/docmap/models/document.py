from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from docmap.models.base import FrozenModel, ensure_non_empty_text


class GenericDocument(FrozenModel):
    """Schemaless document instance handed to the indexing backend.

    Every property is stored as an array, even for single-valued properties.
    A property that is absent has no key at all, which is distinct from a key
    mapped to an empty array.

    Metadata defaults to 0, meaning unset; a creation timestamp is only
    present when the typed object supplies one.
    """

    namespace: str
    id: str
    schema_name: str
    properties: dict[str, tuple[Any, ...]] = Field(default_factory=dict)
    score: int = Field(default=0, ge=0)
    creation_timestamp_millis: int = Field(default=0, ge=0)
    ttl_millis: int = Field(default=0, ge=0)

    @field_validator("schema_name")
    @classmethod
    def _ensure_schema_name(cls, value: str, info: ValidationInfo) -> str:
        return ensure_non_empty_text(value, info.field_name or "schema_name")

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(self.properties)

    def get_property(self, name: str) -> tuple[Any, ...] | None:
        """Return the value array for ``name``, or None when it is absent."""
        return self.properties.get(name)

    def has_property(self, name: str) -> bool:
        return name in self.properties

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
