from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ConfigDict, Field

from docmap.models.base import FrozenModel


class DocumentBinding(FrozenModel):
    """How a typed object's identity and metadata map onto a document.

    The class analyzer supplies the attribute names; property attributes come
    from each descriptor's ``attribute_name``. Decoding builds the object by
    calling ``constructor`` (or the class itself) with keyword arguments.
    """

    document_class: type
    namespace_attribute: str = "namespace"
    id_attribute: str = "id"
    score_attribute: str | None = None
    creation_timestamp_attribute: str | None = None
    ttl_attribute: str | None = None
    constructor: Callable[..., Any] | None = Field(default=None)

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    def metadata_attributes(self) -> dict[str, str]:
        """Map GenericDocument metadata field names to object attribute names."""
        pairs = {
            "score": self.score_attribute,
            "creation_timestamp_millis": self.creation_timestamp_attribute,
            "ttl_millis": self.ttl_attribute,
        }
        return {field: attribute for field, attribute in pairs.items() if attribute is not None}

    def construct(self, values: Mapping[str, Any]) -> Any:
        factory = self.constructor or self.document_class
        return factory(**values)
