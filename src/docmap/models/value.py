"""Internal tagged representation of a property value.

The document boundary stores every property as a flat array. Inside the codec
a value is one of ``EmptyValue``, ``SingleValue`` or ``ManyValues`` so that the
difference between an absent optional value and a present-but-empty repeated
value stays explicit until the array form is produced.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from docmap.models.enums import Cardinality


@dataclass(frozen=True)
class EmptyValue:
    def map(self, fn: Callable[[Any], Any]) -> "EmptyValue":
        return self

    def to_array(self) -> tuple[Any, ...] | None:
        return None

    def to_attribute(self) -> Any:
        return None


@dataclass(frozen=True)
class SingleValue:
    value: Any

    def map(self, fn: Callable[[Any], Any]) -> "SingleValue":
        return SingleValue(fn(self.value))

    def to_array(self) -> tuple[Any, ...] | None:
        return (self.value,)

    def to_attribute(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ManyValues:
    values: tuple[Any, ...]

    def map(self, fn: Callable[[Any], Any]) -> "ManyValues":
        return ManyValues(tuple(fn(value) for value in self.values))

    def to_array(self) -> tuple[Any, ...] | None:
        return self.values

    def to_attribute(self) -> Any:
        return list(self.values)


PropertyValue = Union[EmptyValue, SingleValue, ManyValues]


def from_array(cardinality: Cardinality, array: tuple[Any, ...] | None) -> PropertyValue:
    """Lift a document value array into the tagged form for ``cardinality``.

    Repeated properties never come back empty-as-absent: a missing array
    becomes an empty ``ManyValues``.
    """
    if cardinality is Cardinality.REPEATED:
        return ManyValues(tuple(array or ()))
    if not array:
        return EmptyValue()
    return SingleValue(array[0])
