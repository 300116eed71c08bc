"""Immutable attribute container attached to module metadata."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Union

AttributeValue = Union[str, bool, int]

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1


class AttributeContainer(Mapping[str, AttributeValue]):
    """Ordered, immutable mapping of attribute name to a typed value.

    Example:
        >>> attributes = AttributeContainer({"org.gradle.status": "release"})
        >>> attributes.with_attribute("org.gradle.usage", "java-api")["org.gradle.usage"]
        'java-api'
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, AttributeValue] | None = None) -> None:
        items = dict(values or {})
        for name, value in items.items():
            if not isinstance(name, str) or not name:
                msg = f"Attribute name must be a non-empty string, got {name!r}"
                raise TypeError(msg)
            if not isinstance(value, (str, bool, int)):
                msg = f"Unsupported attribute value type for '{name}': {type(value).__name__}"
                raise TypeError(msg)
            if type(value) is int and not _LONG_MIN <= value <= _LONG_MAX:
                msg = f"Attribute '{name}' is outside the signed 64-bit range: {value}"
                raise ValueError(msg)
        self._values = items

    def __getitem__(self, name: str) -> AttributeValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeContainer):
            return NotImplemented
        # bool is an int subclass; compare the value types too
        return self._typed_items() == other._typed_items()

    def __hash__(self) -> int:
        return hash(tuple(self._typed_items()))

    def __repr__(self) -> str:
        return f"AttributeContainer({self._values!r})"

    def with_attribute(self, name: str, value: AttributeValue) -> AttributeContainer:
        values = dict(self._values)
        values[name] = value
        return AttributeContainer(values)

    def _typed_items(self) -> list[tuple[str, type, AttributeValue]]:
        return [(name, type(value), value) for name, value in self._values.items()]


EMPTY_ATTRIBUTES = AttributeContainer()
