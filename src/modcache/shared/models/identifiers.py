"""Module and component identifiers.

Value objects naming a module (group + name) and one version of it, and the
factory that canonicalizes and interns them.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from modcache.shared.errors import DomainError, ErrorCode, ErrorContext

# Characters that would let a coordinate escape its directory in the
# descriptor file store.
_FORBIDDEN_SEGMENTS = ("", ".", "..")
_FORBIDDEN_CHARS = ("/", "\\", "\x00")


@dataclass(frozen=True)
class ModuleIdentifier:
    """Identity of a module independent of its version."""

    group: str
    name: str

    def __str__(self) -> str:
        return f"{self.group}:{self.name}"


@dataclass(frozen=True)
class ModuleComponentIdentifier:
    """Identity of one module version: ``(group, module, version)``."""

    group: str
    module: str
    version: str

    @property
    def module_identifier(self) -> ModuleIdentifier:
        return ModuleIdentifier(self.group, self.module)

    @property
    def display_name(self) -> str:
        return f"{self.group}:{self.module}:{self.version}"

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def parse(cls, notation: str) -> ModuleComponentIdentifier:
        """Parse ``group:module:version`` notation.

        Raises:
            DomainError: If the notation does not have exactly three parts
        """
        parts = notation.split(":")
        if len(parts) != 3 or not all(part.strip() for part in parts):
            raise DomainError(
                ErrorCode.INVALID_MODULE_IDENTIFIER,
                f"Expected group:module:version, got '{notation}'",
                ErrorContext(operation="parse_component_identifier"),
            )
        group, module, version = (part.strip() for part in parts)
        return cls(group, module, version)


class ImmutableModuleIdentifierFactory:
    """Canonicalizes and interns module coordinates.

    Identifiers handed out by the factory are stripped of surrounding
    whitespace and validated to be usable as path segments. Equal
    coordinates always yield the same instance.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._modules: dict[tuple[str, str], ModuleIdentifier] = {}
        self._components: dict[tuple[str, str, str], ModuleComponentIdentifier] = {}

    def module(self, group: str, name: str) -> ModuleIdentifier:
        key = (self._canonical(group, "group"), self._canonical(name, "name"))
        with self._lock:
            identifier = self._modules.get(key)
            if identifier is None:
                identifier = ModuleIdentifier(*key)
                self._modules[key] = identifier
            return identifier

    def component(self, group: str, module: str, version: str) -> ModuleComponentIdentifier:
        key = (
            self._canonical(group, "group"),
            self._canonical(module, "module"),
            self._canonical(version, "version"),
        )
        with self._lock:
            identifier = self._components.get(key)
            if identifier is None:
                identifier = ModuleComponentIdentifier(*key)
                self._components[key] = identifier
            return identifier

    def canonicalize(self, component_id: ModuleComponentIdentifier) -> ModuleComponentIdentifier:
        return self.component(component_id.group, component_id.module, component_id.version)

    @staticmethod
    def _canonical(value: str, field: str) -> str:
        if not isinstance(value, str):
            raise DomainError(
                ErrorCode.INVALID_MODULE_IDENTIFIER,
                f"Module {field} must be a string, got {type(value).__name__}",
                ErrorContext(operation="canonicalize", additional_data={"field": field}),
            )
        canonical = value.strip()
        if canonical in _FORBIDDEN_SEGMENTS or any(ch in canonical for ch in _FORBIDDEN_CHARS):
            raise DomainError(
                ErrorCode.INVALID_MODULE_IDENTIFIER,
                f"Invalid module {field}: '{value}'",
                ErrorContext(operation="canonicalize", additional_data={"field": field}),
            )
        return canonical
