"""Package manifest contract for Nepeta themes and extensions.

A package is a directory under the extensions root holding a ``manifest.json``
object with the string fields ``id``, ``name``, ``author``,
``insertion_point`` and ``extension_type`` plus an optional ``templates``
object mapping slot names to template references.

This module is filesystem-agnostic; ``nepeta.manifest`` does the reading.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .errors import ManifestParseError, UnsafePackagePathError

MANIFEST_FILENAME = 'manifest.json'
REQUIRED_FIELDS = ('id', 'name', 'author', 'insertion_point', 'extension_type')


class PackageType(str, Enum):
    """Declared package variant."""

    THEME = 'theme'
    EXTENSION = 'extension'
    UNKNOWN = 'unknown'

    @classmethod
    def from_string(cls, value: str) -> PackageType:
        """Map a declared ``extension_type`` by exact match; anything else is UNKNOWN."""
        for member in (cls.THEME, cls.EXTENSION):
            if value == member.value:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """Validated, immutable description of one package."""

    id: str
    name: str
    author: str
    insertion_point: str
    type: PackageType
    extension_type: str
    path_on_disk: Path
    templates: Mapping[str, Any] | None = None

    @property
    def package_name(self) -> str:
        return self.path_on_disk.name

    @property
    def has_templates(self) -> bool:
        return self.templates is not None

    @property
    def is_theme_candidate(self) -> bool:
        return self.type is PackageType.THEME and self.has_templates


def ensure_safe_package_name(package_name: str) -> str:
    """Reject package names that could point anywhere but a direct child of the root."""

    if not package_name:
        raise UnsafePackagePathError(package_name, 'empty name')

    if package_name in ('.', '..'):
        raise UnsafePackagePathError(package_name, 'relative path segment')

    if '/' in package_name or '\\' in package_name or '\x00' in package_name:
        raise UnsafePackagePathError(package_name, 'contains a path separator')

    if Path(package_name).is_absolute():
        raise UnsafePackagePathError(package_name, 'absolute path')

    return package_name


def _expect_str(payload: Mapping[str, Any], key: str, *, context: str, non_empty: bool = False) -> str:
    if key not in payload:
        raise ManifestParseError(context, f'{context}.{key} is required', field=key)

    value = payload[key]
    if not isinstance(value, str):
        raise ManifestParseError(context, f'{context}.{key} must be a string', field=key)
    if non_empty and not value.strip():
        raise ManifestParseError(context, f'{context}.{key} must be a non-empty string', field=key)
    return value


def _coerce_templates(value: object, *, context: str) -> Mapping[str, Any] | None:
    if value is None:
        return None

    if not isinstance(value, dict):
        raise ManifestParseError(context, f'{context}.templates must be an object', field='templates')

    if not value:
        return None

    templates: dict[str, Any] = {}
    for slot, source in value.items():
        if not isinstance(slot, str) or not slot.strip():
            raise ManifestParseError(
                context,
                f'{context}.templates keys must be non-empty strings',
                field='templates',
            )
        templates[slot] = source

    return MappingProxyType(templates)


def parse_package_manifest(
    payload: object,
    *,
    path_on_disk: Path,
    context: str = 'manifest',
) -> PackageDescriptor:
    """Validate a decoded manifest payload and build its descriptor."""

    if not isinstance(payload, dict):
        raise ManifestParseError(context, f'{context} must be a JSON object')

    package_id = _expect_str(payload, 'id', context=context, non_empty=True)
    name = _expect_str(payload, 'name', context=context)
    author = _expect_str(payload, 'author', context=context)
    insertion_point = _expect_str(payload, 'insertion_point', context=context)
    extension_type = _expect_str(payload, 'extension_type', context=context)
    templates = _coerce_templates(payload.get('templates'), context=context)

    return PackageDescriptor(
        id=package_id,
        name=name,
        author=author,
        insertion_point=insertion_point,
        type=PackageType.from_string(extension_type),
        extension_type=extension_type,
        path_on_disk=path_on_disk,
        templates=templates,
    )


__all__ = [
    'MANIFEST_FILENAME',
    'REQUIRED_FIELDS',
    'PackageDescriptor',
    'PackageType',
    'ensure_safe_package_name',
    'parse_package_manifest',
]
