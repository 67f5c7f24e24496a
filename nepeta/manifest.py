"""Read a single package manifest from disk."""

from __future__ import annotations

import json
from pathlib import Path

from .contracts import MANIFEST_FILENAME, PackageDescriptor, parse_package_manifest
from .errors import ManifestNotFoundError, ManifestParseError, PackageIoError


def manifest_path_for(package_path: Path) -> Path:
    return package_path / MANIFEST_FILENAME


def _read_json(manifest_path: Path) -> object:
    try:
        text = manifest_path.read_text(encoding='utf-8')
    except UnicodeDecodeError as exc:
        raise ManifestParseError(manifest_path, f'{manifest_path} is not valid UTF-8') from exc
    except OSError as exc:
        raise PackageIoError(manifest_path, exc.strerror or str(exc)) from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(
            manifest_path,
            f'invalid JSON in {manifest_path}: {exc.msg} (line {exc.lineno}, column {exc.colno})',
        ) from exc


def read_manifest(package_path: Path) -> PackageDescriptor:
    """Parse ``<package_path>/manifest.json`` into a descriptor.

    Raises:
        ManifestNotFoundError: the package has no manifest file.
        PackageIoError: the manifest exists but cannot be read.
        ManifestParseError: the manifest is not a valid manifest object.
    """

    manifest_path = manifest_path_for(package_path)
    try:
        present = manifest_path.is_file()
    except OSError as exc:
        raise PackageIoError(manifest_path, exc.strerror or str(exc)) from exc

    if not present:
        raise ManifestNotFoundError(manifest_path)

    payload = _read_json(manifest_path)
    return parse_package_manifest(payload, path_on_disk=package_path, context=str(manifest_path))


__all__ = ['manifest_path_for', 'read_manifest']
