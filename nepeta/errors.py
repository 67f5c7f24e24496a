"""
Copyright 2024, Zep Software, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from pathlib import Path


class NepetaError(Exception):
    """Base exception class for the Nepeta package loader."""


class ManifestNotFoundError(NepetaError):
    """Raised when a package directory has no manifest file."""

    def __init__(self, manifest_path: Path):
        self.manifest_path = manifest_path
        self.message = f'manifest not found at {manifest_path}'
        super().__init__(self.message)


class ManifestParseError(NepetaError, ValueError):
    """Raised when a manifest is not valid JSON or violates the manifest contract."""

    def __init__(self, manifest_path: Path | str, message: str, field: str | None = None):
        self.manifest_path = manifest_path
        self.field = field
        self.message = message
        super().__init__(self.message)


class PackageIoError(NepetaError):
    """Raised when a package path or the extensions root cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.message = f'unable to read {path}: {reason}'
        super().__init__(self.message)


class UnsafePackagePathError(NepetaError, ValueError):
    """Raised when a package name would resolve outside the extensions root."""

    def __init__(self, package_name: str, reason: str):
        self.package_name = package_name
        self.message = f'Unsafe package name {package_name!r}: {reason}'
        super().__init__(self.message)


class ThemeConflictError(NepetaError):
    """Raised when a second theme with templates is loaded under the exclusive theme policy."""

    def __init__(self, active_id: str, candidate_id: str):
        self.active_id = active_id
        self.candidate_id = candidate_id
        self.message = (
            f'theme `{candidate_id}` conflicts with active theme `{active_id}`; '
            'only one theme with templates may be installed'
        )
        super().__init__(self.message)


class RegistryFrozenError(NepetaError):
    """Raised when the registry is mutated after startup completed."""

    def __init__(self, operation: str):
        self.operation = operation
        self.message = f'package registry is frozen; cannot {operation}'
        super().__init__(self.message)


class PackageNotLoadedError(NepetaError):
    """Raised when package info is requested for a package that is not loaded."""

    def __init__(self, package_name: str, reason: str):
        self.package_name = package_name
        self.reason = reason
        self.message = f'package `{package_name}` is not loaded: {reason}'
        super().__init__(self.message)
