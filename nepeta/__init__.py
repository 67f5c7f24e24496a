"""Nepeta: discovery and registration of themes and extensions."""

from .config import NepetaConfig
from .contracts import (
    MANIFEST_FILENAME,
    PackageDescriptor,
    PackageType,
    ensure_safe_package_name,
    parse_package_manifest,
)
from .core import NepetaCore
from .discovery import DiscoveryReport, discover_and_load_all, enumerate_packages
from .errors import (
    ManifestNotFoundError,
    ManifestParseError,
    NepetaError,
    PackageIoError,
    PackageNotLoadedError,
    RegistryFrozenError,
    ThemeConflictError,
    UnsafePackagePathError,
)
from .loader import FailureKind, LoadOutcome, LoadStatus, PackageLoader, resolve_package_path
from .manifest import read_manifest
from .policies import LoadPolicy, ThemePolicy
from .registry import PackageRegistry

__all__ = [
    'MANIFEST_FILENAME',
    'DiscoveryReport',
    'FailureKind',
    'LoadOutcome',
    'LoadPolicy',
    'LoadStatus',
    'ManifestNotFoundError',
    'ManifestParseError',
    'NepetaConfig',
    'NepetaCore',
    'NepetaError',
    'PackageDescriptor',
    'PackageIoError',
    'PackageLoader',
    'PackageNotLoadedError',
    'PackageRegistry',
    'PackageType',
    'RegistryFrozenError',
    'ThemeConflictError',
    'ThemePolicy',
    'UnsafePackagePathError',
    'discover_and_load_all',
    'ensure_safe_package_name',
    'enumerate_packages',
    'parse_package_manifest',
    'read_manifest',
    'resolve_package_path',
]
