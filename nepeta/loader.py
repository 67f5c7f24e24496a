"""Load one package into the registry and report a typed outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .contracts import PackageDescriptor, PackageType, ensure_safe_package_name
from .errors import (
    ManifestNotFoundError,
    ManifestParseError,
    NepetaError,
    PackageIoError,
    ThemeConflictError,
    UnsafePackagePathError,
)
from .manifest import read_manifest
from .policies import ThemePolicy
from .registry import PackageRegistry

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    SUCCESS = 'success'
    FAILED = 'failed'


class FailureKind(str, Enum):
    NOT_FOUND = 'not_found'
    PARSE_ERROR = 'parse_error'
    IO_ERROR = 'io_error'
    UNSAFE_PATH = 'unsafe_path'
    THEME_CONFLICT = 'theme_conflict'


@dataclass(slots=True)
class LoadOutcome:
    """Result of loading a single package."""

    package_name: str
    status: LoadStatus
    descriptor: PackageDescriptor | None = None
    failure: FailureKind | None = None
    message: str | None = None
    field: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.SUCCESS

    def render(self) -> str:
        if self.ok and self.descriptor is not None:
            return f'[OK] {self.package_name}: loaded `{self.descriptor.id}` ({self.descriptor.type.value})'

        kind = self.failure.value if self.failure else 'failed'
        text = f'[{kind.upper()}] {self.package_name}: {self.message}'
        if self.field:
            text += f' (field: {self.field})'
        return text


def resolve_package_path(extensions_root: Path, package_name: str) -> Path:
    """Return ``<root>/<package_name>``, refusing anything that escapes the root."""

    safe_name = ensure_safe_package_name(package_name)
    try:
        resolved_root = extensions_root.resolve()
        candidate = resolved_root / safe_name
        target = candidate.resolve()
    except (OSError, RuntimeError) as exc:
        raise PackageIoError(extensions_root / safe_name, str(exc)) from exc

    if target == resolved_root:
        raise UnsafePackagePathError(package_name, 'resolves to the extensions root')
    try:
        target.relative_to(resolved_root)
    except ValueError as exc:
        raise UnsafePackagePathError(package_name, f'resolves outside {resolved_root}') from exc

    return candidate


class PackageLoader:
    """Loads packages from ``extensions_root`` into ``registry``."""

    def __init__(
        self,
        extensions_root: Path,
        registry: PackageRegistry,
        *,
        theme_policy: ThemePolicy = ThemePolicy.LAST_WINS,
    ):
        self.extensions_root = extensions_root
        self.registry = registry
        self.theme_policy = theme_policy

    def _should_activate(self, descriptor: PackageDescriptor) -> bool:
        if not descriptor.is_theme_candidate:
            return False

        current = self.registry.active_theme
        if current is None or self.theme_policy is ThemePolicy.LAST_WINS:
            return True

        if self.theme_policy is ThemePolicy.FIRST_WINS:
            logger.info('Theme `%s` registered; `%s` stays active', descriptor.id, current.id)
            return False

        raise ThemeConflictError(current.id, descriptor.id)

    def _fail(self, package_name: str, kind: FailureKind, exc: NepetaError) -> LoadOutcome:
        outcome = LoadOutcome(
            package_name=package_name,
            status=LoadStatus.FAILED,
            failure=kind,
            message=exc.message,
            field=getattr(exc, 'field', None),
        )
        if kind is FailureKind.NOT_FOUND:
            logger.warning('Package %s has no manifest: %s', package_name, exc.message)
        else:
            logger.error('Failed to load package %s: %s', package_name, exc.message)
        self.registry.record_failure(outcome)
        return outcome

    def load_package(self, package_name: str) -> LoadOutcome:
        try:
            package_path = resolve_package_path(self.extensions_root, package_name)
            descriptor = read_manifest(package_path)
            activate = self._should_activate(descriptor)
        except UnsafePackagePathError as exc:
            return self._fail(package_name, FailureKind.UNSAFE_PATH, exc)
        except ManifestNotFoundError as exc:
            return self._fail(package_name, FailureKind.NOT_FOUND, exc)
        except ManifestParseError as exc:
            return self._fail(package_name, FailureKind.PARSE_ERROR, exc)
        except PackageIoError as exc:
            return self._fail(package_name, FailureKind.IO_ERROR, exc)
        except ThemeConflictError as exc:
            return self._fail(package_name, FailureKind.THEME_CONFLICT, exc)

        self.registry.register(descriptor)
        if activate:
            self.registry.set_active_theme(descriptor)
            logger.info('Active theme set to `%s` from %s', descriptor.id, package_name)

        if descriptor.type is PackageType.UNKNOWN:
            logger.warning(
                'Package %s declares unrecognized extension_type %r',
                package_name,
                descriptor.extension_type,
            )

        logger.debug('Loaded package %s as `%s`', package_name, descriptor.id)
        return LoadOutcome(package_name=package_name, status=LoadStatus.SUCCESS, descriptor=descriptor)


__all__ = [
    'FailureKind',
    'LoadOutcome',
    'LoadStatus',
    'PackageLoader',
    'resolve_package_path',
]
