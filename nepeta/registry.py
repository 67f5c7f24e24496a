"""In-memory registry of discovered packages and the active theme."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from .contracts import PackageDescriptor, PackageType
from .errors import RegistryFrozenError

if TYPE_CHECKING:
    from .loader import LoadOutcome

logger = logging.getLogger(__name__)


class PackageRegistry:
    """Registry written once during startup and read-only after ``freeze()``.

    Packages are keyed by their declared ``id``; a later package with the same
    id replaces the earlier one. Descriptors are also indexed by the directory
    name they were loaded from so the host can look them up by package name.
    """

    def __init__(self):
        self._available: tuple[str, ...] = ()
        self._packages: dict[str, PackageDescriptor] = {}
        self._by_name: dict[str, PackageDescriptor] = {}
        self._failures: dict[str, LoadOutcome] = {}
        self._active_theme: PackageDescriptor | None = None
        self._frozen = False

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, package_id: object) -> bool:
        return package_id in self._packages

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def available_packages(self) -> tuple[str, ...]:
        return self._available

    @property
    def loaded_packages(self) -> Mapping[str, PackageDescriptor]:
        return MappingProxyType(self._packages)

    @property
    def active_theme(self) -> PackageDescriptor | None:
        return self._active_theme

    def _ensure_writable(self, operation: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(operation)

    def set_available_packages(self, package_names: Iterable[str]) -> None:
        self._ensure_writable('set available packages')
        self._available = tuple(package_names)

    def register(self, descriptor: PackageDescriptor) -> None:
        self._ensure_writable(f'register package `{descriptor.id}`')

        previous = self._packages.get(descriptor.id)
        if previous is not None and previous.path_on_disk != descriptor.path_on_disk:
            logger.warning(
                'Package id `%s` from %s replaces the one loaded from %s',
                descriptor.id,
                descriptor.path_on_disk,
                previous.path_on_disk,
            )

        self._packages[descriptor.id] = descriptor
        self._by_name[descriptor.package_name] = descriptor
        self._failures.pop(descriptor.package_name, None)

    def set_active_theme(self, descriptor: PackageDescriptor) -> None:
        self._ensure_writable(f'activate theme `{descriptor.id}`')
        if descriptor.type is not PackageType.THEME:
            raise ValueError(f'package `{descriptor.id}` is a {descriptor.type.value}, not a theme')
        if descriptor.id not in self._packages:
            raise ValueError(f'theme `{descriptor.id}` must be registered before activation')
        self._active_theme = descriptor

    def record_failure(self, outcome: LoadOutcome) -> None:
        self._ensure_writable(f'record failure for `{outcome.package_name}`')
        self._failures[outcome.package_name] = outcome

    def get_package(self, package_id: str) -> PackageDescriptor | None:
        return self._packages.get(package_id)

    def get_package_by_name(self, package_name: str) -> PackageDescriptor | None:
        return self._by_name.get(package_name)

    def failure_for(self, package_name: str) -> LoadOutcome | None:
        return self._failures.get(package_name)

    def freeze(self) -> None:
        if not self._frozen:
            logger.debug('Package registry frozen with %d package(s)', len(self._packages))
        self._frozen = True

    def shutdown(self) -> None:
        """Drop every descriptor; the registry stays frozen afterwards."""
        self._available = ()
        self._packages.clear()
        self._by_name.clear()
        self._failures.clear()
        self._active_theme = None
        self._frozen = True


__all__ = ['PackageRegistry']
