"""Startup lifecycle and host-facing queries for the Nepeta extensions system."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import NepetaConfig
from .contracts import PackageDescriptor
from .discovery import DiscoveryReport, discover_and_load_all
from .errors import PackageNotLoadedError, RegistryFrozenError
from .loader import PackageLoader
from .registry import PackageRegistry

logger = logging.getLogger(__name__)


class NepetaCore:
    """Owns a package registry for the lifetime of the host application.

    Construct once at startup, call ``init()`` if ``is_enabled()``, then pass
    the instance to whatever needs the active theme or package info.
    """

    def __init__(self, config: NepetaConfig | None = None, registry: PackageRegistry | None = None):
        self.config = config if config is not None else NepetaConfig()
        self.registry = registry if registry is not None else PackageRegistry()
        self._report: DiscoveryReport | None = None

    @property
    def extensions_root(self) -> Path:
        return self.config.resolved_extensions_root()

    @property
    def report(self) -> DiscoveryReport | None:
        return self._report

    def is_enabled(self) -> bool:
        return self.config.enabled

    def init(self) -> DiscoveryReport:
        """Discover and load all packages, then freeze the registry."""
        if self.registry.frozen:
            raise RegistryFrozenError('run discovery twice')

        loader = PackageLoader(
            self.extensions_root,
            self.registry,
            theme_policy=self.config.theme_policy,
        )
        try:
            self._report = discover_and_load_all(loader, policy=self.config.load_policy)
        finally:
            self.registry.freeze()

        theme = self.registry.active_theme
        logger.info(
            'Nepeta startup %s: %d package(s) loaded, active theme: %s',
            self._report.result.value,
            len(self.registry),
            theme.id if theme else '<none>',
            extra={
                'extra_data': {
                    'extensions_root': str(self.extensions_root),
                    'skipped': list(self._report.skipped),
                }
            },
        )
        return self._report

    def shutdown(self) -> None:
        self.registry.shutdown()

    def get_theme(self) -> PackageDescriptor | None:
        return self.registry.active_theme

    def get_available_packages(self) -> tuple[str, ...]:
        return self.registry.available_packages

    def get_package(self, package_id: str) -> PackageDescriptor | None:
        return self.registry.get_package(package_id)

    def get_package_info(self, package_name: str) -> PackageDescriptor:
        """Return the descriptor loaded from directory ``package_name``.

        Raises:
            PackageNotLoadedError: explaining why no descriptor is available.
        """
        descriptor = self.registry.get_package_by_name(package_name)
        if descriptor is not None:
            return descriptor

        failure = self.registry.failure_for(package_name)
        if failure is not None:
            raise PackageNotLoadedError(package_name, failure.message or failure.status.value)

        if self._report is None:
            raise PackageNotLoadedError(package_name, 'discovery has not run')

        if package_name in self._report.skipped:
            raise PackageNotLoadedError(package_name, 'skipped after an earlier package failed to load')

        raise PackageNotLoadedError(package_name, f'no package directory under {self.extensions_root}')


__all__ = ['NepetaCore']
