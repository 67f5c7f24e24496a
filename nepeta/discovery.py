"""Enumerate package directories and drive the loader over them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .contracts import PackageDescriptor
from .errors import PackageIoError
from .loader import LoadOutcome, LoadStatus, PackageLoader
from .policies import LoadPolicy

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DiscoveryReport:
    """Aggregate result of one discovery run."""

    result: LoadStatus = LoadStatus.SUCCESS
    outcomes: list[LoadOutcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    root_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is LoadStatus.SUCCESS

    @property
    def loaded(self) -> list[PackageDescriptor]:
        return [item.descriptor for item in self.outcomes if item.ok and item.descriptor is not None]

    @property
    def failures(self) -> list[LoadOutcome]:
        return [item for item in self.outcomes if not item.ok]


def _is_package_dir(candidate: Path) -> bool:
    try:
        is_dir = candidate.is_dir()
    except OSError as exc:
        raise PackageIoError(candidate, exc.strerror or str(exc)) from exc
    if not is_dir:
        logger.debug('Skipping non-directory entry %s', candidate)
        return False
    return True


def enumerate_packages(extensions_root: Path) -> list[str]:
    """Return the names of package directories directly under ``extensions_root``."""

    try:
        exists = extensions_root.exists()
        is_dir = exists and extensions_root.is_dir()
    except OSError as exc:
        raise PackageIoError(extensions_root, exc.strerror or str(exc)) from exc

    if not exists:
        logger.warning('Extensions root %s does not exist; no packages available', extensions_root)
        return []

    if not is_dir:
        raise PackageIoError(extensions_root, 'extensions root is not a directory')

    try:
        entries = list(extensions_root.iterdir())
    except OSError as exc:
        raise PackageIoError(extensions_root, exc.strerror or str(exc)) from exc

    return sorted(entry.name for entry in entries if _is_package_dir(entry))


def discover_and_load_all(
    loader: PackageLoader,
    *,
    policy: LoadPolicy = LoadPolicy.STOP_ON_FIRST_ERROR,
) -> DiscoveryReport:
    """Load every package under the loader's root into its registry.

    With ``STOP_ON_FIRST_ERROR`` the run ends at the first failing package and
    the remaining names are reported in ``skipped``. With ``BEST_EFFORT`` every
    package is attempted and the run fails if any package failed.
    """

    report = DiscoveryReport()
    try:
        package_names = enumerate_packages(loader.extensions_root)
    except PackageIoError as exc:
        logger.error('Package discovery aborted: %s', exc.message)
        report.result = LoadStatus.FAILED
        report.root_error = exc.message
        return report

    loader.registry.set_available_packages(package_names)
    logger.info('Discovered %d package(s) under %s', len(package_names), loader.extensions_root)

    for index, package_name in enumerate(package_names):
        outcome = loader.load_package(package_name)
        report.outcomes.append(outcome)
        if outcome.ok:
            continue

        report.result = LoadStatus.FAILED
        if policy is LoadPolicy.STOP_ON_FIRST_ERROR:
            report.skipped = package_names[index + 1 :]
            if report.skipped:
                logger.error(
                    'Stopping discovery after %s failed; skipped: %s',
                    package_name,
                    ', '.join(report.skipped),
                )
            break

    return report


__all__ = ['DiscoveryReport', 'discover_and_load_all', 'enumerate_packages']
