import os
from pathlib import Path

import pytest

from nepeta.config import NepetaConfig
from nepeta.core import NepetaCore
from nepeta.discovery import discover_and_load_all, enumerate_packages
from nepeta.errors import PackageIoError
from nepeta.loader import FailureKind, LoadStatus, PackageLoader
from nepeta.policies import LoadPolicy
from nepeta.registry import PackageRegistry


@pytest.fixture
def registry():
    return PackageRegistry()


@pytest.fixture
def loader(extensions_root, registry):
    return PackageLoader(extensions_root, registry)


class TestEnumeratePackages:
    def test_lists_directories_only(self, extensions_root, make_package):
        make_package('beta')
        make_package('alpha')
        (extensions_root / 'notes.txt').write_text('stray\n', encoding='utf-8')

        assert enumerate_packages(extensions_root) == ['alpha', 'beta']

    def test_hidden_directories_are_packages(self, extensions_root, make_package):
        make_package('.midnight')
        make_package('daylight')

        assert enumerate_packages(extensions_root) == ['.midnight', 'daylight']

    def test_unstattable_root_is_io_error(self, extensions_root, monkeypatch):
        def deny(self, *args, **kwargs):
            raise PermissionError(13, 'Permission denied', str(self))

        monkeypatch.setattr(Path, 'exists', deny)

        with pytest.raises(PackageIoError, match='Permission denied'):
            enumerate_packages(extensions_root)

    def test_missing_root_is_empty(self, tmp_path):
        assert enumerate_packages(tmp_path / 'absent') == []

    def test_root_must_be_directory(self, tmp_path):
        root = tmp_path / 'nepeta'
        root.write_text('', encoding='utf-8')

        with pytest.raises(PackageIoError, match='not a directory'):
            enumerate_packages(root)


def test_stops_on_first_failure(loader, registry, make_package, manifest_payload):
    make_package('a-theme', manifest_payload(id='a'))
    make_package('b-broken', raw='{ this is not json')
    make_package('c-extension', manifest_payload(id='c', extension_type='extension'))

    report = discover_and_load_all(loader)

    assert report.result is LoadStatus.FAILED
    assert [item.package_name for item in report.outcomes] == ['a-theme', 'b-broken']
    assert report.failures[0].failure is FailureKind.PARSE_ERROR
    assert report.skipped == ['c-extension']
    assert list(registry.loaded_packages) == ['a']
    assert registry.active_theme.id == 'a'
    assert registry.get_package('c') is None
    assert registry.available_packages == ('a-theme', 'b-broken', 'c-extension')


def test_theme_without_templates_leaves_theme_unset(loader, registry, make_package, manifest_payload):
    make_package('x', manifest_payload(id='x', extension_type='extension'))
    make_package('y', manifest_payload(id='y', templates=None))

    report = discover_and_load_all(loader)

    assert report.ok
    assert sorted(registry.loaded_packages) == ['x', 'y']
    assert registry.active_theme is None
    assert [item.id for item in report.loaded] == ['x', 'y']


def test_last_theme_with_templates_is_active(loader, registry, make_package, manifest_payload):
    make_package('p1', manifest_payload(id='p1'))
    make_package('p2', manifest_payload(id='p2'))
    make_package('p3', manifest_payload(id='p3', templates={}))
    make_package('p4', manifest_payload(id='p4', extension_type='extension'))

    report = discover_and_load_all(loader)

    assert report.ok
    assert registry.active_theme.id == 'p2'


def test_best_effort_loads_past_failures(loader, registry, make_package, manifest_payload):
    make_package('a-theme', manifest_payload(id='a'))
    make_package('b-empty')
    make_package('c-extension', manifest_payload(id='c', extension_type='extension'))

    report = discover_and_load_all(loader, policy=LoadPolicy.BEST_EFFORT)

    assert report.result is LoadStatus.FAILED
    assert report.skipped == []
    assert [item.failure for item in report.failures] == [FailureKind.NOT_FOUND]
    assert sorted(registry.loaded_packages) == ['a', 'c']


def test_stray_files_are_not_packages(loader, registry, extensions_root, make_package, manifest_payload):
    make_package('midnight', manifest_payload())
    (extensions_root / 'index.html').write_text('<html></html>\n', encoding='utf-8')

    report = discover_and_load_all(loader)

    assert report.ok
    assert registry.available_packages == ('midnight',)


def test_empty_root_succeeds(loader, registry):
    report = discover_and_load_all(loader)

    assert report.ok
    assert report.outcomes == []
    assert registry.available_packages == ()


def test_unreadable_root_reports_failure(tmp_path, registry):
    root = tmp_path / 'nepeta'
    root.write_text('', encoding='utf-8')

    report = discover_and_load_all(PackageLoader(root, registry))

    assert report.result is LoadStatus.FAILED
    assert 'not a directory' in report.root_error
    assert report.outcomes == []


def test_hidden_theme_is_loaded(loader, registry, make_package, manifest_payload):
    make_package('.midnight', manifest_payload())

    report = discover_and_load_all(loader)

    assert report.ok
    assert registry.available_packages == ('.midnight',)
    assert registry.active_theme.id == 'midnight'


def test_io_error_stops_discovery(loader, registry, make_package, manifest_payload, monkeypatch):
    make_package('a-locked', manifest_payload(id='a'))
    make_package('b-extension', manifest_payload(id='b', extension_type='extension'))
    original_read_text = Path.read_text

    def guarded_read_text(self, *args, **kwargs):
        if self.parent.name == 'a-locked':
            raise PermissionError(13, 'Permission denied', str(self))
        return original_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, 'read_text', guarded_read_text)

    report = discover_and_load_all(loader)

    assert report.result is LoadStatus.FAILED
    assert report.failures[0].failure is FailureKind.IO_ERROR
    assert report.skipped == ['b-extension']
    assert len(registry) == 0


@pytest.mark.skipif(
    not hasattr(os, 'geteuid') or os.geteuid() == 0,
    reason='permission bits are not enforced for root',
)
def test_locked_package_directory_does_not_crash_startup(extensions_root, make_package, manifest_payload):
    locked = make_package('a-locked', manifest_payload(id='a'))
    make_package('b-extension', manifest_payload(id='b', extension_type='extension'))
    locked.chmod(0)
    try:
        core = NepetaCore(NepetaConfig(enabled=True, extensions_root=extensions_root))
        report = core.init()
    finally:
        locked.chmod(0o755)

    assert report.result is LoadStatus.FAILED
    assert report.failures[0].package_name == 'a-locked'
    assert report.failures[0].failure in (FailureKind.IO_ERROR, FailureKind.NOT_FOUND)
    assert core.get_package('a') is None
