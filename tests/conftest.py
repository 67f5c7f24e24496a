import json
import os
from pathlib import Path

import pytest


def _theme_payload(package_id: str = 'midnight', **overrides) -> dict:
    payload = {
        'id': package_id,
        'name': 'Midnight',
        'author': 'Nepeta Maintainers',
        'insertion_point': 'page.body',
        'extension_type': 'theme',
        'templates': {'header': 'templates/header.twig', 'footer': 'templates/footer.twig'},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def extensions_root(tmp_path: Path) -> Path:
    root = tmp_path / 'nepeta'
    root.mkdir()
    return root


@pytest.fixture
def manifest_payload():
    """Factory for a valid theme manifest; keyword overrides replace fields."""
    return _theme_payload


@pytest.fixture
def make_package(extensions_root: Path):
    """Create ``<root>/<folder>/manifest.json``; pass ``raw`` to write text verbatim."""

    def _make(folder: str, payload: dict | None = None, *, raw: str | None = None) -> Path:
        package_dir = extensions_root / folder
        package_dir.mkdir(parents=True, exist_ok=True)
        manifest = package_dir / 'manifest.json'
        if raw is not None:
            manifest.write_text(raw, encoding='utf-8')
        elif payload is not None:
            manifest.write_text(f'{json.dumps(payload, indent=2)}\n', encoding='utf-8')
        return package_dir

    return _make


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from NEPETA_* variables and config files in the working directory."""
    for key in list(os.environ):
        if key.startswith('NEPETA_'):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
