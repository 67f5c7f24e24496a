"""Check a Nepeta extensions root and report what would load at startup."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import NepetaConfig
from .core import NepetaCore
from .logging_config import setup_logging
from .policies import LoadPolicy, ThemePolicy


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Discover and validate Nepeta themes and extensions.')
    parser.add_argument('--config', type=Path, default=None, help='YAML configuration file')
    parser.add_argument('--root', type=Path, default=None, help='Extensions root (overrides configuration)')
    parser.add_argument('--enable', action='store_true', help='Run even when Nepeta is disabled in configuration')
    parser.add_argument('--best-effort', action='store_true', help='Keep loading after a package fails')
    parser.add_argument(
        '--theme-policy',
        choices=[policy.value for policy in ThemePolicy],
        default=None,
        help='How the active theme is chosen',
    )
    parser.add_argument('--strict', action='store_true', help='Exit non-zero when any package fails to load')
    parser.add_argument('--log-level', default='WARNING')
    parser.add_argument('--log-format', choices=['structured', 'plain'], default='plain')
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> NepetaConfig:
    config = NepetaConfig.from_yaml(args.config) if args.config else NepetaConfig.from_env()

    overrides: dict[str, object] = {}
    if args.root is not None:
        overrides['extensions_root'] = args.root
    if args.enable:
        overrides['enabled'] = True
    if args.best_effort:
        overrides['load_policy'] = LoadPolicy.BEST_EFFORT
    if args.theme_policy is not None:
        overrides['theme_policy'] = ThemePolicy(args.theme_policy)

    return config.model_copy(update=overrides) if overrides else config


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_format)

    try:
        config = _build_config(args)
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        print(f'ERROR: {exc}', file=sys.stderr)
        return 2

    core = NepetaCore(config)
    if not core.is_enabled():
        print('Nepeta is disabled; skipping package discovery (use --enable to override).')
        return 0

    report = core.init()

    if report.root_error:
        print(f'Package discovery failed: {report.root_error}', file=sys.stderr)
    if report.failures:
        print('Package diagnostics:', file=sys.stderr)
        for outcome in report.failures:
            print(f'- {outcome.render()}', file=sys.stderr)
    if report.skipped:
        print(f'Skipped after failure: {", ".join(report.skipped)}', file=sys.stderr)

    loaded_ids = sorted(core.registry.loaded_packages)
    theme = core.get_theme()
    print(
        f'Nepeta {report.result.value} ({len(loaded_ids)} package(s)): '
        f'{", ".join(loaded_ids) if loaded_ids else "<none>"} '
        f'| active theme: {theme.id if theme else "<none>"}',
    )

    if not report.ok and args.strict:
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
