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

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .policies import LoadPolicy, ThemePolicy

DEFAULT_CONFIG_FILES = ('.nepeta.yaml', '.nepeta.yml', 'nepeta.yaml', 'nepeta.yml')


def _normalize_config_dict(config_dict: dict[str, Any]) -> dict[str, Any]:
    # The host application stores the feature flag as experiments.enableNepeta.
    experiments = config_dict.pop('experiments', None)
    if isinstance(experiments, dict) and 'enableNepeta' in experiments:
        config_dict.setdefault('enabled', experiments['enableNepeta'])
    return config_dict


class NepetaConfig(BaseSettings):
    """Configuration for the Nepeta package loader.

    Values come from keyword arguments, then ``NEPETA_*`` environment
    variables, then defaults. YAML files are read with ``from_yaml``.

    Examples:
        >>> config = NepetaConfig(enabled=True, extensions_root=Path('nepeta'))

        >>> # Load from YAML file
        >>> config = NepetaConfig.from_yaml('nepeta.yaml')

        >>> # Load from environment (looks for NEPETA_CONFIG_PATH)
        >>> config = NepetaConfig.from_env()
    """

    enabled: bool = Field(
        default=False,
        description='Whether the extensions system runs at startup',
    )
    extensions_root: Path = Field(
        default=Path('nepeta'),
        description='Directory holding one subdirectory per package',
    )
    document_root: Path | None = Field(
        default=None,
        description='Base directory for a relative extensions_root. Defaults to the working directory.',
    )
    load_policy: LoadPolicy = Field(
        default=LoadPolicy.STOP_ON_FIRST_ERROR,
        description='Whether discovery stops at the first failing package',
    )
    theme_policy: ThemePolicy = Field(
        default=ThemePolicy.LAST_WINS,
        description='How the active theme is chosen when several themes supply templates',
    )

    model_config = SettingsConfigDict(env_prefix='NEPETA_', extra='ignore')

    def resolved_extensions_root(self) -> Path:
        root = self.extensions_root.expanduser()
        if not root.is_absolute():
            base = self.document_root if self.document_root is not None else Path.cwd()
            root = base.expanduser() / root
        return root.resolve()

    @classmethod
    def from_yaml(cls, path: str | Path) -> 'NepetaConfig':
        """Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist
            ValueError: If the YAML document is not a mapping
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f'Configuration file not found: {path}')

        with open(path, encoding='utf-8') as f:
            config_dict = yaml.safe_load(f)

        if config_dict is None:
            config_dict = {}

        if not isinstance(config_dict, dict):
            raise ValueError(f'Configuration file {path} must contain a mapping')

        return cls(**_normalize_config_dict(config_dict))

    @classmethod
    def from_env(cls, env_var: str = 'NEPETA_CONFIG_PATH') -> 'NepetaConfig':
        """Load configuration from the YAML file named by ``env_var``.

        Falls back to a default config file in the working directory, then to
        environment variables and defaults.
        """
        config_path = os.getenv(env_var)
        if config_path:
            return cls.from_yaml(config_path)

        for default_file in DEFAULT_CONFIG_FILES:
            if Path(default_file).exists():
                return cls.from_yaml(default_file)

        return cls()

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        config_dict = self.model_dump(exclude_none=True, mode='json')

        with open(Path(path), 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
