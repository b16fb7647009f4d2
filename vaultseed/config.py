"""
Configuration Management Module

Handles loading, validation, and merging of seeding configurations
with support for presets, appsettings-style files and command-line overrides.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict, replace
from copy import deepcopy
import logging

from .utils import FileHandler, PathManager

logger = logging.getLogger(__name__)

PACKAGE_DATA_DIR = Path(__file__).parent / "data"

# Schema variants and whether their tables carry a CreatedOn column
SCHEMA_VERSIONS = {
    "v1": False,
    "v2": True,
}


@dataclass
class StoreConfig:
    """Configuration for the target SQLite store"""
    database_file: str = "SmartVault.sqlite"
    connection_string: str = "Data Source={0};Version=3;"
    enforce_foreign_keys: bool = True


@dataclass
class SchemaConfig:
    """Configuration for business object schema descriptors"""
    directory: Optional[str] = None  # defaults to the shipped descriptors
    version: str = "v2"  # v1 (no CreatedOn), v2 (CreatedOn)
    files: List[str] = field(default_factory=list)
    min_objects: int = 3

    def resolve_directory(self) -> Path:
        """Directory holding the descriptors for the selected version"""
        base = Path(self.directory) if self.directory else PACKAGE_DATA_DIR / "schema"
        versioned = base / self.version
        return versioned if versioned.is_dir() else base


@dataclass
class GenerationConfig:
    """Configuration for record volumes and batching"""
    num_accounts: int = 100
    documents_per_account: int = 10000
    batch_size: int = 1000
    progress_interval: int = 100000
    seed: Optional[int] = None
    date_of_birth_start: str = "1985-01-01"


@dataclass
class FixtureConfig:
    """Configuration for the placeholder fixture document"""
    path: str = "TestDoc.txt"
    line: str = "This is my test document"
    repeat: int = 100


@dataclass
class Config:
    """Main configuration class combining all sub-configurations"""
    store: StoreConfig = field(default_factory=StoreConfig)
    schema: SchemaConfig = field(default_factory=SchemaConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    fixture: FixtureConfig = field(default_factory=FixtureConfig)

    @property
    def include_created_on(self) -> bool:
        """Whether the selected schema variant has CreatedOn columns"""
        return SCHEMA_VERSIONS.get(self.schema.version, False)

    @property
    def total_documents(self) -> int:
        return self.generation.num_accounts * self.generation.documents_per_account

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return asdict(self)

    def merge(self, other: 'Config') -> 'Config':
        """Merge another configuration into this one (other takes precedence)"""
        merged = deepcopy(self)

        for key in ['store', 'schema', 'generation', 'fixture']:
            other_config = getattr(other, key)
            merged_config = getattr(merged, key)

            # Update non-None values
            for field_name, field_value in asdict(other_config).items():
                if field_value is not None:
                    setattr(merged_config, field_name, field_value)

        return merged


class ConfigLoader:
    """Loads and manages configuration from various sources"""

    SECTIONS = {
        'store': StoreConfig,
        'schema': SchemaConfig,
        'generation': GenerationConfig,
        'fixture': FixtureConfig,
    }

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the configuration loader

        Args:
            config_dir: Directory containing preset files
        """
        if config_dir is None:
            self.config_dir = PACKAGE_DATA_DIR / "presets"
        else:
            self.config_dir = Path(config_dir)

        self.presets = self._load_presets()

    def _load_presets(self) -> Dict[str, Config]:
        """Load all available preset configurations"""
        presets = {}

        if not self.config_dir.exists():
            logger.warning(f"Preset directory not found: {self.config_dir}")
            return presets

        for preset_file in sorted(self.config_dir.glob("*.yaml")):
            presets[preset_file.stem] = self.load_from_file(preset_file)
            logger.debug(f"Loaded preset: {preset_file.stem}")

        return presets

    def load_from_file(self, filepath: Union[str, Path]) -> Config:
        """
        Load configuration from a YAML or JSON file

        Args:
            filepath: Path to the configuration file

        Returns:
            Config object
        """
        config_dict = FileHandler.read_config(filepath)
        return self._dict_to_config(config_dict or {})

    def load_from_dict(self, config_dict: Dict[str, Any]) -> Config:
        """
        Load configuration from a dictionary

        Accepts either the sectioned layout or the flat appsettings layout
        (``DatabaseFileName`` / ``ConnectionStrings.DefaultConnection``).
        """
        return self._dict_to_config(config_dict)

    def load_preset(self, preset_name: str) -> Config:
        """
        Load a preset configuration by name

        Args:
            preset_name: Name of the preset (e.g., 'default', 'small')

        Returns:
            Config object
        """
        if preset_name not in self.presets:
            available = ", ".join(self.presets.keys())
            raise ValueError(f"Preset '{preset_name}' not found. Available: {available}")

        return deepcopy(self.presets[preset_name])

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> Config:
        """Convert dictionary to Config object"""
        return self._apply_dict(Config(), config_dict)

    def _apply_dict(self, config: Config, config_dict: Dict[str, Any]) -> Config:
        """Overwrite only the keys present in ``config_dict``"""
        config_dict = self._normalize_appsettings(config_dict)

        unknown = [key for key in config_dict if key not in self.SECTIONS]
        if unknown:
            raise ValueError(f"Unknown configuration sections: {unknown}")

        for key in self.SECTIONS:
            if key in config_dict:
                try:
                    setattr(config, key, replace(getattr(config, key), **(config_dict[key] or {})))
                except TypeError as e:
                    raise ValueError(f"Invalid '{key}' configuration: {e}") from e

        return config

    @staticmethod
    def _normalize_appsettings(config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Map appsettings.json keys onto the store section"""
        if 'DatabaseFileName' not in config_dict and 'ConnectionStrings' not in config_dict:
            return config_dict

        normalized = {k: v for k, v in config_dict.items()
                      if k not in ('DatabaseFileName', 'ConnectionStrings')}
        store = dict(normalized.get('store') or {})

        if 'DatabaseFileName' in config_dict:
            store['database_file'] = config_dict['DatabaseFileName']

        connection_strings = config_dict.get('ConnectionStrings') or {}
        if 'DefaultConnection' in connection_strings:
            store['connection_string'] = connection_strings['DefaultConnection']

        normalized['store'] = store
        return normalized

    def merge_configs(self, base: Config, override: Union[Config, Dict[str, Any], str]) -> Config:
        """
        Merge configurations with override taking precedence

        A dict override only replaces the keys it names, so a partial
        configuration file can be layered over a preset.

        Args:
            base: Base configuration
            override: Override configuration (Config object, dict, or preset name)

        Returns:
            Merged Config object
        """
        if isinstance(override, dict):
            return self._apply_dict(deepcopy(base), override)

        if isinstance(override, str):
            override = self.load_preset(override)

        return base.merge(override)

    def save_config(self, config: Config, filepath: Union[str, Path]):
        """
        Save configuration to a YAML file

        Args:
            config: Configuration to save
            filepath: Path to save the file
        """
        filepath = Path(filepath)
        PathManager.ensure_dir(filepath.parent)

        with open(filepath, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to: {filepath}")

    def list_presets(self) -> List[str]:
        """Get list of available preset names"""
        return list(self.presets.keys())


class ConfigValidator:
    """Validates configuration parameters"""

    @staticmethod
    def validate(config: Config) -> tuple[bool, List[str]]:
        """
        Validate configuration parameters

        Args:
            config: Configuration to validate

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        # Store
        if not config.store.database_file:
            errors.append("store.database_file is required")

        if not config.store.connection_string:
            errors.append("store.connection_string is required")

        # Schema
        if config.schema.version not in SCHEMA_VERSIONS:
            errors.append(f"schema.version must be one of {list(SCHEMA_VERSIONS)}")

        if config.schema.min_objects < 1:
            errors.append("schema.min_objects must be at least 1")

        # Generation
        if config.generation.num_accounts < 0:
            errors.append("num_accounts must not be negative")

        if config.generation.documents_per_account < 0:
            errors.append("documents_per_account must not be negative")

        if config.generation.batch_size <= 0:
            errors.append("batch_size must be positive")

        if config.generation.progress_interval <= 0:
            errors.append("progress_interval must be positive")

        # Fixture
        if not config.fixture.path:
            errors.append("fixture.path is required")

        if config.fixture.repeat <= 0:
            errors.append("fixture.repeat must be positive")

        return len(errors) == 0, errors


def get_default_config() -> Config:
    """Get the default (reference scale) configuration"""
    return Config()


def create_small_preset() -> Config:
    """Create a quick smoke-test preset configuration"""
    config = Config()
    config.generation.num_accounts = 10
    config.generation.documents_per_account = 100
    config.generation.batch_size = 250
    config.generation.progress_interval = 500
    return config
