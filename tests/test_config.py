"""
Test Suite for Configuration Management
"""

import json

import pytest
import yaml

from vaultseed.config import (
    Config,
    ConfigLoader,
    ConfigValidator,
    get_default_config,
    create_small_preset,
)


class TestConfig:
    """Test Config dataclass behaviour"""

    def test_defaults_match_reference_scale(self):
        config = get_default_config()

        assert config.generation.num_accounts == 100
        assert config.generation.documents_per_account == 10000
        assert config.generation.batch_size == 1000
        assert config.generation.progress_interval == 100000
        assert config.total_documents == 1_000_000
        assert config.fixture.repeat == 100

    def test_created_on_follows_schema_version(self):
        config = Config()
        config.schema.version = "v1"
        assert config.include_created_on is False

        config.schema.version = "v2"
        assert config.include_created_on is True

    def test_merge_prefers_other(self):
        base = get_default_config()
        other = create_small_preset()

        merged = base.merge(other)

        assert merged.generation.num_accounts == 10
        assert merged.generation.batch_size == 250
        assert base.generation.num_accounts == 100


class TestConfigLoader:
    """Test loading configuration from files, dicts and presets"""

    @pytest.fixture
    def loader(self):
        return ConfigLoader()

    def test_load_sectioned_yaml(self, loader, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text(yaml.dump({
            'store': {'database_file': 'other.sqlite'},
            'generation': {'num_accounts': 5, 'batch_size': 10},
        }))

        config = loader.load_from_file(path)

        assert config.store.database_file == 'other.sqlite'
        assert config.generation.num_accounts == 5
        assert config.generation.batch_size == 10
        # untouched sections keep defaults
        assert config.schema.version == 'v2'
        assert config.generation.documents_per_account == 10000

    def test_load_appsettings_json(self, loader, tmp_path):
        path = tmp_path / "appsettings.json"
        path.write_text(json.dumps({
            'DatabaseFileName': 'testdb.sqlite',
            'ConnectionStrings': {'DefaultConnection': 'data source={0}'},
        }))

        config = loader.load_from_file(path)

        assert config.store.database_file == 'testdb.sqlite'
        assert config.store.connection_string == 'data source={0}'

    def test_missing_file_raises(self, loader, tmp_path):
        with pytest.raises(FileNotFoundError):
            loader.load_from_file(tmp_path / "absent.yaml")

    def test_unknown_section_rejected(self, loader):
        with pytest.raises(ValueError, match="Unknown configuration sections"):
            loader.load_from_dict({'generaton': {'num_accounts': 1}})

    def test_unknown_key_rejected(self, loader):
        with pytest.raises(ValueError, match="Invalid 'generation' configuration"):
            loader.load_from_dict({'generation': {'accounts': 1}})

    def test_merge_dict_over_preset(self, loader):
        base = loader.load_preset('small')

        merged = loader.merge_configs(base, {'generation': {'num_accounts': 4}, 'schema': {'version': 'v1'}})

        assert merged.generation.num_accounts == 4
        assert merged.schema.version == 'v1'
        # keys the override does not name keep the preset's values
        assert merged.generation.documents_per_account == 100
        assert merged.generation.batch_size == 250
        assert merged.store.database_file == 'SmartVault-small.sqlite'
        assert base.generation.num_accounts == 10

    def test_merge_dict_rejects_unknown_key(self, loader):
        with pytest.raises(ValueError, match="Invalid 'store' configuration"):
            loader.merge_configs(get_default_config(), {'store': {'path': 'x.sqlite'}})

    def test_merge_preset_name(self, loader):
        merged = loader.merge_configs(get_default_config(), 'legacy')

        assert merged.schema.version == 'v1'

    def test_shipped_presets(self, loader):
        presets = loader.list_presets()

        assert {'default', 'small', 'legacy'} <= set(presets)
        assert loader.load_preset('legacy').include_created_on is False
        assert loader.load_preset('small').total_documents == 1000

    def test_unknown_preset(self, loader):
        with pytest.raises(ValueError, match="not found"):
            loader.load_preset('nope')

    def test_save_and_reload(self, loader, tmp_path):
        config = create_small_preset()
        path = tmp_path / "out" / "config.yaml"

        loader.save_config(config, path)
        reloaded = loader.load_from_file(path)

        assert reloaded.to_dict() == config.to_dict()


class TestConfigValidator:
    """Test configuration validation"""

    def test_default_is_valid(self):
        is_valid, errors = ConfigValidator.validate(get_default_config())

        assert is_valid
        assert errors == []

    def test_invalid_values_reported(self):
        config = Config()
        config.generation.batch_size = 0
        config.generation.progress_interval = -1
        config.schema.version = 'v3'
        config.store.database_file = ''

        is_valid, errors = ConfigValidator.validate(config)

        assert not is_valid
        assert "batch_size must be positive" in errors
        assert "progress_interval must be positive" in errors
        assert "store.database_file is required" in errors
        assert any(e.startswith("schema.version") for e in errors)
