"""Tests for config module."""
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from book_inventory import config

NAMES = ("config.yaml", "config.json", "book-inventory.yaml", "book-inventory.json")


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run in tmp_path with only tmp_path searched for config files."""
    monkeypatch.chdir(tmp_path)
    with patch.object(config, '_get_config_dirs', return_value=[(tmp_path, NAMES)]):
        yield tmp_path


class TestFindConfigFiles:
    """Tests for find_config_files function."""

    def test_find_config_in_cwd_json(self, isolated):
        """Test finding config file in current directory (JSON)."""
        config_file = isolated / "book-inventory.json"
        config_file.write_text('{"test": true}')

        assert config.find_config_files() == [config_file]

    def test_find_config_in_cwd_yaml_preferred(self, isolated):
        """Test that YAML is preferred over JSON in same directory."""
        (isolated / "book-inventory.json").write_text('{"test": "json"}')
        yaml_file = isolated / "book-inventory.yaml"
        yaml_file.write_text('test: yaml')

        assert config.find_config_files() == [yaml_file]

    def test_config_yaml_preferred_over_legacy_name(self, isolated):
        """Test that config.json wins over book-inventory.json in cwd."""
        config_file = isolated / "config.json"
        config_file.write_text('{}')
        (isolated / "book-inventory.json").write_text('{}')

        assert config.find_config_files() == [config_file]

    def test_find_config_in_user_dir(self, tmp_path, monkeypatch):
        """Test finding config in user config directory."""
        cwd = tmp_path / "work"
        cwd.mkdir()
        monkeypatch.chdir(cwd)

        user_config_dir = tmp_path / ".config" / "book-inventory"
        user_config_dir.mkdir(parents=True)
        config_file = user_config_dir / "config.json"
        config_file.write_text('{"test": true}')

        with patch.object(config, '_get_config_dirs', return_value=[(user_config_dir, NAMES), (cwd, NAMES)]):
            assert config.find_config_files() == [config_file]

    def test_no_config_files(self, isolated):
        """Test that an empty list is returned when no config file exists."""
        assert config.find_config_files() == []

    def test_cwd_overrides_user_dir(self, tmp_path, monkeypatch):
        """Test that later locations take precedence when merging."""
        cwd = tmp_path / "work"
        cwd.mkdir()
        monkeypatch.chdir(cwd)
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "config.json").write_text('{"export_file": "user.csv", "log_level": "INFO"}')
        (cwd / "book-inventory.json").write_text('{"export_file": "local.csv"}')

        with patch.object(config, '_get_config_dirs', return_value=[(user_dir, NAMES), (cwd, NAMES)]):
            result = config.load_config()

        assert result["export_file"] == "local.csv"
        assert result["log_level"] == "INFO"


class TestMerge:
    """Tests for _merge function."""

    def test_simple_merge(self):
        """Test merging flat dictionaries."""
        base = {"a": 1, "b": 2}
        result = config._merge(base, {"b": 3, "c": 4})

        assert result == {"a": 1, "b": 3, "c": 4}
        assert result is base  # Modified in place

    def test_nested_merge(self):
        """Test merging nested dictionaries."""
        base = {"stats": {"top_authors": 5, "other": 1}}
        result = config._merge(base, {"stats": {"top_authors": 3}})

        assert result == {"stats": {"top_authors": 3, "other": 1}}

    def test_defaults_not_mutated(self, tmp_path):
        """Test that loading a config leaves DEFAULTS untouched."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"stats": {"top_authors": 2}}')

        config.load_config(config_file)

        assert config.DEFAULTS["stats"]["top_authors"] == 5


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_json_config(self, tmp_path):
        """Test loading JSON config file."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"inventory_file": "/data/books.json", "stats": {"top_authors": 10}}')

        result = config.load_config(config_file)

        assert result["inventory_file"] == "/data/books.json"
        assert result["stats"]["top_authors"] == 10
        assert result["export_file"] == "inventory.csv"  # From defaults

    def test_load_yaml_config(self, tmp_path):
        """Test loading YAML config file."""
        pytest.importorskip("yaml")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("stats:\n  top_authors: 7\n")

        result = config.load_config(config_file)

        assert result["stats"]["top_authors"] == 7

    def test_load_config_no_file(self, isolated):
        """Test loading config when no file exists returns defaults."""
        result = config.load_config()

        assert result["inventory_file"] == "bookInventory.json"
        assert result["stats"]["top_authors"] == 5

    def test_load_yaml_config_raises_without_pyyaml(self, tmp_path):
        """Test that loading YAML raises ImportError without pyyaml."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("stats:\n  top_authors: 9")

        with patch.dict('sys.modules', {'yaml': None}):
            with pytest.raises(ImportError, match="PyYAML required"):
                config.load_config(config_file)

    def test_malformed_json_raises(self, tmp_path):
        """Test that a broken config file is an error, not silently ignored."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{broken")

        with pytest.raises(json.JSONDecodeError):
            config.load_config(config_file)


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_simple_env_override(self, tmp_path, monkeypatch):
        """Test simple environment variable override."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")
        monkeypatch.setenv("BOOK_INVENTORY_INVENTORY_FILE", "/tmp/other.json")

        result = config.load_config(config_file)
        assert result["inventory_file"] == "/tmp/other.json"

    def test_nested_env_override(self, tmp_path, monkeypatch):
        """Test nested environment variable override with double underscore."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")
        monkeypatch.setenv("BOOK_INVENTORY_STATS__TOP_AUTHORS", "3")

        result = config.load_config(config_file)
        assert result["stats"]["top_authors"] == 3

    def test_env_override_wins_over_file(self, tmp_path, monkeypatch):
        """Test that environment beats file values."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"log_level": "INFO"}')
        monkeypatch.setenv("BOOK_INVENTORY_LOG_LEVEL", "debug")

        assert config.load_config(config_file)["log_level"] == "debug"

    def test_nested_env_override_keeps_siblings(self, tmp_path, monkeypatch):
        """Test that a nested override merges into the section from the file."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"stats": {"top_authors": 2, "extra": "kept"}}')
        monkeypatch.setenv("BOOK_INVENTORY_STATS__TOP_AUTHORS", "8")

        assert config.load_config(config_file)["stats"] == {"top_authors": 8, "extra": "kept"}


class TestEnvValue:
    """Tests for _env_value function."""

    def test_convert_integer(self):
        assert config._env_value("123") == 123
        assert config._env_value("-45") == -45

    def test_convert_float(self):
        assert config._env_value("3.14") == 3.14

    def test_convert_boolean(self):
        assert config._env_value("true") is True
        assert config._env_value("yes") is True
        assert config._env_value("false") is False
        assert config._env_value("No") is False

    def test_convert_string(self):
        assert config._env_value("books.json") == "books.json"


class TestConfigGet:
    """Tests for Config.get dotted lookup."""

    def test_dot_notation(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text('{"stats": {"top_authors": 4}}')

        assert config.Config(config_file).get("stats.top_authors") == 4

    def test_missing_key_returns_default(self, tmp_path):
        cfg = config.Config(tmp_path / "absent.json")

        assert cfg.path is None
        assert cfg.get("nonexistent") is None
        assert cfg.get("stats.missing", 42) == 42
        assert cfg.get("log_level.deeper", "x") == "x"

class TestConfigClass:
    """Tests for Config class."""

    def test_config_no_file_uses_defaults(self, isolated):
        """Test Config with no file uses defaults."""
        cfg = config.Config()

        assert cfg.path is None
        assert cfg.inventory_file == isolated / "bookInventory.json"
        assert cfg.export_file == Path("inventory.csv")
        assert cfg.top_authors == 5
        assert cfg.log_level == "WARNING"

    def test_config_loads_from_file(self, isolated):
        """Test Config class loads from the working directory."""
        config_file = isolated / "book-inventory.json"
        config_file.write_text(json.dumps({
            "inventory_file": "/custom/books.json",
            "export_file": "out.csv",
            "log_level": "info",
            "stats": {"top_authors": 3},
        }))

        cfg = config.Config()

        assert cfg.path == config_file
        assert cfg.inventory_file == Path("/custom/books.json")
        assert cfg.export_file == Path("out.csv")
        assert cfg.log_level == "INFO"
        assert cfg.top_authors == 3

    def test_relative_inventory_file_resolved(self, isolated):
        """Test that a relative inventory_file is anchored at cwd."""
        (isolated / "config.json").write_text('{"inventory_file": "data/books.json"}')

        cfg = config.Config()

        assert cfg.inventory_file == isolated / "data" / "books.json"

    def test_config_explicit_path(self, tmp_path):
        """Test Config class with explicit path."""
        config_file = tmp_path / "my-config.json"
        config_file.write_text('{"export_file": "mine.csv"}')

        cfg = config.Config(config_file)

        assert cfg.path == config_file
        assert cfg.export_file == Path("mine.csv")

    def test_invalid_top_authors_falls_back(self, tmp_path):
        """Test that a nonsense ranking size falls back to 5."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"stats": {"top_authors": "many"}}')

        assert config.Config(config_file).top_authors == 5
