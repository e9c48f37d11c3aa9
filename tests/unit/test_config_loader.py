from __future__ import annotations
import pytest
from pathlib import Path

from dojo_import.config.loader import ConfigError, ImportConfig, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.profile == "test_registrations"
    assert cfg.error_display_limit == 5
    assert cfg.belt_qualifier == "đai"
    assert cfg.database.user == "appuser"
    assert cfg.database.port == 5432
    assert cfg.database.dsn is None


def test_default_path_without_file_uses_defaults(temp_workdir: Path):
    assert load_config() == ImportConfig()


def test_default_path_is_read(write_config: Path):
    assert load_config().error_display_limit == 5


def test_explicit_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_unknown_key_rejected(write_config: Path):
    write_config.write_text("profile: exam_results\nsource_directory: ./data\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_unknown_profile_rejected(write_config: Path):
    write_config.write_text("profile: attendance\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_invalid_limit_rejected(write_config: Path):
    write_config.write_text("error_display_limit: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_invalid_yaml(write_config: Path):
    write_config.write_text("profile: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_empty_file_means_defaults(write_config: Path):
    write_config.write_text("", encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg.strict_enums is False
    assert cfg.belt_substring_fallback is True
