"""Tests for global config loading and saving."""

from pathlib import Path

import pytest

from wtshell.core.global_config import (
    GlobalConfig,
    load_global_config,
    save_global_config,
    update_global_config_field,
)


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    config = load_global_config(tmp_path / "missing.toml")

    assert config == GlobalConfig()
    assert config.underlying_command == "git"
    assert config.subcommand_token == "wt"
    assert config.wrapped_command == "git-wt"
    assert not config.strict_directives
    assert not config.warn_stale_directive


def test_load_partial_config(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('wrapped_command = "my-wt"\nstrict_directives = true\n', encoding="utf-8")

    config = load_global_config(path)

    assert config.wrapped_command == "my-wt"
    assert config.strict_directives
    assert config.underlying_command == "git"


def test_load_rejects_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('shell = "bash"\n', encoding="utf-8")

    with pytest.raises(ValueError, match="Unknown config keys"):
        load_global_config(path)


def test_load_rejects_wrong_types(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('strict_directives = "yes"\n', encoding="utf-8")

    with pytest.raises(ValueError, match="strict_directives"):
        load_global_config(path)


def test_load_rejects_empty_command(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('wrapped_command = ""\n', encoding="utf-8")

    with pytest.raises(ValueError, match="wrapped_command"):
        load_global_config(path)


def test_load_rejects_malformed_toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("wrapped_command = \n", encoding="utf-8")

    with pytest.raises(ValueError, match="Malformed config"):
        load_global_config(path)


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.toml"
    config = GlobalConfig(wrapped_command="wt-next", warn_stale_directive=True)

    save_global_config(config, path)

    assert load_global_config(path) == config


def test_save_preserves_comments(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('# keep me\nwrapped_command = "git-wt"\n', encoding="utf-8")

    save_global_config(GlobalConfig(wrapped_command="other"), path)

    content = path.read_text(encoding="utf-8")
    assert "# keep me" in content
    assert 'wrapped_command = "other"' in content


def test_update_string_field() -> None:
    config = update_global_config_field(GlobalConfig(), "subcommand_token", "tree")
    assert config.subcommand_token == "tree"


def test_update_boolean_field_is_case_insensitive() -> None:
    config = update_global_config_field(GlobalConfig(), "strict_directives", "TRUE")
    assert config.strict_directives


def test_update_rejects_invalid_boolean() -> None:
    with pytest.raises(ValueError, match="Invalid boolean value"):
        update_global_config_field(GlobalConfig(), "strict_directives", "maybe")


def test_update_rejects_command_with_whitespace() -> None:
    with pytest.raises(ValueError, match="whitespace"):
        update_global_config_field(GlobalConfig(), "wrapped_command", "git wt")


def test_update_rejects_unknown_key() -> None:
    with pytest.raises(ValueError, match="Invalid config key"):
        update_global_config_field(GlobalConfig(), "nope", "1")


def test_value_as_string() -> None:
    config = GlobalConfig(strict_directives=True)
    assert config.value_as_string("strict_directives") == "true"
    assert config.value_as_string("wrapped_command") == "git-wt"
