"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.wtshell/config.toml.
Loaded once at the CLI entry point; a missing file means all defaults.
"""

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

import tomlkit

STRING_KEYS = ("underlying_command", "subcommand_token", "wrapped_command")
BOOLEAN_KEYS = ("strict_directives", "warn_stale_directive")
CONFIG_KEYS = STRING_KEYS + BOOLEAN_KEYS


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Attributes:
        underlying_command: Command the dispatcher wraps
        subcommand_token: First argument that routes an invocation to the shim
        wrapped_command: External worktree executable run by the shim
        strict_directives: Refuse to change directory when more than one
            directive is received
        warn_stale_directive: Warn instead of staying silent when the directive
            target is not a directory
    """

    underlying_command: str = "git"
    subcommand_token: str = "wt"
    wrapped_command: str = "git-wt"
    strict_directives: bool = False
    warn_stale_directive: bool = False

    def value_as_string(self, key: str) -> str:
        """Render a config value the way it is written on the command line."""
        if key not in CONFIG_KEYS:
            raise ValueError(f"Invalid key: {key}")
        value = getattr(self, key)
        if isinstance(value, bool):
            return str(value).lower()
        return value


def global_config_path() -> Path:
    """Get the path to the global config file."""
    return Path.home() / ".wtshell" / "config.toml"


def _validate_string(key: str, value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{key}' must be a non-empty string")
    if any(ch.isspace() for ch in value):
        raise ValueError(f"'{key}' must not contain whitespace")
    return value


def _validate_boolean(key: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false")
    return value


def load_global_config(path: Path | None = None) -> GlobalConfig:
    """Load global config from ~/.wtshell/config.toml.

    Args:
        path: Config file path (defaults to ~/.wtshell/config.toml)

    Returns:
        GlobalConfig with values from the file, defaults for missing keys or
        a missing file

    Raises:
        ValueError: If the file is malformed, has unknown keys, or has values
            of the wrong type
    """
    config_path = path if path is not None else global_config_path()

    if not config_path.exists():
        return GlobalConfig()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Malformed config at {config_path}: {e}") from e

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    values: dict[str, str | bool] = {}
    try:
        for key in STRING_KEYS:
            if key in data:
                values[key] = _validate_string(key, data[key])
        for key in BOOLEAN_KEYS:
            if key in data:
                values[key] = _validate_boolean(key, data[key])
    except ValueError as e:
        raise ValueError(f"Invalid config at {config_path}: {e}") from e

    return replace(GlobalConfig(), **values)


def save_global_config(config: GlobalConfig, path: Path | None = None) -> None:
    """Save global config to ~/.wtshell/config.toml.

    Existing comments and formatting in the file are preserved.

    Args:
        config: GlobalConfig instance to save
        path: Config file path (defaults to ~/.wtshell/config.toml)
    """
    config_path = path if path is not None else global_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.exists():
        doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
    else:
        doc = tomlkit.document()
        doc.add(tomlkit.comment("Global wtshell configuration"))

    for key in CONFIG_KEYS:
        doc[key] = getattr(config, key)

    config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def _parse_boolean_value(value: str, field_name: str) -> bool:
    """Parse "true" or "false" (case-insensitive).

    Raises:
        ValueError: If the value is not a boolean literal
    """
    if value.lower() not in ("true", "false"):
        raise ValueError(f"Invalid boolean value for {field_name}: {value}")
    return value.lower() == "true"


def update_global_config_field(config: GlobalConfig, field_name: str, value: str) -> GlobalConfig:
    """Return a new GlobalConfig with one field set from its string form.

    Raises:
        ValueError: If the field name or value is invalid
    """
    match field_name:
        case "underlying_command" | "subcommand_token" | "wrapped_command":
            return replace(config, **{field_name: _validate_string(field_name, value)})
        case "strict_directives" | "warn_stale_directive":
            return replace(config, **{field_name: _parse_boolean_value(value, field_name)})
        case _:
            raise ValueError(f"Invalid config key: {field_name}")
