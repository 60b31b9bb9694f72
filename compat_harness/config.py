"""
Load config from config.yaml with optional env overrides.
Single source of truth for the backend version list, the check and lint commands,
the selection variable, and the release default.
"""
from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .core.errors import ConfigurationError
from .core.types import VersionDescriptor

CONFIG_ENV_VAR = "COMPAT_HARNESS_CONFIG"
DEFAULT_CONFIG_NAME = "config.yaml"

# Defaults if no YAML or env
_DEFAULTS: Dict[str, Any] = {
    "backend": {
        "variable": "BACKEND_PACKAGE",
        "slot_name": "backend",
        "version_executable": None,
        "version_flag": "--version",
        "init": [],
    },
    "versions": [],
    "require_versions": True,
    "check": {"command": [], "cwd": "."},
    "lint": {"command": [], "cwd": "."},
    "env": {},
    "release": {"program": None, "default_backend": None},
}

_TRUE = ("1", "true", "yes", "y", "on")
_FALSE = ("0", "false", "no", "n", "off")


def _parse_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigurationError(f"Invalid boolean for {key}: {value!r}")


def _config_yaml_path(path: Optional[Union[str, Path]] = None) -> Tuple[Path, bool]:
    """Return (path, explicit). Explicit paths must exist; the cwd default may be absent."""
    if path:
        return Path(path), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    return Path.cwd() / DEFAULT_CONFIG_NAME, False


def _load_yaml(path: Optional[Union[str, Path]] = None) -> dict:
    config_path, explicit = _config_yaml_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigurationError(f"Config file not found: {config_path}")
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _parse_versions_env(raw: str) -> List[Dict[str, str]]:
    """Parse 'path' or 'provider=path' comma-separated entries."""
    entries: List[Dict[str, str]] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        if "=" in item:
            provider, bin_root = item.split("=", 1)
            entries.append({"provider": provider.strip(), "bin_root": bin_root.strip()})
        else:
            entries.append({"bin_root": item})
    return entries


def _env_overrides() -> dict:
    overrides: dict = {}
    versions = os.environ.get("COMPAT_HARNESS_VERSIONS")
    if versions:
        overrides["versions"] = _parse_versions_env(versions)
    default_backend = os.environ.get("COMPAT_HARNESS_DEFAULT_BACKEND")
    if default_backend:
        overrides.setdefault("release", {})["default_backend"] = default_backend
    require = os.environ.get("COMPAT_HARNESS_REQUIRE_VERSIONS")
    if require:
        overrides["require_versions"] = _parse_bool(require, "COMPAT_HARNESS_REQUIRE_VERSIONS")
    return overrides


def get_config(path: Optional[Union[str, Path]] = None) -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(copy.deepcopy(_DEFAULTS), _load_yaml(path))
    merged = _deep_merge(merged, _env_overrides())
    return merged


# ---------------------------------------------------------------------------
# Typed settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommandSettings:
    argv: Tuple[str, ...] = ()
    cwd: Path = Path(".")


@dataclass(frozen=True)
class BackendSettings:
    variable: str = "BACKEND_PACKAGE"
    slot_name: str = "backend"
    version_executable: Optional[str] = None
    version_flag: str = "--version"
    init: Tuple[Tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class ReleaseSettings:
    program: Optional[Path] = None
    default_backend: Optional[Path] = None


@dataclass(frozen=True)
class HarnessSettings:
    backend: BackendSettings = field(default_factory=BackendSettings)
    versions: Tuple[VersionDescriptor, ...] = ()
    require_versions: bool = True
    check: CommandSettings = field(default_factory=CommandSettings)
    lint: CommandSettings = field(default_factory=CommandSettings)
    env: Dict[str, str] = field(default_factory=dict)
    release: ReleaseSettings = field(default_factory=ReleaseSettings)


def _argv(value: Any, key: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{key} must be a list of strings, got {value!r}")
    if not all(isinstance(x, (str, int, float)) for x in value):
        raise ConfigurationError(f"{key} must be a list of strings, got {value!r}")
    return tuple(str(x) for x in value)


def _mapping(value: Any, key: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{key} must be a mapping, got {value!r}")
    return value


def _optional_path(value: Any) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(str(value))


def _descriptor(entry: Any, index: int) -> VersionDescriptor:
    if isinstance(entry, str):
        entry = {"bin_root": entry}
    if not isinstance(entry, dict):
        raise ConfigurationError(f"versions[{index}] must be a mapping or a path, got {entry!r}")
    bin_root = entry.get("bin_root")
    if not bin_root:
        raise ConfigurationError(f"versions[{index}] is missing bin_root")
    # Relative roots resolve against cwd, not the slot directory.
    root = Path(str(bin_root)).expanduser().absolute()
    provider = entry.get("provider") or str(root)
    name = entry.get("name")
    return VersionDescriptor(
        provider=str(provider),
        bin_root=root,
        name=str(name) if name is not None else None,
    )


def _command(section: dict, key: str) -> CommandSettings:
    return CommandSettings(
        argv=_argv(section.get("command"), f"{key}.command"),
        cwd=Path(str(section.get("cwd") or ".")),
    )


def load_settings(config: Optional[dict] = None) -> HarnessSettings:
    """Convert a merged config dict (default: get_config()) into typed settings."""
    if config is None:
        config = get_config()

    backend = _mapping(config.get("backend"), "backend")
    variable = backend.get("variable") or ""
    if not isinstance(variable, str) or not variable:
        raise ConfigurationError("backend.variable must be a non-empty string")
    slot_name = str(backend.get("slot_name") or "backend")
    if os.sep in slot_name or (os.altsep and os.altsep in slot_name):
        raise ConfigurationError(f"backend.slot_name must be a single path component, got {slot_name!r}")
    init_raw = backend.get("init") or []
    if not isinstance(init_raw, list):
        raise ConfigurationError("backend.init must be a list of commands")
    init = tuple(_argv(cmd, f"backend.init[{i}]") for i, cmd in enumerate(init_raw))
    version_executable = backend.get("version_executable")

    versions_raw = config.get("versions") or []
    if not isinstance(versions_raw, list):
        raise ConfigurationError("versions must be a list")

    env = {str(k): str(v) for k, v in _mapping(config.get("env"), "env").items()}
    release = _mapping(config.get("release"), "release")

    return HarnessSettings(
        backend=BackendSettings(
            variable=variable,
            slot_name=slot_name,
            version_executable=str(version_executable) if version_executable else None,
            version_flag=str(backend.get("version_flag") or "--version"),
            init=init,
        ),
        versions=tuple(_descriptor(e, i) for i, e in enumerate(versions_raw)),
        require_versions=_parse_bool(config.get("require_versions", True), "require_versions"),
        check=_command(_mapping(config.get("check"), "check"), "check"),
        lint=_command(_mapping(config.get("lint"), "lint"), "lint"),
        env=env,
        release=ReleaseSettings(
            program=_optional_path(release.get("program")),
            default_backend=_optional_path(release.get("default_backend")),
        ),
    )
