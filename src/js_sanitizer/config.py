"""Layered TOML configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .constants import (
    CONFIG_EXCLUDE,
    CONFIG_EXTENSIONS,
    CONFIG_INCLUDE,
    CONFIG_LOG_FILE,
    DEFAULT_LOG_FILE,
    ENV_CONFIG_PATH,
)
from .errors import ConfigLoadError
from .syntax import LANGUAGE_BY_SUFFIX

TOML_CONFIG = ".js-sanitizer.toml"
PYPROJECT_TABLE = "js-sanitizer"

DEFAULT_CONFIG_TEXT = f"""\
# js-sanitizer configuration

# Files to gate (gitignore-style patterns, relative to the scanned root).
{CONFIG_INCLUDE} = [
    "*.test.*",
    "*.spec.*",
    "**/__tests__/**",
]

# Paths never touched.
{CONFIG_EXCLUDE} = [
    "node_modules/",
    "dist/",
    "build/",
    "coverage/",
]

# Source suffixes handed to the parser.
{CONFIG_EXTENSIONS} = [{", ".join(f'"{s}"' for s in LANGUAGE_BY_SUFFIX)}]

# Audit log, relative to the working directory. An empty string disables it.
{CONFIG_LOG_FILE} = "{DEFAULT_LOG_FILE}"
"""


def load_default_config() -> dict[str, Any]:
    """Return the built-in defaults as plain Python values."""
    return tomlkit.loads(DEFAULT_CONFIG_TEXT).unwrap()


def write_default_config(target_dir: Path) -> Path:
    """Write the commented default configuration into ``target_dir``."""
    toml_path = target_dir / TOML_CONFIG
    toml_path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    return toml_path


def _load_with_extends(path: Path, *, _visited: set[Path] | None = None) -> dict[str, Any]:
    """Load a TOML file honouring an optional ``extends`` key.

    Relative ``extends`` entries resolve against the directory of ``path``;
    the extending file overrides what it extends.
    """
    if _visited is None:
        _visited = set()
    real = path.resolve()
    if real in _visited:
        return {}
    _visited.add(real)

    try:
        data = tomlkit.loads(path.read_text(encoding="utf-8")).unwrap()
    except OSError as e:
        msg = f"Error reading {path}: {e}"
        raise ConfigLoadError(msg) from e
    except TOMLKitError as e:
        msg = f"Error parsing {path.name}: {e}"
        raise ConfigLoadError(msg) from e

    base_cfg: dict[str, Any] = {}
    ext = data.get("extends")
    if isinstance(ext, str):
        ext_list = [ext]
    elif isinstance(ext, list):
        ext_list = [e for e in ext if isinstance(e, str)]
    else:
        ext_list = []
    for entry in ext_list:
        ext_path = Path(entry)
        if not ext_path.is_absolute():
            ext_path = (path.parent / ext_path).resolve()
        if ext_path.exists():
            base_cfg |= _load_with_extends(ext_path, _visited=_visited)

    base_cfg |= {k: v for k, v in data.items() if k != "extends"}
    return base_cfg


def load_toml_config(path: Path) -> dict[str, Any]:
    return _load_with_extends(path)


def _xdg_config_path() -> Path:
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    xdg_dir = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return xdg_dir / "js-sanitizer" / "config.toml"


def _merge_pyproject_cfg(pyproject_path: Path, cfg: dict[str, Any]) -> dict[str, Any]:
    if not pyproject_path.exists():
        return cfg
    try:
        data = tomlkit.loads(pyproject_path.read_text(encoding="utf-8")).unwrap()
    except TOMLKitError as e:
        msg = f"Error parsing pyproject.toml: {e}"
        raise ConfigLoadError(msg) from e
    tool = data.get("tool", {})
    if isinstance(tool, dict):
        table = tool.get(PYPROJECT_TABLE)
        if isinstance(table, dict):
            cfg |= table
    return cfg


def _validate(cfg: dict[str, Any]) -> dict[str, Any]:
    for key in (CONFIG_INCLUDE, CONFIG_EXCLUDE, CONFIG_EXTENSIONS):
        value = cfg.get(key, [])
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            msg = f"'{key}' must be a list of strings"
            raise ConfigLoadError(msg)
    log_file = cfg.get(CONFIG_LOG_FILE, DEFAULT_LOG_FILE)
    if not isinstance(log_file, str):
        msg = f"'{CONFIG_LOG_FILE}' must be a string"
        raise ConfigLoadError(msg)
    return cfg


def read_config(
    *,
    base_path: Path,
    ignore_defaults: bool = False,
    explicit_config: Path | None = None,
) -> dict[str, Any]:
    """Read configuration, later sources overriding earlier ones.

    Precedence (low to high):
      1. built-in defaults (unless ``ignore_defaults``)
      2. $XDG_CONFIG_HOME/js-sanitizer/config.toml
      3. .js-sanitizer.toml in ``base_path``
      4. [tool.js-sanitizer] in ``base_path``/pyproject.toml
      5. $JS_SANITIZER_CONFIG_PATH
      6. ``explicit_config`` (--config)
    """
    cfg: dict[str, Any] = {} if ignore_defaults else load_default_config()

    for p in (_xdg_config_path(), base_path / TOML_CONFIG):
        if p.exists():
            cfg |= load_toml_config(p)

    cfg = _merge_pyproject_cfg(base_path / "pyproject.toml", cfg)

    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        p = Path(env_path)
        if p.exists():
            cfg |= load_toml_config(p)

    if explicit_config:
        if not explicit_config.exists():
            msg = f"Explicit config file not found: {explicit_config}"
            raise ConfigLoadError(msg)
        cfg |= load_toml_config(explicit_config)

    return _validate(cfg)


def resolve_log_path(cfg: dict[str, Any], *, cwd: Path, override: Path | None = None) -> Path | None:
    """Return the audit log path, or ``None`` when logging to a file is disabled."""
    if override is not None:
        return override if override.is_absolute() else cwd / override
    raw = cfg.get(CONFIG_LOG_FILE, DEFAULT_LOG_FILE)
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_absolute() else cwd / path
