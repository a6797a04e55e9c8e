"""Helpers for resolving the build configuration file and runtime paths."""

import json
import os
from typing import Any, Dict, Optional

DEFAULT_CONFIG_NAME = "readme.json"


class ConfigError(Exception):
    """Raised when runtime configuration cannot be loaded."""


def _resolve_config_path(
    path: Optional[str], root: Optional[str] = None
) -> str:
    """Return the absolute config path, honoring overrides and defaults."""
    env_override = os.environ.get("README_ANY_CONFIG")
    candidate = path or env_override or DEFAULT_CONFIG_NAME
    expanded = os.path.expanduser(candidate)
    if os.path.isabs(expanded) and os.path.isfile(expanded):
        return expanded

    search_roots = [root] if root else []
    search_roots.append(os.getcwd())
    for search_root in search_roots:
        resolved = os.path.abspath(os.path.join(search_root, expanded))
        if os.path.isfile(resolved):
            return resolved

    raise ConfigError(f"Configuration file not found: {candidate}")


def _resolve_path(value: str, base_dir: str) -> str:
    """Resolve ``value`` into an absolute path relative to ``base_dir``."""
    expanded = os.path.expanduser(value)
    if os.path.isabs(expanded):
        return expanded
    return os.path.abspath(os.path.join(base_dir, expanded))


def load_config(
    path: Optional[str] = None, root: Optional[str] = None
) -> Dict[str, Any]:
    """Load a JSON config file and normalize any filesystem paths."""
    config_path = _resolve_config_path(path, root)
    try:
        with open(config_path, "r", encoding="utf-8") as config_file:
            data = json.load(config_file)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object.")

    base_dir = os.path.dirname(config_path)
    resolved: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str) and key.endswith(("_dir", "_path")):
            resolved[key] = _resolve_path(value, base_dir)
        else:
            resolved[key] = value

    resolved.setdefault("root", base_dir)
    return resolved


def resolve_runtime_settings(
    *,
    config_path: Optional[str] = None,
    root: Optional[str] = None,
    verbose: Optional[bool] = None,
) -> Dict[str, Any]:
    """Resolve runtime arguments by combining CLI overrides with config."""
    config = load_config(config_path, root)

    resolved_root = root or config["root"]
    if not os.path.isdir(resolved_root):
        raise ConfigError(f"Project root is not a directory: {resolved_root}")

    result: Dict[str, Any] = dict(config)
    result["root"] = (
        _resolve_path(resolved_root, os.getcwd())
        if not os.path.isabs(resolved_root)
        else resolved_root
    )
    result["verbose"] = bool(verbose or config.get("verbose", False))
    return result
