"""Build inputs: distribution settings and the configured plugin instances."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from config_loader import ConfigError  # type: ignore[import]
from pipelines.build.plugins import PLUGINS  # type: ignore[import]
from pipelines.common import paths  # type: ignore[import]

PLUGIN_KEYS = ("plugin", "name")


def _empty_declarations() -> list["PluginDeclaration"]:
    return []


@dataclass(slots=True)
class PluginDeclaration:
    """One configured plugin instance: class moniker, name and options."""

    moniker: str
    name: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def instance_name(self) -> str:
        return self.name or self.moniker


@dataclass(slots=True)
class Spec:
    """Inputs controlling a build run."""

    root: Path
    dist_name: str
    version: str = "0.001"
    main_module: Optional[str] = None
    build_dir: Optional[Path] = None
    gather: bool = True
    plugins: List[PluginDeclaration] = field(
        default_factory=_empty_declarations
    )

    @property
    def build_root(self) -> Path:
        if self.build_dir is None:
            return paths.default_build_root(self.root)
        if self.build_dir.is_absolute():
            return self.build_dir
        return self.root / self.build_dir

    @classmethod
    def from_config(cls, config: Mapping[str, Any], root: Path) -> "Spec":
        """Build a Spec from a loaded configuration mapping."""

        dist_name = config.get("name")
        if not dist_name:
            raise ConfigError("Missing distribution name ('name').")

        declarations: list[PluginDeclaration] = []
        for index, entry in enumerate(config.get("plugins") or []):
            if not isinstance(entry, dict):
                raise ConfigError(f"plugins[{index}] must be an object")
            moniker = entry.get("plugin")
            if not moniker:
                raise ConfigError(f"plugins[{index}] missing 'plugin'")
            if moniker not in PLUGINS:
                raise ConfigError(
                    f"plugins[{index}]: unknown plugin '{moniker}'"
                )
            options = {
                key: value
                for key, value in entry.items()
                if key not in PLUGIN_KEYS
            }
            declarations.append(
                PluginDeclaration(
                    moniker=moniker,
                    name=entry.get("name"),
                    options=options,
                )
            )

        names = [declaration.instance_name for declaration in declarations]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigError(
                f"Duplicate plugin name(s): {', '.join(duplicates)}"
            )

        build_dir = config.get("build_dir")
        return cls(
            root=root,
            dist_name=str(dist_name),
            version=str(config.get("version", "0.001")),
            main_module=config.get("main_module"),
            build_dir=Path(build_dir) if build_dir else None,
            gather=bool(config.get("gather", True)),
            plugins=declarations,
        )
