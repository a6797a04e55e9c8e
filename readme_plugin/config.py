"""Resolve the effective settings of a README plugin instance."""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Mapping, Optional

from .errors import InvalidConfiguration
from .models import BUILD_STAGES, LOCATIONS, PHASES, PluginConfig
from .naming import NameResolver
from .registry import lookup

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "text"
DEFAULT_LOCATION = "build"
DEFAULT_PHASE = "build"
DEFAULT_BUILD_STAGE = "munge"
COMPANION_POD_SUFFIX = ".pod"

OPTION_NAMES: tuple[str, ...] = (
    "type",
    "filename",
    "source_filename",
    "location",
    "phase",
    "build_stage",
)


def companion_pod_name(module_name: str) -> Optional[str]:
    """Return the ``.pod`` sibling name for a ``.pm`` module, if any."""

    path = PurePosixPath(module_name)
    if path.suffix != ".pm":
        return None
    return str(path.with_suffix(COMPANION_POD_SUFFIX))


class ConfigResolver:
    """Merge explicit options, name inference and defaults.

    Every field is computed on first access and cached, so later edits
    to ``overrides`` are not observed.
    """

    def __init__(
        self,
        *,
        plugin_name: str,
        overrides: Mapping[str, Any] | None,
        name_resolver: NameResolver,
        main_module_name: Callable[[], str],
        root: Path,
    ) -> None:
        self.plugin_name = plugin_name
        self.overrides: dict[str, Any] = dict(overrides or {})
        unknown = sorted(set(self.overrides) - set(OPTION_NAMES))
        if unknown:
            raise InvalidConfiguration(
                f"{plugin_name}: unknown option(s): {', '.join(unknown)}"
            )
        self._name_resolver = name_resolver
        self._main_module_name = main_module_name
        self._root = Path(root)
        self._validated = False

    def _explicit(self, option: str) -> Optional[str]:
        value = self.overrides.get(option)
        if value is None or value == "":
            return None
        return str(value)

    @cached_property
    def _inferred(self) -> tuple[Optional[str], Optional[str]]:
        return self._name_resolver.resolve(self.plugin_name)

    @cached_property
    def type(self) -> str:
        value = self._explicit("type") or self._inferred[0] or DEFAULT_TYPE
        lookup(value)
        return value

    @cached_property
    def location(self) -> str:
        value = (
            self._explicit("location") or self._inferred[1] or DEFAULT_LOCATION
        )
        _check_choice("location", value, LOCATIONS)
        return value

    @cached_property
    def phase(self) -> str:
        value = self._explicit("phase") or DEFAULT_PHASE
        _check_choice("phase", value, PHASES)
        return value

    @cached_property
    def build_stage(self) -> str:
        value = self._explicit("build_stage") or DEFAULT_BUILD_STAGE
        _check_choice("build_stage", value, BUILD_STAGES)
        return value

    @cached_property
    def filename(self) -> str:
        return self._explicit("filename") or lookup(self.type).output_filename

    @cached_property
    def source_filename(self) -> str:
        explicit = self._explicit("source_filename")
        if explicit:
            return explicit
        module_name = self._main_module_name()
        companion = companion_pod_name(module_name)
        if companion and (self._root / companion).exists():
            return companion
        return module_name

    def validate(self) -> None:
        """Reject contradictory settings and warn about risky ones."""

        if self._validated:
            return
        if self.location == "build" and self.phase == "release":
            raise InvalidConfiguration(
                f"{self.plugin_name}: You cannot use location=build"
                " with phase=release!"
            )
        if self.location == "build" and self.type == "pod":
            logger.warning(
                "[%s] You are creating a .pod directly in the build - be"
                " aware that this will be installed like a .pm file and as"
                " a manpage",
                self.plugin_name,
            )
        # Resolved here so a bad value fails before any hook runs.
        self.build_stage
        self._validated = True

    def resolve(self) -> PluginConfig:
        """Return the complete, validated configuration."""

        self.validate()
        return PluginConfig(
            format=self.type,
            filename=self.filename,
            source_filename=self.source_filename,
            location=self.location,  # type: ignore[arg-type]
            phase=self.phase,  # type: ignore[arg-type]
            build_stage=self.build_stage,  # type: ignore[arg-type]
        )


def _check_choice(option: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise InvalidConfiguration(
            f"Invalid {option} {value!r}; expected one of:"
            f" {', '.join(choices)}"
        )


__all__ = [
    "ConfigResolver",
    "DEFAULT_LOCATION",
    "DEFAULT_PHASE",
    "DEFAULT_TYPE",
    "OPTION_NAMES",
    "companion_pod_name",
]
