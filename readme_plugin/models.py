"""Shared dataclasses for README configuration and generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

Location = Literal["build", "root"]
Phase = Literal["build", "release"]
BuildStage = Literal["munge", "installer"]

LOCATIONS: tuple[str, ...] = ("build", "root")
PHASES: tuple[str, ...] = ("build", "release")
BUILD_STAGES: tuple[str, ...] = ("munge", "installer")


@dataclass(frozen=True, slots=True)
class FormatSpec:
    """A README format: its default filename and its POD converter."""

    id: str
    output_filename: str
    convert: Callable[[str], str]


@dataclass(frozen=True, slots=True)
class PluginConfig:
    """Fully resolved settings for one plugin instance."""

    format: str
    filename: str
    source_filename: str
    location: Location
    phase: Phase
    build_stage: BuildStage = "munge"


@dataclass(slots=True)
class SourceSnapshot:
    """Source file content as of the last POD extraction."""

    last_seen_content: str = ""

    def is_stale(self, current_content: str) -> bool:
        """Return True when ``current_content`` differs from the snapshot."""

        return current_content != self.last_seen_content
