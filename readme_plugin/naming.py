"""Infer README type and location from a plugin instance name.

Names follow ``["Readme"] <type> [["In"] <location>]``, compared
case-insensitively against the text after the last ``/``. Anything that
does not fit the whole segment is ignored and infers nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Pattern

from .models import LOCATIONS
from .registry import all_format_ids

NameInference = tuple[Optional[str], Optional[str]]


def build_name_pattern(
    format_ids: Iterable[str], locations: Iterable[str] = LOCATIONS
) -> Pattern[str]:
    """Compile the instance-name grammar for the given tokens."""

    # Longest first so no token shadows another that extends it.
    type_alternatives = "|".join(
        re.escape(token) for token in sorted(format_ids, key=len, reverse=True)
    )
    location_alternatives = "|".join(
        re.escape(token) for token in sorted(locations, key=len, reverse=True)
    )
    return re.compile(
        rf"(?:\A|/)\s*(?:readme)?({type_alternatives})"
        rf"(?:(?:in)?({location_alternatives}))?\s*\Z",
        re.IGNORECASE,
    )


@dataclass(slots=True)
class NameCache:
    """Per-run memo of name inferences."""

    entries: dict[str, NameInference] = field(default_factory=dict)

    def clear(self) -> None:
        self.entries.clear()


class NameResolver:
    """Resolve ``(type, location)`` hints from plugin instance names."""

    def __init__(
        self,
        cache: NameCache | None = None,
        *,
        format_ids: Iterable[str] | None = None,
    ) -> None:
        self.cache = cache if cache is not None else NameCache()
        ids = all_format_ids() if format_ids is None else frozenset(format_ids)
        self._pattern = build_name_pattern(ids)

    def resolve(self, name: str) -> NameInference:
        """Return the inferred (type, location); (None, None) on no match."""

        cached = self.cache.entries.get(name)
        if cached is not None:
            return cached

        match = self._pattern.search(name.lower())
        if match:
            inference: NameInference = (match.group(1), match.group(2))
        else:
            inference = (None, None)
        self.cache.entries[name] = inference
        return inference


__all__ = ["NameCache", "NameInference", "NameResolver", "build_name_pattern"]
