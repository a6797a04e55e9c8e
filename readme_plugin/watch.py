"""Run-scoped bookkeeping of source files being watched for edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Set

SourceListener = Callable[[Any], None]


@dataclass(slots=True)
class WatchRegistry:
    """Attach at most one listener per source filename.

    Every plugin instance reading the same source subscribes to that one
    listener, which hands the change to each subscriber in turn.
    Subscribers are keyed by the instance itself, so two instances that
    share a name still both hear about edits.
    """

    watched: Set[str] = field(default_factory=set)
    subscribers: Dict[str, Dict[object, SourceListener]] = field(
        default_factory=dict
    )

    def subscribe(
        self, source_file: Any, key: object, listener: SourceListener
    ) -> bool:
        """Subscribe ``listener``; True when a new file watch was attached."""

        name = source_file.name
        self.subscribers.setdefault(name, {}).setdefault(key, listener)
        if name in self.watched:
            return False
        self.watched.add(name)
        source_file.watch(lambda changed: self._dispatch(name, changed))
        return True

    def _dispatch(self, name: str, changed_file: Any) -> None:
        for listener in list(self.subscribers.get(name, {}).values()):
            listener(changed_file)


__all__ = ["SourceListener", "WatchRegistry"]
