# Plugin registry
from __future__ import annotations

from readme_plugin import ReadmeAnyFromPod

PLUGINS: dict[str, type] = {
    ReadmeAnyFromPod.moniker: ReadmeAnyFromPod,
}


def get_plugin(moniker: str) -> type:
    """Return the plugin class for ``moniker``; raises KeyError if unknown."""
    if moniker not in PLUGINS:
        raise KeyError(f"Unknown plugin: {moniker}")
    return PLUGINS[moniker]
