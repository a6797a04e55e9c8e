"""Build plugin that keeps a README in sync with the main module's POD."""

from __future__ import annotations

import logging
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Any, Mapping

from pipelines.common.checksum import write_if_changed  # type: ignore[import]
from pipelines.common.files import InMemoryFile  # type: ignore[import]

from .config import ConfigResolver
from .content import ContentPipeline, locate_source
from .errors import TargetFileMissing
from .models import PluginConfig
from .naming import NameCache, NameResolver
from .registry import lookup
from .watch import WatchRegistry

logger = logging.getLogger(__name__)

PLACEHOLDER_CONTENT = "this will be overwritten"
NAME_CACHE_KEY = "readme_plugin.name_cache"
WATCH_REGISTRY_KEY = "readme_plugin.watch_registry"


class LifecycleState(Enum):
    IDLE = "idle"
    REGISTERED = "registered"
    CONTENT_GENERATED = "content_generated"
    WATCHING = "watching"
    REGENERATED = "regenerated"


class ReadmeAnyFromPod:
    """Generate a README in any supported format from POD.

    ``location=build`` files are created during gathering and filled in
    while munging (or during installer setup with
    ``build_stage=installer``). ``location=root`` files are written next
    to the project after the build or after the release, depending on
    ``phase``.
    """

    moniker = "ReadmeAnyFromPod"

    def __init__(
        self,
        context: Any,
        *,
        name: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self.context = context
        self.plugin_name = name or self.moniker
        self.state = LifecycleState.IDLE
        self.pipeline = ContentPipeline()
        name_cache = context.shared_state(NAME_CACHE_KEY, NameCache)
        self._resolver = ConfigResolver(
            plugin_name=self.plugin_name,
            overrides=options,
            name_resolver=NameResolver(name_cache),
            main_module_name=lambda: context.main_module_name,
            root=context.root,
        )
        self._resolver.validate()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.plugin_name!r})"

    @cached_property
    def config(self) -> PluginConfig:
        return self._resolver.resolve()

    def gather_files(self) -> None:
        """Add a placeholder early so other plugins see the README coming."""

        config = self.config
        if config.location != "build":
            return
        # The README may also be checked in to the project itself.
        if self.context.files.find(config.filename) is None:
            self.context.files.insert(
                InMemoryFile(
                    config.filename,
                    PLACEHOLDER_CONTENT,
                    added_by=f"{self.moniker}/{self.plugin_name}",
                )
            )
        self.state = LifecycleState.REGISTERED

    def prune_files(self) -> None:
        """Keep a root README gathered from disk out of the build.

        Left alone when another instance of this plugin builds the same
        file into the dist.
        """

        config = self.config
        if config.location != "root":
            return
        for other in self.context.plugins:
            if (
                type(other) is type(self)
                and other.config.location == "build"
                and other.config.filename == config.filename
            ):
                return
        for file in self.context.files.list():
            if file.name != config.filename:
                continue
            logger.debug("[%s] pruning %s", self.plugin_name, file.name)
            self.context.files.remove(file)

    def munge_files(self) -> None:
        config = self.config
        if config.location != "build" or config.build_stage != "munge":
            return
        self.munge_file(self._target_file())

    def munge_file(self, target_file: InMemoryFile) -> None:
        """Write the README content into ``target_file`` in the build."""

        source_file = self._source_file()
        registry = self.context.shared_state(
            WATCH_REGISTRY_KEY, WatchRegistry
        )
        registry.subscribe(
            source_file,
            self,
            lambda changed: self._source_changed(changed, target_file),
        )

        logger.debug(
            "[%s] updating contents of %s in dist",
            self.plugin_name,
            target_file.name,
        )
        target_file.content = self.get_readme_content()
        if self.state is not LifecycleState.REGENERATED:
            self.state = LifecycleState.WATCHING

    def setup_installer(self) -> None:
        """Fill in the build README unconditionally, without watching."""

        config = self.config
        if config.location != "build" or config.build_stage != "installer":
            return
        target_file = self._target_file()
        logger.debug(
            "[%s] updating contents of %s in dist",
            self.plugin_name,
            target_file.name,
        )
        target_file.content = self.get_readme_content()
        self.state = LifecycleState.CONTENT_GENERATED

    def after_build(self) -> None:
        if self.config.phase == "build":
            self._create_readme()

    def after_release(self) -> None:
        if self.config.phase == "release":
            self._create_readme()

    def get_readme_content(self) -> str:
        """Return the README text in the configured format."""

        markup = self.pipeline.extract_markup(self._source_file().content)
        return self.pipeline.render_text(markup, lookup(self.config.format))

    def _source_changed(
        self, changed_file: Any, target_file: InMemoryFile
    ) -> None:
        if not self.pipeline.snapshot.is_stale(changed_file.content):
            self.state = LifecycleState.WATCHING
            return
        logger.info(
            "[%s] someone tried to munge %s after we read from it."
            " Making modifications again...",
            self.plugin_name,
            changed_file.name,
        )
        self.state = LifecycleState.REGENERATED
        self.munge_file(target_file)

    def _create_readme(self) -> None:
        config = self.config
        if config.location != "root":
            return
        logger.debug(
            "[%s] updating contents of %s in root",
            self.plugin_name,
            config.filename,
        )
        source_file = self._source_file()
        markup = self.pipeline.extract_markup(source_file.content)
        payload = self.pipeline.render(
            markup,
            lookup(config.format),
            source_file.encoding,
            source_name=source_file.name,
        )

        destination = Path(self.context.root) / config.filename
        if destination.exists():
            logger.info(
                "[%s] overriding %s in root",
                self.plugin_name,
                config.filename,
            )
        if not write_if_changed(destination, payload):
            logger.debug("[%s] %s unchanged", self.plugin_name, destination)
        self.state = LifecycleState.CONTENT_GENERATED

    def _source_file(self) -> InMemoryFile:
        return locate_source(self.context.files, self.config.source_filename)

    def _target_file(self) -> InMemoryFile:
        filename = self.config.filename
        target_file = self.context.files.find(filename)
        if target_file is None:
            raise TargetFileMissing(filename)
        return target_file


__all__ = [
    "LifecycleState",
    "PLACEHOLDER_CONTENT",
    "ReadmeAnyFromPod",
]
