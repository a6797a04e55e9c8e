"""Execution wrapper that runs a build (and release) through the plugins."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

from pipelines.build.context import (  # type: ignore[import]
    BuildContext,
    main_module_from_dist_name,
)
from pipelines.build.plugins import get_plugin  # type: ignore[import]
from pipelines.build.roles import (  # type: ignore[import]
    AfterBuild,
    AfterRelease,
    FileGatherer,
    FileMunger,
    FilePruner,
    InstallerSetup,
    plugins_with,
)
from pipelines.build.spec import Spec  # type: ignore[import]
from pipelines.common import paths  # type: ignore[import]
from pipelines.common.files import InMemoryFile  # type: ignore[import]
from readme_plugin.errors import UnknownEncoding

logger = logging.getLogger(__name__)

GATHER_ADDED_BY = "gather"


@dataclass(slots=True)
class BuildResult:
    """The finished run: its context and where the build was written."""

    context: BuildContext
    build_root: Path

    @property
    def files(self) -> List[InMemoryFile]:
        return self.context.files.list()


def create_context(spec: Spec) -> BuildContext:
    """Return a fresh context with every configured plugin constructed.

    Plugins validate their settings while being constructed, so bad
    configuration fails here before any file is gathered.
    """

    main_module = spec.main_module or main_module_from_dist_name(
        spec.dist_name
    )
    context = BuildContext(
        root=spec.root,
        main_module_name=main_module,
        build_root=spec.build_root,
    )
    for declaration in spec.plugins:
        plugin_cls = get_plugin(declaration.moniker)
        plugin: Any = plugin_cls(
            context,
            name=declaration.instance_name,
            options=declaration.options,
        )
        context.plugins.append(plugin)
    return context


def gather_root_files(context: BuildContext) -> int:
    """Load every non-hidden file under the root into the build."""

    root = context.root
    count = 0
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if context.build_root is not None and (
            path.resolve() == context.build_root.resolve()
            or context.build_root.resolve() in path.resolve().parents
        ):
            continue
        context.files.insert(
            InMemoryFile.from_path(
                path, relative.as_posix(), added_by=GATHER_ADDED_BY
            )
        )
        count += 1
    return count


def write_build_dir(context: BuildContext, build_root: Path) -> None:
    """Write the build files out to ``build_root``, replacing old output."""

    if not paths.is_within(build_root, context.root):
        raise ValueError(
            f"Refusing to write build outside the project root: {build_root}"
        )
    if build_root.exists():
        shutil.rmtree(build_root)
    build_root.mkdir(parents=True)
    for file in context.files:
        destination = build_root / file.name
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            payload = file.encoded_content()
        except LookupError as exc:
            raise UnknownEncoding(str(file.encoding), file.name) from exc
        destination.write_bytes(payload)
    logger.info("Wrote %d file(s) to %s", len(context.files), build_root)


def run_build(context: BuildContext, spec: Spec) -> BuildResult:
    """Drive ``context`` through every build phase."""

    if spec.gather:
        gathered = gather_root_files(context)
        logger.debug("Gathered %d file(s) from %s", gathered, context.root)

    for gatherer in plugins_with(context.plugins, FileGatherer):
        gatherer.gather_files()
    for pruner in plugins_with(context.plugins, FilePruner):
        pruner.prune_files()
    for munger in plugins_with(context.plugins, FileMunger):
        munger.munge_files()
    for installer in plugins_with(context.plugins, InstallerSetup):
        installer.setup_installer()

    build_root = spec.build_root
    write_build_dir(context, build_root)

    for plugin in plugins_with(context.plugins, AfterBuild):
        plugin.after_build()

    return BuildResult(context=context, build_root=build_root)


def build(spec: Spec) -> BuildResult:
    """Run a complete build for ``spec``."""

    return run_build(create_context(spec), spec)


def release(spec: Spec) -> BuildResult:
    """Build, then run the after-release hooks."""

    result = build(spec)
    for plugin in plugins_with(result.context.plugins, AfterRelease):
        plugin.after_release()
    return result


__all__ = [
    "BuildResult",
    "build",
    "create_context",
    "gather_root_files",
    "release",
    "run_build",
    "write_build_dir",
]
