"""Build a distribution and generate its README files from POD."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from config_loader import ConfigError, resolve_runtime_settings
from pipelines.build import BuildResult, Spec, build, release
from pipelines.common import paths  # type: ignore[import]
from readme_plugin import LifecycleState, ReadmeAnyFromPod, ReadmeError


def _setup_logging(verbose: bool) -> None:
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Return CLI arguments for the README build tool."""

    parser = argparse.ArgumentParser(
        description=(
            "Build the distribution and convert the main module's POD into"
            " README files."
        ),
    )
    parser.add_argument(
        "command",
        choices=("build", "release"),
        help=(
            "build runs the build phases; release also runs the"
            " after-release hooks."
        ),
    )
    parser.add_argument(
        "--config",
        help="Path to the build config JSON (defaults to readme.json).",
    )
    parser.add_argument(
        "--root",
        help="Project root (defaults to the config file's directory).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages.",
    )
    return parser.parse_args(argv)


def report(result: BuildResult) -> None:
    """Print where each README ended up."""

    print(f"✅ Build written: {result.build_root}")
    for plugin in result.context.plugins:
        if not isinstance(plugin, ReadmeAnyFromPod):
            continue
        config = plugin.config
        if config.location == "root":
            destination = result.context.root / config.filename
            if plugin.state is LifecycleState.CONTENT_GENERATED:
                print(f"✅ {plugin.plugin_name}: {destination}")
            else:
                print(
                    f"⏭️ {plugin.plugin_name}: {config.filename} waits for"
                    f" phase={config.phase}"
                )
        else:
            print(
                f"✅ {plugin.plugin_name}:"
                f" {result.build_root / config.filename}"
            )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the ``readme-any-from-pod`` CLI."""

    args = parse_args(argv)
    root_override = args.root or (
        str(paths.project_root()) if not args.config else None
    )
    try:
        settings = resolve_runtime_settings(
            config_path=args.config,
            root=root_override,
            verbose=args.verbose,
        )
        spec = Spec.from_config(settings, Path(settings["root"]))
    except ConfigError as exc:
        raise SystemExit(f"Config error: {exc}") from exc

    _setup_logging(settings["verbose"])

    runner = release if args.command == "release" else build
    try:
        result = runner(spec)
    except ReadmeError as exc:
        raise SystemExit(f"Build error: {exc}") from exc

    report(result)


__all__ = ["main", "parse_args", "report"]


if __name__ == "__main__":
    main()
