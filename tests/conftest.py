"""Shared fixtures for the README plugin tests."""

from pathlib import Path
from typing import Any, Callable

import pytest

from pipelines.build.context import BuildContext
from pipelines.common.files import InMemoryFile
from readme_plugin import ReadmeAnyFromPod

MAIN_MODULE = "lib/Foo/Bar.pm"

SAMPLE_SOURCE = """package Foo::Bar;
use strict;

=head1 NAME

Foo::Bar - frobnicate things

=cut

sub frob { 1 }

=head1 SYNOPSIS

  Foo::Bar->frob;

=cut

1;
__END__

=head1 AUTHOR

Someone
"""

SAMPLE_MARKUP = (
    "=pod\n"
    "\n"
    "=head1 NAME\n"
    "\n"
    "Foo::Bar - frobnicate things\n"
    "\n"
    "=head1 SYNOPSIS\n"
    "\n"
    "  Foo::Bar->frob;\n"
    "\n"
    "=head1 AUTHOR\n"
    "\n"
    "Someone\n"
    "\n"
    "=cut\n"
)


@pytest.fixture
def make_context(tmp_path: Path) -> Callable[..., BuildContext]:
    def factory(source: str | None = SAMPLE_SOURCE) -> BuildContext:
        context = BuildContext(root=tmp_path, main_module_name=MAIN_MODULE)
        if source is not None:
            context.files.insert(InMemoryFile(MAIN_MODULE, source))
        return context

    return factory


@pytest.fixture
def add_plugin() -> Callable[..., ReadmeAnyFromPod]:
    def factory(
        context: BuildContext, name: str | None = None, **options: Any
    ) -> ReadmeAnyFromPod:
        plugin = ReadmeAnyFromPod(context, name=name, options=options)
        context.plugins.append(plugin)
        return plugin

    return factory
