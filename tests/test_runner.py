from pathlib import Path

import pytest

from pipelines.build import PluginDeclaration, Spec, build, release
from pipelines.build.context import BuildContext
from pipelines.build.runner import create_context, run_build, write_build_dir
from pipelines.common.files import InMemoryFile
from readme_plugin import InvalidConfiguration, UnknownEncoding

from conftest import MAIN_MODULE, SAMPLE_SOURCE


@pytest.fixture
def project(tmp_path: Path) -> Path:
    module = tmp_path / MAIN_MODULE
    module.parent.mkdir(parents=True)
    module.write_text(SAMPLE_SOURCE, encoding="utf-8")
    return tmp_path


def make_spec(root: Path, *declarations: PluginDeclaration) -> Spec:
    return Spec(root=root, dist_name="Foo-Bar", plugins=list(declarations))


class LicenseWeaver:
    """Appends a section to the main module while munging."""

    def __init__(self, context) -> None:
        self.context = context

    def munge_files(self) -> None:
        source = self.context.files.find(MAIN_MODULE)
        source.content += "\n=head1 LICENSE\n\nMIT\n"


def test_markdown_in_root_is_written_and_kept_out_of_build(
    project: Path,
) -> None:
    spec = make_spec(
        project, PluginDeclaration("ReadmeAnyFromPod", "MarkdownInRoot")
    )

    result = build(spec)

    readme = project / "README.mkdn"
    assert "# NAME" in readme.read_text(encoding="utf-8")
    assert "README.mkdn" not in result.context.files
    assert not (result.build_root / "README.mkdn").exists()
    assert (result.build_root / MAIN_MODULE).exists()

    # The README now sits in the root and is gathered, then pruned.
    second = build(spec)
    assert "README.mkdn" not in second.context.files
    assert readme.read_text(encoding="utf-8").startswith("# NAME")


def test_default_instance_without_pod_writes_empty_readme(
    tmp_path: Path,
) -> None:
    module = tmp_path / MAIN_MODULE
    module.parent.mkdir(parents=True)
    module.write_text("package Foo::Bar;\n1;\n", encoding="utf-8")

    result = build(make_spec(tmp_path, PluginDeclaration("ReadmeAnyFromPod")))

    assert (result.build_root / "README").read_bytes() == b""


def test_text_readme_lands_in_build_dir(project: Path) -> None:
    result = build(make_spec(project, PluginDeclaration("ReadmeAnyFromPod")))
    written = (result.build_root / "README").read_text(encoding="utf-8")
    assert written.startswith("NAME\n\n    Foo::Bar - frobnicate things\n")
    assert not (project / "README").exists()


def test_invalid_configuration_fails_before_gathering(project: Path) -> None:
    spec = make_spec(
        project,
        PluginDeclaration(
            "ReadmeAnyFromPod",
            options={"location": "build", "phase": "release"},
        ),
    )
    with pytest.raises(InvalidConfiguration):
        build(spec)
    assert not spec.build_root.exists()


def test_release_phase_writes_only_on_release(project: Path) -> None:
    spec = make_spec(
        project,
        PluginDeclaration(
            "ReadmeAnyFromPod", "HtmlInRoot", {"phase": "release"}
        ),
    )

    build(spec)
    assert not (project / "README.html").exists()

    release(spec)
    assert (project / "README.html").exists()


def test_later_munger_edits_are_picked_up(project: Path) -> None:
    spec = make_spec(
        project,
        PluginDeclaration("ReadmeAnyFromPod", "TextInBuild"),
        PluginDeclaration("ReadmeAnyFromPod", "GfmInBuild"),
    )
    context = create_context(spec)
    context.plugins.append(LicenseWeaver(context))

    result = run_build(context, spec)

    assert "LICENSE" in (result.build_root / "README").read_text("utf-8")
    assert "# LICENSE" in (result.build_root / "README.md").read_text("utf-8")


def test_runs_do_not_share_state(project: Path) -> None:
    spec = make_spec(project, PluginDeclaration("ReadmeAnyFromPod"))
    first = build(spec)
    second = build(spec)
    key = "readme_plugin.name_cache"
    assert first.context.shared_state(key, dict) is not (
        second.context.shared_state(key, dict)
    )


def test_custom_build_dir_outside_root_is_refused(project: Path) -> None:
    spec = make_spec(project, PluginDeclaration("ReadmeAnyFromPod"))
    spec.build_dir = project.parent / "elsewhere"
    with pytest.raises(ValueError):
        build(spec)


def test_build_file_with_unknown_encoding_fails_cleanly(
    tmp_path: Path,
) -> None:
    context = BuildContext(root=tmp_path, main_module_name=MAIN_MODULE)
    context.files.insert(InMemoryFile("README", "x", encoding="no-such"))
    with pytest.raises(UnknownEncoding) as excinfo:
        write_build_dir(context, tmp_path / ".build")
    assert "README" in str(excinfo.value)
