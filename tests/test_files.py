from pathlib import Path

import pytest

from pipelines.build.context import BuildContext, main_module_from_dist_name
from pipelines.common.encoding import RAW_ENCODING, decode_content
from pipelines.common.files import FileSet, InMemoryFile


def test_content_watchers_fire_only_on_change() -> None:
    file = InMemoryFile("lib/Foo.pm", "a")
    seen = []
    file.watch(lambda changed: seen.append(changed.content))

    file.content = "a"
    file.content = "b"

    assert seen == ["b"]


def test_file_set_rejects_duplicates_and_missing_removals() -> None:
    files = FileSet([InMemoryFile("README")])
    with pytest.raises(ValueError):
        files.insert(InMemoryFile("README"))
    with pytest.raises(ValueError):
        files.remove(InMemoryFile("other"))
    assert files.names() == ["README"]
    assert "README" in files


def test_file_set_iteration_tolerates_removal() -> None:
    files = FileSet([InMemoryFile("a"), InMemoryFile("b")])
    for file in files:
        files.remove(file)
    assert len(files) == 0


def test_from_path_detects_undecodable_bytes(tmp_path: Path) -> None:
    path = tmp_path / "blob"
    path.write_bytes(b"\xff\xfe")
    file = InMemoryFile.from_path(path, "blob")
    assert file.encoding == RAW_ENCODING
    assert file.encoded_content() == b"\xff\xfe"


def test_decode_content_prefers_utf8() -> None:
    assert decode_content("Café".encode("utf-8")) == ("Café", "UTF-8")


@pytest.mark.parametrize(
    ("dist_name", "expected"),
    [
        ("Foo-Bar", "lib/Foo/Bar.pm"),
        ("Foo", "lib/Foo.pm"),
        ("Dist-Zilla-Plugin-Thing", "lib/Dist/Zilla/Plugin/Thing.pm"),
    ],
)
def test_main_module_from_dist_name(dist_name: str, expected: str) -> None:
    assert main_module_from_dist_name(dist_name) == expected


def test_shared_state_is_per_context(tmp_path: Path) -> None:
    first = BuildContext(root=tmp_path, main_module_name="lib/Foo.pm")
    second = BuildContext(root=tmp_path, main_module_name="lib/Foo.pm")
    state = first.shared_state("key", list)
    assert first.shared_state("key", list) is state
    assert second.shared_state("key", list) is not state
