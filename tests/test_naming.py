import pytest

from readme_plugin.naming import NameCache, NameResolver


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("ReadmeMarkdownInRoot", ("markdown", "root")),
        ("READMEHTMLINROOT", ("html", "root")),
        ("HtmlInRoot", ("html", "root")),
        ("textroot", ("text", "root")),
        ("PodInBuild", ("pod", "build")),
        ("  gfm  ", ("gfm", None)),
        ("@Bundle/ReadmePodInBuild", ("pod", "build")),
        ("a/b/HtmlInRoot", ("html", "root")),
    ],
)
def test_resolve_infers_type_and_location(name, expected) -> None:
    assert NameResolver().resolve(name) == expected


@pytest.mark.parametrize(
    "name",
    [
        "ReadmeAnyFromPod",
        "ReadmeMarkdownInRootXYZ",
        "RootInMarkdown",
        "README.md",
        "HtmlInRoot/extra",
        "",
    ],
)
def test_resolve_ignores_names_outside_the_grammar(name: str) -> None:
    assert NameResolver().resolve(name) == (None, None)


def test_resolve_memoizes_in_the_shared_cache() -> None:
    cache = NameCache()
    first = NameResolver(cache)
    second = NameResolver(cache)

    assert first.resolve("GfmInRoot") == ("gfm", "root")
    assert cache.entries["GfmInRoot"] == ("gfm", "root")
    assert second.resolve("GfmInRoot") is cache.entries["GfmInRoot"]


def test_separate_caches_do_not_share_entries() -> None:
    first = NameCache()
    second = NameCache()
    NameResolver(first).resolve("TextInBuild")
    assert "TextInBuild" in first.entries
    assert second.entries == {}


def test_restricted_format_ids_narrow_the_grammar() -> None:
    resolver = NameResolver(format_ids=("text",))
    assert resolver.resolve("MarkdownInRoot") == (None, None)
    assert resolver.resolve("TextInRoot") == ("text", "root")
