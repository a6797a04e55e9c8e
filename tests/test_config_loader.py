import json
from pathlib import Path

import pytest

from config_loader import ConfigError, load_config, resolve_runtime_settings
from pipelines.build import Spec


def write_config(directory: Path, data, name: str = "readme.json") -> Path:
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_config_resolves_dir_keys(tmp_path: Path) -> None:
    path = write_config(tmp_path, {"name": "Foo-Bar", "build_dir": "out"})
    config = load_config(str(path))
    assert config["build_dir"] == str(tmp_path / "out")
    assert config["root"] == str(tmp_path)


def test_load_config_honours_environment_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = write_config(tmp_path, {"name": "Foo"}, name="custom.json")
    monkeypatch.setenv("README_ANY_CONFIG", str(path))
    assert load_config()["name"] == "Foo"


def test_load_config_searches_root(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("README_ANY_CONFIG", raising=False)
    write_config(tmp_path, {"name": "Foo"})
    assert load_config(root=str(tmp_path))["name"] == "Foo"


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]"])
def test_load_config_rejects_bad_documents(
    tmp_path: Path, payload: str
) -> None:
    path = tmp_path / "readme.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_missing_config_raises(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("README_ANY_CONFIG", raising=False)
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "absent.json"))


def test_runtime_settings_require_existing_root(tmp_path: Path) -> None:
    path = write_config(tmp_path, {"name": "Foo"})
    with pytest.raises(ConfigError):
        resolve_runtime_settings(
            config_path=str(path), root=str(tmp_path / "nope")
        )


def test_runtime_settings_verbose_flag(tmp_path: Path) -> None:
    path = write_config(tmp_path, {"name": "Foo", "verbose": True})
    settings = resolve_runtime_settings(config_path=str(path))
    assert settings["verbose"] is True
    assert settings["root"] == str(tmp_path)


def test_spec_from_config_collects_plugin_options(tmp_path: Path) -> None:
    spec = Spec.from_config(
        {
            "name": "Foo-Bar",
            "plugins": [
                {
                    "plugin": "ReadmeAnyFromPod",
                    "name": "HtmlInRoot",
                    "phase": "release",
                }
            ],
        },
        tmp_path,
    )
    assert spec.dist_name == "Foo-Bar"
    assert spec.build_root == tmp_path / ".build"
    declaration = spec.plugins[0]
    assert declaration.instance_name == "HtmlInRoot"
    assert declaration.options == {"phase": "release"}


@pytest.mark.parametrize(
    "config",
    [
        {"plugins": []},
        {"name": "Foo", "plugins": ["ReadmeAnyFromPod"]},
        {"name": "Foo", "plugins": [{"name": "x"}]},
        {"name": "Foo", "plugins": [{"plugin": "PodWeaver"}]},
        {
            "name": "Foo",
            "plugins": [
                {"plugin": "ReadmeAnyFromPod"},
                {"plugin": "ReadmeAnyFromPod"},
            ],
        },
    ],
)
def test_spec_from_config_rejects_bad_entries(
    tmp_path: Path, config: dict
) -> None:
    with pytest.raises(ConfigError):
        Spec.from_config(config, tmp_path)
