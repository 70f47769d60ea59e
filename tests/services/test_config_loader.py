import pytest

from autopackage.errors import ReleaseError
from autopackage.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".autopackage.yml"
    config_file.write_text(
        "solution: ./src/App.sln\nupload_to_web: true\nsign_tool_grace_seconds: 2.5\n",
        encoding="utf-8",
    )

    loader = ConfigLoader()
    loaded = loader.load(str(config_file))

    assert loaded["solution"] == str(tmp_path / "src" / "App.sln")
    assert loaded["upload_to_web"] is True
    assert loaded["sign_tool_grace_seconds"] == 2.5


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".autopackage.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    loader = ConfigLoader()

    with pytest.raises(ReleaseError, match="Unknown configuration keys"):
        loader.load(str(config_file))


def test_config_loader_rejects_non_mapping(tmp_path):
    config_file = tmp_path / ".autopackage.yml"
    config_file.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ReleaseError, match="YAML mapping"):
        ConfigLoader().load(str(config_file))


def test_config_loader_handles_missing_and_empty(tmp_path):
    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")

    assert ConfigLoader().load(None) == {}
    assert ConfigLoader().load(str(empty)) == {}
    with pytest.raises(ReleaseError, match="Config file not found"):
        ConfigLoader().load(str(tmp_path / "missing.yml"))


def test_config_loader_rejects_wrong_typed_number(tmp_path):
    config_file = tmp_path / ".autopackage.yml"
    config_file.write_text('sign_tool_grace_seconds: "soon"\n', encoding="utf-8")

    with pytest.raises(ReleaseError, match="'sign_tool_grace_seconds' must be a number"):
        ConfigLoader().load(str(config_file))


def test_config_loader_rejects_quoted_boolean(tmp_path):
    config_file = tmp_path / ".autopackage.yml"
    config_file.write_text('upload_to_web: "false"\n', encoding="utf-8")

    with pytest.raises(ReleaseError, match="'upload_to_web' must be true or false"):
        ConfigLoader().load(str(config_file))


def test_config_loader_resolves_paths_against_config_folder(tmp_path):
    config_dir = tmp_path / "ci"
    config_dir.mkdir()
    config_file = config_dir / "release.yml"
    config_file.write_text(
        "sign_tool: tools/SignTool.exe\n"
        "packaging_script: build/pack.bat\n"
        "packaging_timeout_minutes: 5\n"
        "upload_url:\n",
        encoding="utf-8",
    )

    loaded = ConfigLoader().load(str(config_file))

    assert loaded["sign_tool"] == str(config_dir / "tools" / "SignTool.exe")
    assert loaded["packaging_script"] == "build/pack.bat"
    assert loaded["packaging_timeout_minutes"] == 5.0
    assert "upload_url" not in loaded
