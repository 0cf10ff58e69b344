"""Tests for spectype.config -- XDG paths, atomic writes, project targets, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from spectype.config import (
    _atomic_write,
    get_data_dir,
    load_project_config,
    project_config_path,
    resolve_targets,
    write_output,
)
from spectype.exceptions import ConfigError, InvalidUsageError
from spectype.models import DEFAULT_ROUTE_PLACEHOLDER, ProjectConfig, TargetConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _project(**targets: dict[str, Any]) -> ProjectConfig:
    return ProjectConfig.model_validate({"targets": targets})


# ---------------------------------------------------------------------------
# Data directory
# ---------------------------------------------------------------------------


class TestDataDir:
    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("spectype.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))

        assert get_data_dir() == tmp_path / ".local" / "share" / "spectype"
        assert get_data_dir().is_dir()

    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("spectype.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

        assert get_data_dir() == tmp_path / "data" / "spectype"

    def test_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("spectype.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))

        assert get_data_dir() == tmp_path / ".spectype"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "api.ts"
        _atomic_write(target, "export type Id = string;\n")
        assert target.read_text(encoding="utf-8") == "export type Id = string;\n"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "api.ts"
        target.write_text("old content", encoding="utf-8")
        _atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "src" / "generated" / "api.ts"
        _atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "api.ts"
        _atomic_write(target, "content")
        assert list(tmp_path.iterdir()) == [target]

    def test_original_kept_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "api.ts"
        target.write_text("previous run", encoding="utf-8")
        with patch("spectype.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert target.read_text(encoding="utf-8") == "previous run"
        assert [f for f in tmp_path.iterdir() if ".tmp" in f.name] == []

    def test_unicode_content(self, tmp_path: Path) -> None:
        target = tmp_path / "unicode.ts"
        content = "/** Grüße 世界 */"
        _atomic_write(target, content)
        assert target.read_text(encoding="utf-8") == content


class TestWriteOutput:
    def test_returns_path(self, tmp_path: Path) -> None:
        path = write_output(str(tmp_path / "out" / "api.ts"), "text")
        assert path == tmp_path / "out" / "api.ts"
        assert path.read_text(encoding="utf-8") == "text"

    def test_os_error_becomes_config_error(self, tmp_path: Path) -> None:
        with patch("spectype.config.os.replace", side_effect=PermissionError("read-only")):
            with pytest.raises(ConfigError, match="Cannot write output file"):
                write_output(tmp_path / "api.ts", "text")


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_default_path_is_cwd(self, isolated_config: Path) -> None:
        assert project_config_path() == isolated_config / "spectype.json"

    def test_env_path(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECTYPE_CONFIG", str(isolated_config / "conf" / "targets.json"))
        assert project_config_path() == isolated_config / "conf" / "targets.json"

    def test_missing_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_missing_env_file_raises(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECTYPE_CONFIG", str(isolated_config / "nope.json"))
        with pytest.raises(ConfigError, match="SPECTYPE_CONFIG"):
            load_project_config()

    def test_load_valid(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "spectype.json",
            {
                "targets": {
                    "petstore": {"file": "petstore.yaml", "output": "api.ts", "renderer": "axios"},
                    "hooks": {"file": "petstore.yaml", "renderer": "swr", "workers": 4},
                }
            },
        )
        config = load_project_config()
        assert list(config.targets) == ["petstore", "hooks"]
        assert config.targets["petstore"].renderer == "axios"
        assert config.targets["hooks"].output is None
        assert config.targets["hooks"].workers == 4
        assert config.targets["hooks"].route_placeholder == DEFAULT_ROUTE_PLACEHOLDER

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (isolated_config / "spectype.json").write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_invalid_schema_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "spectype.json", {"targets": {"x": {"workers": 0}}})
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()


class TestTargetConfig:
    def test_placeholder_needs_name_field(self) -> None:
        with pytest.raises(ValueError, match="route_placeholder"):
            TargetConfig(file="a.yaml", route_placeholder=":id")

    def test_defaults(self) -> None:
        cfg = TargetConfig(file="a.yaml")
        assert cfg.renderer == "types"
        assert cfg.workers == 1
        assert cfg.output is None


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveTargets:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SPECTYPE_RENDERER", raising=False)

    def test_all_targets_in_order(self) -> None:
        project = _project(b={"file": "b.yaml"}, a={"file": "a.yaml", "renderer": "fetch"})
        resolved = resolve_targets(project=project)
        assert [name for name, _ in resolved] == ["b", "a"]
        assert resolved[1][1].renderer == "fetch"

    def test_named_target(self) -> None:
        project = _project(a={"file": "a.yaml"}, b={"file": "b.yaml"})
        [(name, cfg)] = resolve_targets("b", project=project)
        assert name == "b"
        assert cfg.file == "b.yaml"

    def test_unknown_target_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown target 'c'. Declared targets: a"):
            resolve_targets("c", project=_project(a={"file": "a.yaml"}))

    def test_file_only_is_default_target(self) -> None:
        [(name, cfg)] = resolve_targets(cli_file="api.yaml", project=ProjectConfig())
        assert name == "default"
        assert cfg == TargetConfig(file="api.yaml")

    def test_file_flag_wins_over_project_targets(self) -> None:
        project = _project(a={"file": "a.yaml"}, b={"file": "b.yaml"})
        resolved = resolve_targets(cli_file="api.yaml", project=project)
        assert [name for name, _ in resolved] == ["default"]

    def test_nothing_to_generate(self) -> None:
        with pytest.raises(InvalidUsageError, match="Nothing to generate"):
            resolve_targets(project=ProjectConfig())

    def test_cli_overrides_target(self) -> None:
        project = _project(a={"file": "a.yaml", "output": "a.ts", "renderer": "axios"})
        [(_, cfg)] = resolve_targets(
            "a",
            cli_file="other.yaml",
            cli_output="other.ts",
            cli_renderer="swr",
            cli_workers=3,
            project=project,
        )
        assert (cfg.file, cfg.output, cfg.renderer, cfg.workers) == ("other.yaml", "other.ts", "swr", 3)

    def test_env_renderer_overrides_project(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECTYPE_RENDERER", "fetch")
        [(_, cfg)] = resolve_targets("a", project=_project(a={"file": "a.yaml", "renderer": "axios"}))
        assert cfg.renderer == "fetch"

    def test_cli_renderer_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECTYPE_RENDERER", "fetch")
        [(_, cfg)] = resolve_targets(cli_file="a.yaml", cli_renderer="swr", project=ProjectConfig())
        assert cfg.renderer == "swr"

    def test_output_with_many_targets_raises(self) -> None:
        project = _project(a={"file": "a.yaml"}, b={"file": "b.yaml"})
        with pytest.raises(InvalidUsageError, match="--output needs a single target"):
            resolve_targets(cli_output="api.ts", project=project)

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration for target 'default'"):
            resolve_targets(cli_file="a.yaml", cli_workers=0, project=ProjectConfig())

    def test_loads_project_from_disk(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "spectype.json", {"targets": {"disk": {"file": "d.yaml"}}})
        assert [name for name, _ in resolve_targets()] == ["disk"]
