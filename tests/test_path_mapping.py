"""Tests for path mapping and startup validation."""

from pathlib import Path

import pytest

from xmldoc2md.errors import PathMappingError, StartupValidationError
from xmldoc2md.path_mapping import map_path, resolve_startup_paths

APP_ROOT = Path("/app/root")


def test_absolute_path() -> None:
    assert map_path("/usr/local/Acme.json", app_root_abs=APP_ROOT) == Path("/usr/local/Acme.json")


def test_tilde_expansion() -> None:
    result = map_path("~/docs/Acme.json", app_root_abs=APP_ROOT)

    assert result.is_absolute()
    assert result.name == "Acme.json"


def test_at_root() -> None:
    assert map_path("@/Acme.json", app_root_abs=APP_ROOT) == Path("/app/root/Acme.json")
    assert map_path("@", app_root_abs=APP_ROOT) == APP_ROOT


def test_relative_with_base_dir() -> None:
    result = map_path("sub/../Acme.json", app_root_abs=APP_ROOT, base_dir=Path("/base"))

    assert result == Path("/base/Acme.json")


def test_relative_without_base_dir_raises() -> None:
    with pytest.raises(PathMappingError, match="must be absolute"):
        map_path("Acme.json", app_root_abs=APP_ROOT)


def test_nul_character_raises() -> None:
    with pytest.raises(PathMappingError, match="NUL"):
        map_path("/path/to\0file", app_root_abs=APP_ROOT)


def test_windows_rooted_not_qualified_raises() -> None:
    with pytest.raises(PathMappingError, match="Windows"):
        map_path("C:docs", app_root_abs=APP_ROOT)


def _resolve(tmp_path: Path, **overrides: str | None):
    arguments = {
        "manifest_arg_raw": "Acme.json",
        "output_arg_raw": "docs",
        "comment_arg_raw": None,
        "examples_arg_raw": None,
        "log_file_arg_raw": None,
    }
    arguments.update(overrides)
    return resolve_startup_paths(app_root_abs=APP_ROOT, base_dir=tmp_path, **arguments)


def test_comment_file_defaults_to_manifest_sibling(tmp_path: Path) -> None:
    (tmp_path / "Acme.json").write_text("{}", encoding="utf-8")

    resolved = _resolve(tmp_path)

    assert resolved.comment_file_abs == tmp_path.resolve() / "Acme.xml"
    assert resolved.comment_file_explicit is False
    assert resolved.output_dir_abs.is_dir()
    assert resolved.examples_dir_abs is None


def test_examples_path_must_be_a_directory(tmp_path: Path) -> None:
    (tmp_path / "Acme.json").write_text("{}", encoding="utf-8")

    with pytest.raises(StartupValidationError, match="--examples-path"):
        _resolve(tmp_path, examples_arg_raw="examples")


def test_output_must_not_be_a_file(tmp_path: Path) -> None:
    (tmp_path / "Acme.json").write_text("{}", encoding="utf-8")
    (tmp_path / "docs").write_text("", encoding="utf-8")

    with pytest.raises(StartupValidationError, match="out must be a directory"):
        _resolve(tmp_path)


def test_manifest_must_be_a_file(tmp_path: Path) -> None:
    (tmp_path / "Acme.json").mkdir()

    with pytest.raises(StartupValidationError, match="src must be a file"):
        _resolve(tmp_path)
