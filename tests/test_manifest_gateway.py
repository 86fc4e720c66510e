from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from xmldoc2md.errors import ManifestError
from xmldoc2md.manifest_gateway import load_module_manifest
from xmldoc2md.models import MemberKind, TypeKind, Visibility


def test_load_module_manifest(tmp_path: Path, widget_manifest: dict[str, Any]) -> None:
    manifest_path = tmp_path / "Acme.json"
    manifest_path.write_text(json.dumps(widget_manifest), encoding="utf-8-sig")

    module = load_module_manifest(manifest_path)

    assert module.name == "Acme"
    widget = module.types[0]
    assert widget.kind == TypeKind.CLASS
    assert widget.visibility == Visibility.PUBLIC
    assert widget.members[0].kind == MemberKind.METHOD
    assert widget.members[0].parameters[0].type.full_name == "System.Int32"
    assert module.types[2].kind == TypeKind.DELEGATE


def test_invalid_json_raises(tmp_path: Path) -> None:
    manifest_path = tmp_path / "Acme.json"
    manifest_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ManifestError, match="Invalid manifest JSON"):
        load_module_manifest(manifest_path)


def test_missing_module_name_raises(tmp_path: Path) -> None:
    manifest_path = tmp_path / "Acme.json"
    manifest_path.write_text(json.dumps({"types": []}), encoding="utf-8")

    with pytest.raises(ManifestError, match="at 'name'"):
        load_module_manifest(manifest_path)


def test_unknown_type_kind_reports_location(tmp_path: Path) -> None:
    manifest_path = tmp_path / "Acme.json"
    manifest_path.write_text(
        json.dumps({"name": "Acme", "types": [{"name": "Widget", "kind": "record"}]}),
        encoding="utf-8",
    )

    with pytest.raises(ManifestError, match="at 'types.0.kind'"):
        load_module_manifest(manifest_path)


def test_unreadable_manifest_raises(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="Failed to read manifest"):
        load_module_manifest(tmp_path / "missing.json")
