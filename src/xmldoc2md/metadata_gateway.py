"""Sidecar metadata JSON serialization and parsing."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from .errors import MetadataError, OutputWriteError
from .models import MetadataRecord

METADATA_SUFFIX = ".meta.json"


def metadata_path_for(output_dir_abs: Path, page_name: str) -> Path:
    return output_dir_abs / f"{page_name}{METADATA_SUFFIX}"


def page_name_from_metadata_path(metadata_path: Path) -> str:
    return metadata_path.name[: -len(METADATA_SUFFIX)]


def write_page_metadata(
    *, metadata_path_abs: Path, records: Sequence[MetadataRecord]
) -> None:
    payload = [record.to_dict() for record in records]
    try:
        metadata_path_abs.write_text(
            f"{json.dumps(payload, ensure_ascii=False, indent=2)}\n",
            encoding="utf-8",
        )
    except OSError as exc:
        raise OutputWriteError(f"Failed to write metadata: {metadata_path_abs}") from exc


def read_page_metadata(*, metadata_path_abs: Path) -> list[MetadataRecord]:
    """Read a sidecar written by write_page_metadata."""
    try:
        raw_text = metadata_path_abs.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"Failed to read metadata: {metadata_path_abs}") from exc

    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"Invalid metadata JSON: {metadata_path_abs}") from exc

    if not isinstance(payload, list) or not payload:
        raise MetadataError(f"Metadata JSON must be a non-empty list: {metadata_path_abs}")

    records: list[MetadataRecord] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise MetadataError(f"Metadata entry {index} must be an object: {metadata_path_abs}")
        values = {}
        for key in ("signature", "display_name", "kind", "summary"):
            value = item.get(key)
            if not isinstance(value, str):
                raise MetadataError(
                    f"Metadata key '{key}' of entry {index} must be a string: "
                    f"{metadata_path_abs}"
                )
            values[key] = value
        records.append(MetadataRecord(**values))
    return records
