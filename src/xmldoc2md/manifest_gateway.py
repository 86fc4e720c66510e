"""Type-surface manifest loading."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from .errors import ManifestError
from .models import ModuleInfo


def load_module_manifest(manifest_file_abs: Path) -> ModuleInfo:
    """Load and validate the JSON manifest describing one module's types."""
    try:
        text = manifest_file_abs.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise ManifestError(f"Failed to read manifest: {manifest_file_abs}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid manifest JSON: {manifest_file_abs}: {exc}") from exc

    try:
        return ModuleInfo.model_validate(data)
    except ValidationError as exc:
        first_error = exc.errors()[0]
        location = ".".join(str(part) for part in first_error["loc"])
        raise ManifestError(
            f"Invalid manifest structure at '{location}': {first_error['msg']} "
            f"({manifest_file_abs})"
        ) from exc
