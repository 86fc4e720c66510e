"""Link targets into referenced modules' generated documentation.

Each referenced module may point at a directory that already holds its pages
and `.meta.json` sidecars (`docs_path`). The first record of every sidecar is
the documented type, so scanning the sidecars yields a mapping from type
signature to link target. `docs_url` replaces the relative path with an
absolute base URL for the emitted links.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import MetadataError
from .links import format_page_link
from .logging_utils import log_event
from .metadata_gateway import METADATA_SUFFIX, page_name_from_metadata_path, read_page_metadata
from .models import DocumentationOptions, LoadWarning, ModuleInfo, ReferencedModule


def load_dependency_links(
    *,
    module: ModuleInfo,
    output_dir_abs: Path,
    options: DocumentationOptions,
) -> tuple[dict[str, str], list[LoadWarning]]:
    links: dict[str, str] = {}
    warnings: list[LoadWarning] = []

    def _warn(dependency: str, metadata_file: Path | None, reason: str) -> None:
        warnings.append(LoadWarning(source=dependency, message=reason))
        log_event(
            "dependency_metadata_skipped",
            level=logging.WARNING,
            dependency=dependency,
            metadata_file=metadata_file,
            reason=reason,
        )

    for referenced in sorted(module.referenced_modules, key=lambda m: m.name):
        if referenced.docs_path is None:
            continue
        docs_dir = Path(referenced.docs_path)
        docs_dir_abs = docs_dir if docs_dir.is_absolute() else output_dir_abs / docs_dir
        if not docs_dir_abs.is_dir():
            _warn(referenced.name, None, f"Documentation directory not found: {docs_dir_abs}")
            continue

        for metadata_path in sorted(docs_dir_abs.glob(f"*{METADATA_SUFFIX}"), key=lambda p: p.name):
            try:
                records = read_page_metadata(metadata_path_abs=metadata_path)
            except MetadataError as exc:
                _warn(referenced.name, metadata_path, str(exc))
                continue

            type_record = records[0]
            if not type_record.signature.startswith("T:"):
                _warn(
                    referenced.name,
                    metadata_path,
                    f"First metadata entry is not a type: {type_record.signature}",
                )
                continue
            target = _dependency_target(
                referenced=referenced,
                docs_dir_abs=docs_dir_abs,
                output_dir_abs=output_dir_abs,
                page_name=page_name_from_metadata_path(metadata_path),
                options=options,
            )
            links.setdefault(type_record.signature, target)

    return links, warnings


def _dependency_target(
    *,
    referenced: ReferencedModule,
    docs_dir_abs: Path,
    output_dir_abs: Path,
    page_name: str,
    options: DocumentationOptions,
) -> str:
    if referenced.docs_url:
        suffix = "" if options.strip_extension else ".md"
        return f"{referenced.docs_url.rstrip('/')}/{page_name}{suffix}"

    relative_dir = Path(os.path.relpath(docs_dir_abs, output_dir_abs)).as_posix()
    return format_page_link(f"{relative_dir}/{page_name}", options)
