"""User-facing text rendering."""

from __future__ import annotations

from pathlib import Path

from .models import GenerationResult, LoadWarning, ResolvedPaths, TypeFailure

_WARNING_PREFIX = "WARNING:"
_ERROR_PREFIX = "ERROR:"


def render_error(message: str) -> str:
    return f"{_ERROR_PREFIX} {message}"


def render_warning(message: str) -> str:
    return f"{_WARNING_PREFIX} {message}"


def render_load_warning_lines(warnings: list[LoadWarning]) -> list[str]:
    return [render_warning(f"{warning.source}: {warning.message}") for warning in warnings]


def render_loaded_parameters(
    *, resolved_paths: ResolvedPaths, module_name: str, type_count: int
) -> list[str]:
    examples_dir = (
        str(resolved_paths.examples_dir_abs)
        if resolved_paths.examples_dir_abs is not None
        else "(none)"
    )
    return [
        f"Module: {module_name} ({type_count} types)",
        f"Manifest: {resolved_paths.manifest_file_abs}",
        f"Comments: {resolved_paths.comment_file_abs}",
        f"Examples: {examples_dir}",
        f"Output: {resolved_paths.output_dir_abs}",
    ]


def render_page_written(page_path_abs: Path) -> str:
    return f"Wrote {page_path_abs.name}"


def render_type_failure(failure: TypeFailure) -> str:
    return render_error(f"{failure.type_name}: {failure.message}")


def render_summary(result: GenerationResult) -> str:
    return f"Generation: {result.succeeded} succeeded, {result.failed} failed"
