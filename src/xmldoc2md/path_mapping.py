"""Path mapping and startup validation."""

from __future__ import annotations

import re
import unicodedata
from pathlib import Path

from .errors import PathMappingError, StartupValidationError
from .models import ResolvedPaths

_WINDOWS_DRIVE_RELATIVE_RE = re.compile(r"^[A-Za-z]:[^/\\]")

COMMENT_FILE_SUFFIX = ".xml"


def resolve_startup_paths(
    *,
    manifest_arg_raw: str,
    output_arg_raw: str,
    comment_arg_raw: str | None,
    examples_arg_raw: str | None,
    log_file_arg_raw: str | None,
    app_root_abs: Path,
    base_dir: Path,
) -> ResolvedPaths:
    if not app_root_abs.is_absolute():
        raise StartupValidationError("App root must be an absolute path.")

    def _map(raw: str, argument_name: str) -> Path:
        return map_path(
            raw,
            app_root_abs=app_root_abs,
            base_dir=base_dir,
            argument_name=argument_name,
        )

    manifest_file_abs = _map(manifest_arg_raw, "src")
    output_dir_abs = _map(output_arg_raw, "out")
    comment_file_abs = (
        _map(comment_arg_raw, "--xml")
        if comment_arg_raw is not None
        else manifest_file_abs.with_suffix(COMMENT_FILE_SUFFIX)
    )
    examples_dir_abs = (
        _map(examples_arg_raw, "--examples-path") if examples_arg_raw is not None else None
    )
    log_file_abs = (
        _map(log_file_arg_raw, "--log-file") if log_file_arg_raw is not None else None
    )

    _validate_manifest(manifest_file_abs)
    _validate_comment_file(comment_file_abs, explicit=comment_arg_raw is not None)
    _validate_examples(examples_dir_abs)
    _validate_output(output_dir_abs)

    return ResolvedPaths(
        manifest_file_abs=manifest_file_abs,
        output_dir_abs=output_dir_abs,
        comment_file_abs=comment_file_abs,
        comment_file_explicit=comment_arg_raw is not None,
        examples_dir_abs=examples_dir_abs,
        log_file_abs=log_file_abs,
    )


def map_path(
    raw: str,
    *,
    app_root_abs: Path,
    base_dir: Path | None = None,
    argument_name: str = "path",
) -> Path:
    """Map a user-provided path string to an absolute resolved Path.

    `~` expands to the home directory and `@` to the app root. Relative
    paths are joined onto `base_dir`; without one they are rejected.
    """
    normalized = unicodedata.normalize("NFC", raw)
    if not normalized:
        raise PathMappingError(f"{argument_name} path is empty.")
    if "\0" in normalized:
        raise PathMappingError(f"{argument_name} contains NUL (\\0).")
    if _is_windows_rooted_not_fully_qualified(normalized):
        raise PathMappingError(
            f"{argument_name} uses an unsupported Windows rooted-not-qualified path."
        )

    mapped = _map_special_prefixes(normalized, app_root_abs)
    if not mapped.is_absolute():
        if base_dir is None:
            raise PathMappingError(
                f"{argument_name} must be absolute or start with '~' or '@'."
            )
        mapped = base_dir / mapped

    return mapped.resolve(strict=False)


def _map_special_prefixes(path_text: str, app_root_abs: Path) -> Path:
    if path_text.startswith("~"):
        normalized_home = re.sub(r"[\\/]+", "/", path_text)
        try:
            return Path(normalized_home).expanduser()
        except RuntimeError as exc:
            raise PathMappingError(
                f"Failed to expand user home in path: {path_text}"
            ) from exc
    if path_text.startswith("@"):
        return _map_app_root_path(path_text, app_root_abs)
    return Path(re.sub(r"[\\/]+", "/", path_text))


def _map_app_root_path(path_text: str, app_root_abs: Path) -> Path:
    remainder = path_text[1:].lstrip("/\\")
    if not remainder:
        return app_root_abs
    segments = [segment for segment in re.split(r"[\\/]+", remainder) if segment]
    return app_root_abs.joinpath(*segments)


def _is_windows_rooted_not_fully_qualified(path_text: str) -> bool:
    if path_text.startswith("\\") and not path_text.startswith("\\\\"):
        return True
    return _WINDOWS_DRIVE_RELATIVE_RE.match(path_text) is not None


def _validate_manifest(manifest_file_abs: Path) -> None:
    if not manifest_file_abs.exists():
        raise StartupValidationError(f"src does not exist: {manifest_file_abs}")
    if not manifest_file_abs.is_file():
        raise StartupValidationError(f"src must be a file: {manifest_file_abs}")


def _validate_comment_file(comment_file_abs: Path, *, explicit: bool) -> None:
    # A missing default comment file is tolerated; the run documents signatures only.
    if not comment_file_abs.exists():
        if explicit:
            raise StartupValidationError(f"--xml file does not exist: {comment_file_abs}")
        return
    if not comment_file_abs.is_file():
        raise StartupValidationError(f"--xml must point to a file: {comment_file_abs}")


def _validate_examples(examples_dir_abs: Path | None) -> None:
    if examples_dir_abs is None:
        return
    if not examples_dir_abs.is_dir():
        raise StartupValidationError(
            f"--examples-path must be an existing directory: {examples_dir_abs}"
        )


def _validate_output(output_dir_abs: Path) -> None:
    if output_dir_abs.exists() and not output_dir_abs.is_dir():
        raise StartupValidationError(f"out must be a directory: {output_dir_abs}")
    if not output_dir_abs.exists():
        try:
            output_dir_abs.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StartupValidationError(
                f"Failed to create output directory: {output_dir_abs}"
            ) from exc
