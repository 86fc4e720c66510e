"""Example snippet loading and lookup.

Snippets live flat in one directory and are keyed by file name without its
extension: `Acme.Widget.cs` documents the `Acme.Widget` page,
`Acme.Widget.Do(System.Int32).cs` documents one member. Every snippet file
carries an extension; the last dot always starts it, so the page `Acme.Json`
takes `Acme.Json.json` or `Acme.Json.txt`. Files without one are skipped. The
directory is read completely before any page is rendered.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from charset_normalizer import from_bytes

from .errors import StartupValidationError
from .logging_utils import log_event
from .models import ExampleSnippet

_LANGUAGE_BY_SUFFIX = {
    ".cs": "csharp",
    ".vb": "vb",
    ".fs": "fsharp",
    ".fsx": "fsharp",
    ".xml": "xml",
    ".json": "json",
    ".ps1": "powershell",
    ".sh": "bash",
    ".txt": None,
    ".md": None,
}


class ExampleStore:
    """Read-only snippets grouped by lookup key."""

    def __init__(self, snippets: dict[str, list[ExampleSnippet]] | None = None) -> None:
        self._snippets = {key: tuple(items) for key, items in (snippets or {}).items()}

    def lookup(self, key: str) -> tuple[ExampleSnippet, ...]:
        return self._snippets.get(key, ())

    def __len__(self) -> int:
        return sum(len(items) for items in self._snippets.values())


def load_example_store(examples_dir_abs: Path) -> ExampleStore:
    try:
        entries = sorted(examples_dir_abs.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise StartupValidationError(
            f"Failed to read examples directory: {examples_dir_abs}"
        ) from exc

    snippets: dict[str, list[ExampleSnippet]] = {}
    for entry in entries:
        if not entry.is_file():
            continue
        key_and_language = example_key_for(entry.name)
        if key_and_language is None:
            log_event(
                "example_file_skipped",
                level=logging.WARNING,
                example_file=entry,
                reason="no file extension",
            )
            continue
        key, language = key_and_language
        try:
            raw = entry.read_bytes()
        except OSError as exc:
            raise StartupValidationError(f"Failed to read example file: {entry}") from exc
        snippets.setdefault(key, []).append(
            ExampleSnippet(file_name=entry.name, text=decode_example_bytes(raw), language=language)
        )
    return ExampleStore(snippets)


def example_key_for(file_name: str) -> tuple[str, str | None] | None:
    key, dot, extension = file_name.rpartition(".")
    if not dot or not key or not extension:
        return None
    return key, _LANGUAGE_BY_SUFFIX.get(f".{extension.lower()}")


def decode_example_bytes(raw_bytes: bytes) -> str:
    """Decode snippet bytes.

    Priority order:
    1. Byte-order mark
    2. UTF-8
    3. charset_normalizer detection
    4. UTF-8 with error replacement
    """
    for bom, encoding in (
        (codecs.BOM_UTF8, "utf-8-sig"),
        (codecs.BOM_UTF16_LE, "utf-16"),
        (codecs.BOM_UTF16_BE, "utf-16"),
    ):
        if raw_bytes.startswith(bom):
            return _normalize_newlines(raw_bytes.decode(encoding, errors="replace"))

    try:
        return _normalize_newlines(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError:
        pass

    detected = from_bytes(raw_bytes).best()
    if detected is not None:
        return _normalize_newlines(str(detected))
    return _normalize_newlines(raw_bytes.decode("utf-8", errors="replace"))


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")
