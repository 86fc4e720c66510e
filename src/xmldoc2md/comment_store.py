"""XML documentation-comment parsing and lookup."""

from __future__ import annotations

import logging
import re
import textwrap
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from .errors import CommentFileError
from .logging_utils import log_event
from .models import CommentRecord, LoadWarning

_MEMBER_NAME_RE = re.compile(r"^[TMPFEN]:\S.*$")
_MEMBER_CHUNK_RE = re.compile(r"<member\b[^>]*?(?:/>|>.*?</member\s*>)", flags=re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_RUN_RE = re.compile(r" {2,}")
_BACKTICK_RUN_RE = re.compile(r"`+")

# Separates paragraphs while inline markup is flattened.
_PARAGRAPH_BREAK = "\x1e"

# Cross-reference kept in record text as <start>cref<separator>inner text<end>;
# private-use characters survive whitespace collapsing.
_CREF_START = "\ue000"
_CREF_SEPARATOR = "\ue001"
_CREF_END = "\ue002"
_CREF_MARKER_RE = re.compile("\ue000([^\ue000-\ue002]*)\ue001([^\ue000-\ue002]*)\ue002")


class _EntryError(ValueError):
    """One <member> entry cannot be read."""


class CommentStore:
    """Read-only mapping from canonical signature to CommentRecord."""

    def __init__(
        self,
        records: dict[str, CommentRecord] | None = None,
        warnings: Iterable[LoadWarning] = (),
    ) -> None:
        self._records = dict(records or {})
        self._warnings = tuple(warnings)

    @classmethod
    def from_xml(cls, raw: bytes | str, *, source: str = "<memory>") -> CommentStore:
        records, warnings = parse_comment_xml(raw, source=source)
        return cls(records, warnings)

    @property
    def warnings(self) -> tuple[LoadWarning, ...]:
        return self._warnings

    def lookup(self, signature: str) -> CommentRecord | None:
        return self._records.get(signature)

    def signatures(self) -> list[str]:
        return sorted(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, signature: object) -> bool:
        return signature in self._records


def load_comment_store(comment_file_abs: Path) -> CommentStore:
    try:
        raw = comment_file_abs.read_bytes()
    except OSError as exc:
        raise CommentFileError(
            f"Failed to read documentation file: {comment_file_abs}"
        ) from exc
    return CommentStore.from_xml(raw, source=str(comment_file_abs))


def parse_comment_xml(
    raw: bytes | str, *, source: str
) -> tuple[dict[str, CommentRecord], list[LoadWarning]]:
    """Parse every <member> entry; broken entries become warnings."""
    records: dict[str, CommentRecord] = {}
    warnings: list[LoadWarning] = []

    def _warn(entry: str, reason: str) -> None:
        warnings.append(LoadWarning(source=entry, message=reason))
        log_event(
            "comment_entry_skipped",
            level=logging.WARNING,
            comment_file=source,
            entry=entry,
            reason=reason,
        )

    try:
        root = ET.fromstring(raw)
        member_elements: Iterable[ET.Element] = list(root.iter("member"))
    except ET.ParseError as exc:
        member_elements = list(_recover_member_elements(raw, _warn))
        warnings.insert(
            0,
            LoadWarning(
                source=source,
                message=f"Documentation file is not well-formed ({exc}); "
                f"recovered {len(member_elements)} entries individually.",
            ),
        )
        log_event(
            "comment_file_recovered",
            level=logging.WARNING,
            comment_file=source,
            error=str(exc),
            recovered_entries=len(member_elements),
        )

    for index, element in enumerate(member_elements, start=1):
        entry_label = element.get("name") or f"#{index}"
        try:
            record = _parse_member(element)
        except _EntryError as exc:
            _warn(entry_label, str(exc))
            continue
        if record.signature in records:
            _warn(entry_label, "Duplicate entry; keeping the first one.")
            continue
        records[record.signature] = record

    return records, warnings


def _recover_member_elements(
    raw: bytes | str, warn: Callable[[str, str], None]
) -> Iterator[ET.Element]:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    for index, match in enumerate(_MEMBER_CHUNK_RE.finditer(text), start=1):
        try:
            yield ET.fromstring(match.group(0))
        except ET.ParseError as exc:
            warn(f"#{index}", f"Malformed entry: {exc}")


def _parse_member(element: ET.Element) -> CommentRecord:
    signature = (element.get("name") or "").strip()
    if not signature:
        raise _EntryError("Entry has no name attribute.")
    if not _MEMBER_NAME_RE.match(signature):
        raise _EntryError(f"Entry name lacks a known kind prefix: {signature}")

    parameters = tuple(
        (_required_attribute(child, "name"), render_comment_text(child))
        for child in element.findall("param")
    )
    type_parameters = tuple(
        (_required_attribute(child, "name"), render_comment_text(child))
        for child in element.findall("typeparam")
    )
    exceptions = tuple(
        (_required_attribute(child, "cref"), render_comment_text(child))
        for child in element.findall("exception")
    )
    returns_element = element.find("returns")
    value_element = element.find("value")

    return CommentRecord(
        signature=signature,
        summary=render_comment_text(element.find("summary")),
        remarks=render_comment_text(element.find("remarks")),
        parameters=parameters,
        returns=render_comment_text(returns_element) if returns_element is not None else None,
        exceptions=exceptions,
        examples=tuple(
            text
            for text in (render_comment_text(child) for child in element.findall("example"))
            if text
        ),
        type_parameters=type_parameters,
        value=render_comment_text(value_element) if value_element is not None else None,
    )


def _required_attribute(element: ET.Element, attribute: str) -> str:
    value = (element.get(attribute) or "").strip()
    if not value:
        raise _EntryError(f"<{element.tag}> is missing the '{attribute}' attribute.")
    return value


def render_comment_text(element: ET.Element | None) -> str:
    """Flatten doc-comment markup to Markdown text.

    Running text collapses to single spaces; <para> and <code> start new
    paragraphs; <code> content keeps its line structure inside a fence.
    <see cref> stays a cross-reference marker until replace_cross_references
    or plain_comment_text turns it into Markdown.
    """
    if element is None:
        return ""
    flattened = _render_children(element)
    paragraphs: list[str] = []
    for segment in flattened.split(_PARAGRAPH_BREAK):
        if segment.startswith("```"):
            paragraphs.append(segment)
            continue
        cleaned = "\n".join(
            _SPACE_RUN_RE.sub(" ", line).strip() for line in segment.split("\n")
        ).strip()
        if cleaned:
            paragraphs.append(cleaned)
    return "\n\n".join(paragraphs)


def _render_children(element: ET.Element) -> str:
    chunks: list[str] = []
    if element.text:
        chunks.append(_collapse(element.text))
    for child in element:
        chunks.append(_render_element(child))
        if child.tail:
            chunks.append(_collapse(child.tail))
    return "".join(chunks)


def _render_element(element: ET.Element) -> str:
    tag = element.tag
    if tag == "c":
        return _code_span(" ".join("".join(element.itertext()).split()))
    if tag == "code":
        return _code_block(element)
    if tag == "para":
        return f"{_PARAGRAPH_BREAK}{_render_children(element)}{_PARAGRAPH_BREAK}"
    if tag == "br":
        return "\n"
    if tag in ("see", "seealso"):
        return _render_reference(element)
    if tag in ("paramref", "typeparamref"):
        return _code_span(element.get("name") or "")
    if tag == "list":
        return _render_list(element)
    return _render_children(element)


def _render_reference(element: ET.Element) -> str:
    inner = render_comment_text(element)
    cref = element.get("cref")
    if cref:
        inner = " ".join(inner.split())
        return f"{_CREF_START}{cref.strip()}{_CREF_SEPARATOR}{inner}{_CREF_END}"
    langword = element.get("langword")
    if langword:
        return _code_span(langword)
    href = element.get("href")
    if href:
        return f"[{inner or href}]({href})"
    return inner


def _render_list(element: ET.Element) -> str:
    numbered = element.get("type") == "number"
    lines: list[str] = []
    for position, item in enumerate(element.findall("item"), start=1):
        term = render_comment_text(item.find("term"))
        description = render_comment_text(item.find("description"))
        if not term and not description:
            description = render_comment_text(item)
        text = f"{term}: {description}" if term and description else term or description
        marker = f"{position}." if numbered else "-"
        lines.append(f"{marker} {' '.join(text.split())}")
    return f"{_PARAGRAPH_BREAK}{chr(10).join(lines)}{_PARAGRAPH_BREAK}"


def _code_block(element: ET.Element) -> str:
    code = textwrap.dedent("".join(element.itertext()).strip("\n")).rstrip()
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(code)), default=0)
    fence = "`" * max(3, longest + 1)
    language = element.get("language") or element.get("lang") or ""
    return f"{_PARAGRAPH_BREAK}{fence}{language}\n{code}\n{fence}{_PARAGRAPH_BREAK}"


def _code_span(text: str) -> str:
    if not text:
        return ""
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(text)), default=0)
    fence = "`" * (longest + 1)
    if longest:
        return f"{fence} {text} {fence}"
    return f"{fence}{text}{fence}"


def replace_cross_references(text: str, render: Callable[[str, str], str]) -> str:
    """Replace every `<see cref>` marker with `render(cref, inner_text)`."""
    return _CREF_MARKER_RE.sub(lambda match: render(match.group(1), match.group(2)), text)


def plain_comment_text(text: str) -> str:
    """Record text with cross-references as inline code of their short names."""
    return replace_cross_references(
        text, lambda cref, inner: _code_span(inner or _cref_display_name(cref))
    )


def _cref_display_name(cref: str) -> str:
    _, _, name = cref.partition(":")
    name = (name or cref).split("(", 1)[0]
    name = re.sub(r"`+\d+", "", name)
    return name.rsplit(".", 1)[-1]


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text)
