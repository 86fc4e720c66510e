"""Append-only Markdown document model.

A document is an ordered list of blocks. Blocks are separated by one blank
line and the serialized text ends with a single newline, so identical block
sequences always serialize to identical text. The first serialize() call
seals the document; later appends raise MarkdownDocumentError.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import MarkdownDocumentError

_INLINE_SPECIAL_RE = re.compile(r"([\\`*_\[\]<>|])")
_BACKTICK_RUN_RE = re.compile(r"`+")
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Header:
    text: str
    level: int


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class Table:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class CodeBlock:
    code: str
    language: str | None


@dataclass(frozen=True)
class HorizontalRule:
    pass


Block = Header | Paragraph | Table | CodeBlock | HorizontalRule


class MarkdownDocument:
    """Ordered Markdown blocks with deterministic serialization."""

    def __init__(self) -> None:
        self._blocks: list[Block] = []
        self._sealed = False

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._blocks)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def append_header(self, text: str, level: int = 1) -> MarkdownDocument:
        if level < 1 or level > 6:
            raise MarkdownDocumentError(f"Header level must be between 1 and 6: {level}")
        return self._append(Header(text=_single_line(text), level=level))

    def append_paragraph(self, text: str) -> MarkdownDocument:
        """Append a paragraph; blank text appends nothing."""
        if not text.strip():
            self._ensure_open()
            return self
        return self._append(Paragraph(text=text.strip()))

    def append_table(
        self, headers: Sequence[str], rows: Sequence[Sequence[str]]
    ) -> MarkdownDocument:
        if not headers:
            raise MarkdownDocumentError("Table requires at least one header cell.")
        width = len(headers)
        normalized_rows: list[tuple[str, ...]] = []
        for row in rows:
            if len(row) != width:
                raise MarkdownDocumentError(
                    f"Table row has {len(row)} cells, expected {width}."
                )
            normalized_rows.append(tuple(row))
        return self._append(Table(headers=tuple(headers), rows=tuple(normalized_rows)))

    def append_code_block(self, code: str, language: str | None = None) -> MarkdownDocument:
        return self._append(CodeBlock(code=code.strip("\n"), language=language or None))

    def append_horizontal_rule(self) -> MarkdownDocument:
        return self._append(HorizontalRule())

    def serialize(self) -> str:
        self._sealed = True
        rendered = [_render_block(block) for block in self._blocks]
        if not rendered:
            return ""
        return "\n\n".join(rendered) + "\n"

    def __str__(self) -> str:
        return self.serialize()

    def _append(self, block: Block) -> MarkdownDocument:
        self._ensure_open()
        self._blocks.append(block)
        return self

    def _ensure_open(self) -> None:
        if self._sealed:
            raise MarkdownDocumentError("Document was already serialized and is sealed.")


def escape(text: str) -> str:
    """Escape characters that would otherwise be read as inline Markdown or HTML."""
    return _INLINE_SPECIAL_RE.sub(r"\\\1", text)


def inline_code(text: str) -> str:
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(text)), default=0)
    fence = "`" * (longest + 1)
    if longest:
        return f"{fence} {text} {fence}"
    return f"{fence}{text}{fence}"


def link(text: str, target: str) -> str:
    return f"[{text}]({target})"


def _render_block(block: Block) -> str:
    if isinstance(block, Header):
        return f"{'#' * block.level} {block.text}"
    if isinstance(block, Paragraph):
        return block.text
    if isinstance(block, Table):
        return _render_table(block)
    if isinstance(block, CodeBlock):
        return _render_code_block(block)
    return "---"


def _render_table(table: Table) -> str:
    lines = [
        _render_row(table.headers),
        _render_row(tuple("---" for _ in table.headers)),
    ]
    lines.extend(_render_row(row) for row in table.rows)
    return "\n".join(lines)


def _render_row(cells: tuple[str, ...]) -> str:
    return "| " + " | ".join(_table_cell(cell) for cell in cells) + " |"


def _table_cell(text: str) -> str:
    # Already-escaped pipes stay as they are.
    cell = re.sub(r"(?<!\\)\|", r"\\|", text.strip())
    return _LINE_BREAK_RE.sub("<br>", cell)


def _render_code_block(block: CodeBlock) -> str:
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(block.code)), default=0)
    fence = "`" * max(3, longest + 1)
    return f"{fence}{block.language or ''}\n{block.code}\n{fence}"


def _single_line(text: str) -> str:
    return " ".join(text.split())
