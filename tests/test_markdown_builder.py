from __future__ import annotations

import pytest

from xmldoc2md.errors import MarkdownDocumentError
from xmldoc2md.markdown_builder import MarkdownDocument, escape, inline_code, link


def test_empty_document_serializes_to_empty_string() -> None:
    assert MarkdownDocument().serialize() == ""


def test_blocks_are_separated_by_one_blank_line() -> None:
    document = MarkdownDocument()
    document.append_header("Widget", 1).append_paragraph("A widget.").append_horizontal_rule()

    assert document.serialize() == "# Widget\n\nA widget.\n\n---\n"


def test_serialize_is_idempotent() -> None:
    document = MarkdownDocument()
    document.append_header("Widget", 2)
    document.append_code_block("public class Widget", "csharp")

    first = document.serialize()
    assert document.serialize() == first
    assert str(document) == first


def test_append_after_serialize_raises() -> None:
    document = MarkdownDocument()
    document.append_paragraph("text")
    document.serialize()

    assert document.sealed
    with pytest.raises(MarkdownDocumentError, match="sealed"):
        document.append_paragraph("more")
    with pytest.raises(MarkdownDocumentError, match="sealed"):
        document.append_paragraph("")


def test_blank_paragraph_appends_nothing() -> None:
    document = MarkdownDocument()
    document.append_paragraph("   \n ")

    assert document.blocks == ()


def test_header_level_is_validated() -> None:
    with pytest.raises(MarkdownDocumentError, match="between 1 and 6"):
        MarkdownDocument().append_header("Too deep", 7)


def test_header_text_is_single_line() -> None:
    document = MarkdownDocument()
    document.append_header("Two\nlines", 3)

    assert document.serialize() == "### Two lines\n"


def test_table_escapes_pipes_and_line_breaks() -> None:
    document = MarkdownDocument()
    document.append_table(("Name", "Description"), [("x|y", "line1\nline2"), ("a\\|b", "")])

    assert document.serialize() == (
        "| Name | Description |\n"
        "| --- | --- |\n"
        "| x\\|y | line1<br>line2 |\n"
        "| a\\|b |  |\n"
    )


def test_table_row_width_must_match_headers() -> None:
    with pytest.raises(MarkdownDocumentError, match="expected 2"):
        MarkdownDocument().append_table(("Name", "Type"), [("only one",)])


def test_code_fence_is_longer_than_any_backtick_run() -> None:
    document = MarkdownDocument()
    document.append_code_block("a ``` b", "csharp")

    assert document.serialize() == "````csharp\na ``` b\n````\n"


def test_inline_helpers() -> None:
    assert escape("List<T>[]") == "List\\<T\\>\\[\\]"
    assert escape("a_b*c") == "a\\_b\\*c"
    assert inline_code("count") == "`count`"
    assert inline_code("a`b") == "`` a`b ``"
    assert link("Gadget", "./Acme.Gadget.md") == "[Gadget](./Acme.Gadget.md)"
