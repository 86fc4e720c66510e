"""Pytest configuration and fixtures for xmldoc2md tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging side effects between tests."""
    logging.disable(logging.NOTSET)
    yield
    logging.disable(logging.NOTSET)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def make_comment_xml():
    """Build a documentation file from {signature: inner XML} entries."""
    return comment_xml


@pytest.fixture
def widget_manifest() -> dict[str, Any]:
    """Manifest data for a small Acme module."""
    return {
        "name": "Acme",
        "types": [
            {
                "namespace": "Acme",
                "name": "Widget",
                "kind": "class",
                "modifiers": ["sealed"],
                "base_type": {"full_name": "System.Object"},
                "members": [
                    {
                        "kind": "method",
                        "name": "Do",
                        "parameters": [
                            {"name": "count", "type": {"full_name": "System.Int32"}}
                        ],
                        "return_type": {"full_name": "System.Void"},
                    },
                    {
                        "kind": "method",
                        "name": "Use",
                        "parameters": [
                            {"name": "gadget", "type": {"full_name": "Acme.Gadget"}}
                        ],
                        "return_type": {"full_name": "System.Boolean"},
                    },
                ],
            },
            {"namespace": "Acme", "name": "Gadget", "kind": "class"},
            {"namespace": "Acme", "name": "Handler", "kind": "delegate"},
        ],
    }


@pytest.fixture
def widget_comment_xml() -> str:
    """Documentation file matching widget_manifest."""
    return comment_xml(
        {
            "T:Acme.Widget": "<summary>A widget.</summary>",
            "M:Acme.Widget.Do(System.Int32)": (
                "<summary>Performs the action.</summary>"
                '<param name="count">How many times.</param>'
            ),
            "T:Acme.Gadget": "<summary>A gadget.</summary>",
        }
    )


@pytest.fixture
def write_inputs(tmp_path: Path, widget_manifest: dict[str, Any], widget_comment_xml: str):
    """Write Acme.json and the sibling Acme.xml; return the manifest path."""

    def _write(
        manifest: dict[str, Any] | None = None,
        comments: str | None = None,
    ) -> Path:
        manifest_path = tmp_path / "Acme.json"
        manifest_path.write_text(json.dumps(manifest or widget_manifest), encoding="utf-8")
        (tmp_path / "Acme.xml").write_text(
            comments if comments is not None else widget_comment_xml,
            encoding="utf-8",
        )
        return manifest_path

    return _write


def comment_xml(entries: dict[str, str]) -> str:
    members = "\n".join(
        f'    <member name="{signature}">{body}</member>'
        for signature, body in entries.items()
    )
    return (
        '<?xml version="1.0"?>\n'
        "<doc>\n"
        "  <assembly><name>Acme</name></assembly>\n"
        "  <members>\n"
        f"{members}\n"
        "  </members>\n"
        "</doc>\n"
    )
