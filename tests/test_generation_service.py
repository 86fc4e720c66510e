from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from xmldoc2md import generation_service
from xmldoc2md.comment_store import CommentStore
from xmldoc2md.dependency_gateway import load_dependency_links
from xmldoc2md.errors import OutputWriteError
from xmldoc2md.generation_service import generate_documentation
from xmldoc2md.metadata_gateway import read_page_metadata
from xmldoc2md.models import DocumentationOptions, ModuleInfo


def _generate(
    module_data: dict[str, Any],
    output_dir: Path,
    comments: str = "<doc><members/></doc>",
    **options: Any,
):
    return generate_documentation(
        module=ModuleInfo.model_validate(module_data),
        comment_store=CommentStore.from_xml(comments),
        output_dir_abs=output_dir,
        options=DocumentationOptions(**options),
    )


def test_generates_pages_and_index(
    tmp_path: Path, widget_manifest: dict[str, Any], widget_comment_xml: str
) -> None:
    result = _generate(widget_manifest, tmp_path, widget_comment_xml)

    assert result.succeeded == 2
    assert result.failed == 0
    assert sorted(path.name for path in tmp_path.iterdir()) == [
        "Acme.Gadget.md",
        "Acme.Widget.md",
        "index.md",
    ]
    widget_text = (tmp_path / "Acme.Widget.md").read_text(encoding="utf-8")
    assert "### Do(Int32)\n\nPerforms the action." in widget_text
    assert "| `gadget` | [Gadget](./Acme.Gadget.md) |  |" in widget_text
    index_text = result.index_path.read_text(encoding="utf-8")
    assert "[Widget](./Acme.Widget.md)  \nA widget." in index_text
    assert "Handler" not in index_text


def test_metadata_sidecars_are_written_when_enabled(
    tmp_path: Path, widget_manifest: dict[str, Any], widget_comment_xml: str
) -> None:
    result = _generate(widget_manifest, tmp_path, widget_comment_xml, generate_metadata=True)

    assert [path.name for path in result.metadata_paths] == [
        "Acme.Widget.meta.json",
        "Acme.Gadget.meta.json",
    ]
    records = read_page_metadata(metadata_path_abs=tmp_path / "Acme.Widget.meta.json")
    assert records[0].signature == "T:Acme.Widget"
    assert [record.signature for record in records[1:]] == [
        "M:Acme.Widget.Do(System.Int32)",
        "M:Acme.Widget.Use(Acme.Gadget)",
    ]


def test_failed_type_is_counted_and_the_batch_continues(
    tmp_path: Path, widget_manifest: dict[str, Any]
) -> None:
    widget_manifest["types"].append(
        {
            "namespace": "Acme",
            "name": "Broken",
            "members": [{"kind": "method", "name": "bad name"}],
        }
    )
    widget_manifest["types"].append({"namespace": "Acme", "name": "Bad Name"})

    result = _generate(widget_manifest, tmp_path)

    assert result.succeeded == 2
    assert result.failed == 2
    assert [failure.type_name for failure in result.failures] == ["Acme.Bad Name", "Acme.Broken"]
    assert not (tmp_path / "Acme.Broken.md").exists()
    assert "Broken" not in result.index_path.read_text(encoding="utf-8")


def test_type_failing_on_a_member_is_not_linked_from_other_pages(
    tmp_path: Path, make_comment_xml
) -> None:
    module_data = {
        "name": "Acme",
        "types": [
            {
                "namespace": "Acme",
                "name": "Broken",
                "members": [{"kind": "method", "name": "bad name"}],
            },
            {
                "namespace": "Acme",
                "name": "Widget",
                "members": [
                    {
                        "kind": "method",
                        "name": "Use",
                        "parameters": [{"name": "b", "type": {"full_name": "Acme.Broken"}}],
                    }
                ],
            },
        ],
    }
    comments = make_comment_xml(
        {"T:Acme.Widget": '<summary>Wraps <see cref="T:Acme.Broken"/>.</summary>'}
    )

    result = _generate(module_data, tmp_path, comments)

    assert [failure.type_name for failure in result.failures] == ["Acme.Broken"]
    assert not (tmp_path / "Acme.Broken.md").exists()
    widget_text = (tmp_path / "Acme.Widget.md").read_text(encoding="utf-8")
    assert "| `b` | Broken |  |" in widget_text
    assert "Wraps Broken." in widget_text
    assert "Acme.Broken.md" not in widget_text


def test_unexpected_render_error_is_counted_and_the_batch_continues(
    tmp_path: Path, widget_manifest: dict[str, Any], monkeypatch: pytest.MonkeyPatch
) -> None:
    real_render = generation_service.render_type_page

    def _render(type_info, context):
        if type_info.name == "Gadget":
            raise RuntimeError("unexpected")
        return real_render(type_info, context)

    monkeypatch.setattr(generation_service, "render_type_page", _render)

    result = _generate(widget_manifest, tmp_path)

    assert result.succeeded == 1
    assert [(f.type_name, f.message) for f in result.failures] == [("Acme.Gadget", "unexpected")]
    widget_text = (tmp_path / "Acme.Widget.md").read_text(encoding="utf-8")
    assert "| `gadget` | Gadget |  |" in widget_text
    assert "Gadget" not in result.index_path.read_text(encoding="utf-8")


def test_on_page_written_reports_each_page(tmp_path: Path, widget_manifest: dict[str, Any]) -> None:
    written: list[Path] = []

    generate_documentation(
        module=ModuleInfo.model_validate(widget_manifest),
        comment_store=CommentStore(),
        output_dir_abs=tmp_path,
        options=DocumentationOptions(),
        on_page_written=written.append,
    )

    assert [path.name for path in written] == ["Acme.Widget.md", "Acme.Gadget.md"]


def test_custom_index_page_name(tmp_path: Path, widget_manifest: dict[str, Any]) -> None:
    result = _generate(widget_manifest, tmp_path, index_page_name="README", back_button=True)

    assert result.index_path == tmp_path / "README.md"
    assert result.index_path.exists()
    assert "[`< Back`](./README.md)" in (tmp_path / "Acme.Gadget.md").read_text(encoding="utf-8")


def test_missing_output_directory_raises(tmp_path: Path, widget_manifest: dict[str, Any]) -> None:
    with pytest.raises(OutputWriteError, match="Failed to write page"):
        _generate(widget_manifest, tmp_path / "missing")


def test_dependency_links_point_into_another_generated_set(tmp_path: Path) -> None:
    other_docs = tmp_path / "other-docs"
    other_docs.mkdir()
    _generate(
        {"name": "Other", "types": [{"namespace": "Other", "name": "Thing"}]},
        other_docs,
        generate_metadata=True,
    )

    acme_docs = tmp_path / "acme-docs"
    acme_docs.mkdir()
    module = ModuleInfo.model_validate(
        {
            "name": "Acme",
            "referenced_modules": [{"name": "Other", "docs_path": "../other-docs"}],
            "types": [
                {
                    "namespace": "Acme",
                    "name": "Widget",
                    "members": [
                        {
                            "kind": "method",
                            "name": "Use",
                            "parameters": [
                                {"name": "thing", "type": {"full_name": "Other.Thing", "module": "Other"}}
                            ],
                        }
                    ],
                }
            ],
        }
    )
    options = DocumentationOptions(dependency_links=True)
    dependency_links, warnings = load_dependency_links(
        module=module, output_dir_abs=acme_docs, options=options
    )

    generate_documentation(
        module=module,
        comment_store=CommentStore(),
        output_dir_abs=acme_docs,
        options=options,
        dependency_links=dependency_links,
    )

    assert warnings == []
    widget_text = (acme_docs / "Acme.Widget.md").read_text(encoding="utf-8")
    assert "| `thing` | [Thing](../other-docs/Other.Thing.md) |  |" in widget_text
