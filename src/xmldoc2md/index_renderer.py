"""Index page listing every documented type, grouped by namespace."""

from __future__ import annotations

from collections import defaultdict

from .comment_store import CommentStore
from .links import LinkResolver
from .markdown_builder import MarkdownDocument, escape, link
from .models import ModuleInfo, TypeInfo
from .signatures import display_name_of, is_documented_type, page_name_of, type_signature
from .type_renderer import comment_markdown, one_line_summary

GLOBAL_NAMESPACE_LABEL = "Global Namespace"


def render_index_page(
    module: ModuleInfo,
    *,
    link_resolver: LinkResolver,
    comment_store: CommentStore | None = None,
) -> str:
    index_page = link_resolver.options.index_page_name
    document = MarkdownDocument()
    document.append_header(escape(module.name), 1)

    by_namespace: dict[str, list[TypeInfo]] = defaultdict(list)
    for type_info in module.types:
        if is_documented_type(type_info):
            by_namespace[type_info.namespace or ""].append(type_info)

    for namespace in sorted(by_namespace):
        document.append_header(escape(namespace or GLOBAL_NAMESPACE_LABEL), 2)
        types = sorted(by_namespace[namespace], key=lambda t: (display_name_of(t), page_name_of(t)))
        for type_info in types:
            entry = link(
                escape(display_name_of(type_info)),
                link_resolver.page_link(index_page, page_name_of(type_info)),
            )
            summary = _one_line(type_info, comment_store, link_resolver, index_page)
            document.append_paragraph(f"{entry}  \n{summary}" if summary else entry)

    return document.serialize()


def _one_line(
    type_info: TypeInfo,
    comment_store: CommentStore | None,
    link_resolver: LinkResolver,
    index_page: str,
) -> str:
    if comment_store is None:
        return ""
    record = comment_store.lookup(type_signature(type_info))
    if record is None:
        return ""
    return one_line_summary(comment_markdown(record.summary, index_page, link_resolver))
