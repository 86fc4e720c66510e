"""Per-type page rendering.

Page layout, top to bottom:

    optional back link
    # DisplayName, namespace line, summary, declaration, inheritance
    type parameters, remarks, examples
    ## Constructors / Properties / Methods / Fields / Events
        ### member heading, summary, declaration, parameters, returns,
        exceptions, remarks, examples
    optional back link

Groups left empty after the visibility filter are omitted with their header.
Members are ordered by name, then by parameter-type signature; the order in
the manifest is never used.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .comment_store import CommentStore, plain_comment_text, replace_cross_references
from .errors import RenderError, SignatureError
from .example_store import ExampleStore
from .links import LinkResolver
from .markdown_builder import MarkdownDocument, escape, inline_code, link
from .models import (
    CommentRecord,
    DocumentationOptions,
    MemberDescriptor,
    MemberKind,
    MetadataRecord,
    ModuleInfo,
    RenderedPage,
    TypeInfo,
    TypeKind,
    TypeRef,
    Visibility,
)
from .signatures import (
    display_name_of,
    encode_type_ref,
    example_name_of,
    is_void,
    page_name_of,
    short_type_name,
    signature_of,
)
from .syntax import member_declaration, type_declaration

MEMBER_GROUP_ORDER = (
    MemberKind.CONSTRUCTOR,
    MemberKind.PROPERTY,
    MemberKind.METHOD,
    MemberKind.FIELD,
    MemberKind.EVENT,
)

_GROUP_TITLES = {
    MemberKind.CONSTRUCTOR: "Constructors",
    MemberKind.PROPERTY: "Properties",
    MemberKind.METHOD: "Methods",
    MemberKind.FIELD: "Fields",
    MemberKind.EVENT: "Events",
}

# Compiler-generated backing field of every enum.
_ENUM_VALUE_FIELD = "value__"


@dataclass(frozen=True)
class RenderContext:
    module: ModuleInfo
    comment_store: CommentStore
    options: DocumentationOptions
    link_resolver: LinkResolver
    example_store: ExampleStore | None = None


@dataclass(frozen=True)
class MemberEntry:
    descriptor: MemberDescriptor
    signature: str
    heading: str
    record: CommentRecord


@dataclass(frozen=True)
class PageSpec:
    type_info: TypeInfo
    page_name: str
    signature: str
    display_name: str
    record: CommentRecord
    groups: tuple[tuple[MemberKind, tuple[MemberEntry, ...]], ...]


def render_type_page(type_info: TypeInfo, context: RenderContext) -> RenderedPage | None:
    """Render one type page; delegates produce no page and return None."""
    if type_info.kind == TypeKind.DELEGATE:
        return None

    try:
        page_spec = build_page_spec(type_info, context)
    except SignatureError as exc:
        raise RenderError(f"Cannot render {type_info.name}: {exc}") from exc

    document = MarkdownDocument()
    resolver = context.link_resolver
    page = page_spec.page_name

    if context.options.back_button:
        _append_back_link(document, resolver, page)

    _append_type_header(document, page_spec, context)

    for kind, entries in page_spec.groups:
        document.append_header(_GROUP_TITLES[kind], 2)
        if kind == MemberKind.FIELD and type_info.kind == TypeKind.ENUM:
            _append_enum_fields(document, entries, page, resolver)
            continue
        for entry in entries:
            _append_member(document, entry, page, context)

    if context.options.back_button:
        document.append_horizontal_rule()
        _append_back_link(document, resolver, page)

    return RenderedPage(
        page_name=page,
        text=document.serialize(),
        metadata=tuple(_metadata_records(page_spec)),
    )


def build_page_spec(type_info: TypeInfo, context: RenderContext) -> PageSpec:
    signature = signature_of(type_info)
    groups: list[tuple[MemberKind, tuple[MemberEntry, ...]]] = []

    descriptors = [
        MemberDescriptor.from_member(member, type_info)
        for member in type_info.members
        if _is_included(member.visibility, context.options)
        and not (type_info.kind == TypeKind.ENUM and member.name == _ENUM_VALUE_FIELD)
    ]
    for kind in MEMBER_GROUP_ORDER:
        entries = [
            _member_entry(descriptor, context.comment_store)
            for descriptor in descriptors
            if descriptor.kind == kind
        ]
        if not entries:
            continue
        entries.sort(key=_member_sort_key)
        groups.append((kind, tuple(entries)))

    return PageSpec(
        type_info=type_info,
        page_name=page_name_of(type_info),
        signature=signature,
        display_name=display_name_of(type_info),
        record=_record_for(signature, context.comment_store),
        groups=tuple(groups),
    )


def comment_markdown(text: str, from_page: str, resolver: LinkResolver) -> str:
    """Comment text with cross-references linked where a target page exists."""
    return replace_cross_references(
        text, lambda cref, inner: resolver.resolve_cref(from_page, cref, inner)
    )


def one_line_summary(summary: str) -> str:
    first_paragraph = summary.split("\n\n", 1)[0]
    return " ".join(first_paragraph.split())


def member_heading(member: MemberDescriptor) -> str:
    if member.kind in (MemberKind.CONSTRUCTOR, MemberKind.METHOD):
        name = member.declaring_type.name if member.kind == MemberKind.CONSTRUCTOR else member.name
        if member.generic_parameters:
            name = f"{name}<{', '.join(member.generic_parameters)}>"
        parameter_types = ", ".join(_plain_type_name(p.type) for p in member.parameters)
        return f"{name}({parameter_types})"
    if member.kind == MemberKind.PROPERTY and member.parameters:
        parameter_types = ", ".join(_plain_type_name(p.type) for p in member.parameters)
        return f"{member.name}[{parameter_types}]"
    return member.name


def _is_included(visibility: Visibility, options: DocumentationOptions) -> bool:
    return visibility == Visibility.PUBLIC or options.include_non_public_members


def _member_entry(descriptor: MemberDescriptor, comment_store: CommentStore) -> MemberEntry:
    signature = signature_of(descriptor)
    return MemberEntry(
        descriptor=descriptor,
        signature=signature,
        heading=member_heading(descriptor),
        record=_record_for(signature, comment_store),
    )


def _member_sort_key(entry: MemberEntry) -> tuple[str, str, str]:
    descriptor = entry.descriptor
    parameter_signature = ",".join(encode_type_ref(p.type) for p in descriptor.parameters)
    return_signature = (
        encode_type_ref(descriptor.return_type) if descriptor.return_type is not None else ""
    )
    return descriptor.name, parameter_signature, return_signature


def _record_for(signature: str, comment_store: CommentStore) -> CommentRecord:
    record = comment_store.lookup(signature)
    return record if record is not None else CommentRecord(signature=signature)


def _append_back_link(document: MarkdownDocument, resolver: LinkResolver, page: str) -> None:
    document.append_paragraph(link(inline_code("< Back"), resolver.index_link(page)))


def _append_type_header(
    document: MarkdownDocument, page_spec: PageSpec, context: RenderContext
) -> None:
    type_info = page_spec.type_info
    resolver = context.link_resolver
    page = page_spec.page_name
    record = page_spec.record

    document.append_header(escape(page_spec.display_name), 1)
    if type_info.namespace:
        document.append_paragraph(f"Namespace: {escape(type_info.namespace)}")
    document.append_paragraph(comment_markdown(record.summary, page, resolver))
    document.append_code_block(type_declaration(type_info), "csharp")

    if type_info.base_type is not None and type_info.kind in (TypeKind.CLASS, TypeKind.STRUCT):
        document.append_paragraph(
            f"Inheritance {resolver.resolve(page, type_info.base_type)} → "
            f"{escape(page_spec.display_name)}"
        )
    if type_info.interfaces:
        implemented = ", ".join(resolver.resolve(page, ref) for ref in type_info.interfaces)
        document.append_paragraph(f"Implements {implemented}")

    if type_info.generic_parameters:
        _append_type_parameters(
            document, type_info.generic_parameters, record, page, resolver, level=2
        )

    if record.remarks:
        document.append_header("Remarks", 2)
        document.append_paragraph(comment_markdown(record.remarks, page, resolver))

    _append_examples(document, record, example_name_of(type_info), page, context, level=2)


def _append_member(
    document: MarkdownDocument, entry: MemberEntry, page: str, context: RenderContext
) -> None:
    member = entry.descriptor
    record = entry.record
    resolver = context.link_resolver

    document.append_header(escape(entry.heading), 3)
    document.append_paragraph(comment_markdown(record.summary, page, resolver))
    document.append_code_block(member_declaration(member), "csharp")

    if member.generic_parameters:
        _append_type_parameters(
            document, member.generic_parameters, record, page, resolver, level=4
        )

    if member.parameters:
        document.append_header("Parameters", 4)
        document.append_table(
            ("Name", "Type", "Description"),
            [
                (
                    inline_code(parameter.name),
                    resolver.resolve(page, parameter.type),
                    comment_markdown(record.parameter_doc(parameter.name), page, resolver),
                )
                for parameter in member.parameters
            ],
        )

    if member.kind == MemberKind.PROPERTY and member.return_type is not None:
        document.append_header("Property Value", 4)
        document.append_paragraph(resolver.resolve(page, member.return_type))
        document.append_paragraph(comment_markdown(record.value or "", page, resolver))
    elif member.kind == MemberKind.METHOD and not is_void(member.return_type):
        document.append_header("Returns", 4)
        document.append_paragraph(resolver.resolve(page, member.return_type))
        document.append_paragraph(comment_markdown(record.returns or "", page, resolver))

    if record.exceptions:
        document.append_header("Exceptions", 4)
        document.append_table(
            ("Exception", "Description"),
            [
                (resolver.resolve_cref(page, cref), comment_markdown(text, page, resolver))
                for cref, text in record.exceptions
            ],
        )

    if record.remarks:
        document.append_header("Remarks", 4)
        document.append_paragraph(comment_markdown(record.remarks, page, resolver))

    _append_examples(document, record, example_name_of(member), page, context, level=4)


def _append_type_parameters(
    document: MarkdownDocument,
    names: Iterable[str],
    record: CommentRecord,
    page: str,
    resolver: LinkResolver,
    *,
    level: int,
) -> None:
    document.append_header("Type Parameters", level)
    document.append_table(
        ("Name", "Description"),
        [
            (inline_code(name), comment_markdown(record.type_parameter_doc(name), page, resolver))
            for name in names
        ],
    )


def _append_enum_fields(
    document: MarkdownDocument,
    entries: tuple[MemberEntry, ...],
    page: str,
    resolver: LinkResolver,
) -> None:
    document.append_table(
        ("Name", "Value", "Description"),
        [
            (
                escape(entry.descriptor.name),
                entry.descriptor.value or "",
                one_line_summary(comment_markdown(entry.record.summary, page, resolver)),
            )
            for entry in entries
        ],
    )


def _append_examples(
    document: MarkdownDocument,
    record: CommentRecord,
    example_name: str,
    page: str,
    context: RenderContext,
    *,
    level: int,
) -> None:
    snippets = context.example_store.lookup(example_name) if context.example_store else ()
    if not record.examples and not snippets:
        return
    document.append_header("Examples", level)
    for example_text in record.examples:
        document.append_paragraph(comment_markdown(example_text, page, context.link_resolver))
    for snippet in snippets:
        document.append_code_block(snippet.text, snippet.language)


def _metadata_records(page_spec: PageSpec) -> Iterable[MetadataRecord]:
    yield MetadataRecord(
        signature=page_spec.signature,
        display_name=page_spec.display_name,
        kind=str(page_spec.type_info.kind),
        summary=one_line_summary(plain_comment_text(page_spec.record.summary)),
    )
    for _, entries in page_spec.groups:
        for entry in entries:
            yield MetadataRecord(
                signature=entry.signature,
                display_name=entry.heading,
                kind=str(entry.descriptor.kind),
                summary=one_line_summary(plain_comment_text(entry.record.summary)),
            )


def _plain_type_name(type_ref: TypeRef) -> str:
    if type_ref.is_generic_parameter:
        name = type_ref.full_name
    else:
        name = short_type_name(type_ref.full_name).replace("+", ".")
        if type_ref.generic_arguments:
            arguments = ", ".join(_plain_type_name(arg) for arg in type_ref.generic_arguments)
            name = f"{name}<{arguments}>"
    if type_ref.array_rank:
        name = f"{name}[{',' * (type_ref.array_rank - 1)}]"
    if type_ref.is_pointer:
        name = f"{name}*"
    if type_ref.is_by_ref:
        name = f"{name}&"
    return name
