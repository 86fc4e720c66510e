"""Canonical signatures, page names and display names.

Signatures follow the XML documentation-comment ID convention, so they match
the keys a compiler writes into the comment file:

    T:Acme.Widget
    T:Acme.Cache`1
    M:Acme.Widget.#ctor(System.Int32)
    M:Acme.Widget.Map``1(System.Collections.Generic.List{``0},`0)
    P:Acme.Widget.Item(System.Int32)
    M:Acme.Money.op_Implicit(Acme.Money)~System.Decimal

Page names use the reflection full name instead: nested types are joined with
'+' (never '.') so `Acme.Outer+Inner` cannot collide with a top-level
`Acme.Outer.Inner`.
"""

from __future__ import annotations

import re

from .errors import SignatureError
from .models import (
    LinkTarget,
    MemberDescriptor,
    MemberKind,
    TypeInfo,
    TypeKind,
    TypeRef,
    Visibility,
)

_ARITY_SUFFIX_RE = re.compile(r"`\d+")
_ILLEGAL_FILENAME_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1F\x7F]')
_SIMPLE_NAME_RE = re.compile(r"^[^\s.+`,()\[\]{}<>]+$")
# Explicit interface implementations carry dotted, possibly generic names.
_MEMBER_NAME_RE = re.compile(r"^[^\s+`()\[\]{}]+$")

_MEMBER_PREFIXES = {
    MemberKind.CONSTRUCTOR: "M",
    MemberKind.METHOD: "M",
    MemberKind.PROPERTY: "P",
    MemberKind.FIELD: "F",
    MemberKind.EVENT: "E",
}

_CONVERSION_OPERATORS = frozenset({"op_Implicit", "op_Explicit"})

VOID_TYPE_NAME = "System.Void"


def type_full_name(type_info: TypeInfo) -> str:
    """Return the reflection full name (namespace '.', nesting '+', arity `N)."""
    if not type_info.name or not _SIMPLE_NAME_RE.match(type_info.name):
        raise SignatureError(f"Invalid type name: {type_info.name!r}")
    simple = f"{type_info.name}{_arity_suffix(len(type_info.generic_parameters))}"
    if type_info.declaring_type:
        return f"{type_info.declaring_type}+{simple}"
    if type_info.namespace:
        return f"{type_info.namespace}.{simple}"
    return simple


def signature_of(item: TypeInfo | MemberDescriptor) -> str:
    if isinstance(item, TypeInfo):
        return type_signature(type_info=item)
    return member_signature(item)


def type_signature(type_info: TypeInfo) -> str:
    return f"T:{_doc_id_name(type_full_name(type_info))}"


def type_ref_signature(type_ref: TypeRef) -> str | None:
    """Signature of the type definition a reference points at.

    Generic parameters have no definition of their own and yield None.
    """
    if type_ref.is_generic_parameter:
        return None
    return f"T:{_doc_id_name(type_ref.full_name)}"


def member_signature(member: MemberDescriptor) -> str:
    prefix = _MEMBER_PREFIXES.get(member.kind)
    if prefix is None:
        raise SignatureError(f"Unsupported member kind: {member.kind!r}")

    owner = _doc_id_name(type_full_name(member.declaring_type))
    if member.kind == MemberKind.CONSTRUCTOR:
        name = "#cctor" if member.is_static else "#ctor"
    else:
        if not member.name or not _MEMBER_NAME_RE.match(member.name):
            raise SignatureError(f"Invalid member name on {owner}: {member.name!r}")
        name = _doc_id_member_name(member.name)
    if member.kind == MemberKind.METHOD and member.generic_parameters:
        name = f"{name}``{len(member.generic_parameters)}"

    signature = f"{prefix}:{owner}.{name}"
    if member.kind in (MemberKind.CONSTRUCTOR, MemberKind.METHOD, MemberKind.PROPERTY):
        if member.parameters:
            encoded = ",".join(encode_type_ref(p.type) for p in member.parameters)
            signature = f"{signature}({encoded})"
    if member.kind == MemberKind.METHOD and member.name in _CONVERSION_OPERATORS:
        if member.return_type is None:
            raise SignatureError(f"Conversion operator without return type: {signature}")
        signature = f"{signature}~{encode_type_ref(member.return_type)}"
    return signature


def encode_type_ref(type_ref: TypeRef) -> str:
    """Encode a parameter type the way doc-comment IDs spell it."""
    if type_ref.is_generic_parameter:
        marker = "``" if type_ref.is_method_generic_parameter else "`"
        encoded = f"{marker}{type_ref.generic_parameter_position}"
    else:
        if not type_ref.full_name:
            raise SignatureError("Type reference without a name.")
        encoded = _doc_id_name(type_ref.full_name)
        if type_ref.generic_arguments:
            base = _ARITY_SUFFIX_RE.sub("", encoded)
            arguments = ",".join(encode_type_ref(arg) for arg in type_ref.generic_arguments)
            encoded = f"{base}{{{arguments}}}"

    if type_ref.array_rank == 1:
        encoded = f"{encoded}[]"
    elif type_ref.array_rank > 1:
        encoded = f"{encoded}[{','.join('0:' for _ in range(type_ref.array_rank))}]"
    if type_ref.is_pointer:
        encoded = f"{encoded}*"
    if type_ref.is_by_ref:
        encoded = f"{encoded}@"
    return encoded


def page_name_of(type_info: TypeInfo) -> str:
    full_name = type_full_name(type_info)
    return sanitize_file_name(re.sub(r"`(\d+)", r"-\1", full_name))


def example_name_of(item: TypeInfo | MemberDescriptor) -> str:
    """File-name-safe key used to look up example snippets."""
    if isinstance(item, TypeInfo):
        return page_name_of(item)
    return sanitize_file_name(member_signature(item).split(":", 1)[1])


def sanitize_file_name(name: str) -> str:
    return _ILLEGAL_FILENAME_CHARS_RE.sub("_", name)


def link_target_of(type_info: TypeInfo) -> LinkTarget:
    return LinkTarget(display_name=display_name_of(type_info), page_name=page_name_of(type_info))


def display_name_of(type_info: TypeInfo) -> str:
    """C#-style display name, e.g. `Outer.Inner<T>`."""
    name = type_info.name
    if type_info.generic_parameters:
        name = f"{name}<{', '.join(type_info.generic_parameters)}>"
    if type_info.declaring_type:
        return f"{short_type_name(type_info.declaring_type).replace('+', '.')}.{name}"
    return name


def short_type_name(full_name: str) -> str:
    """Strip the namespace and arity suffixes; keep the '+' nesting chain."""
    without_arity = _ARITY_SUFFIX_RE.sub("", full_name)
    outermost, plus, nested = without_arity.partition("+")
    return outermost.rsplit(".", 1)[-1] + plus + nested


def is_documented_type(type_info: TypeInfo) -> bool:
    return type_info.kind != TypeKind.DELEGATE and type_info.visibility == Visibility.PUBLIC


def is_void(type_ref: TypeRef | None) -> bool:
    return type_ref is None or (
        type_ref.full_name == VOID_TYPE_NAME and not type_ref.is_pointer
    )


def _doc_id_name(full_name: str) -> str:
    return full_name.replace("+", ".")


def _doc_id_member_name(name: str) -> str:
    # System.IDisposable.Dispose -> System#IDisposable#Dispose
    return (
        name.replace(".", "#")
        .replace("<", "{")
        .replace(">", "}")
        .replace(",", "@")
    )


def _arity_suffix(count: int) -> str:
    return f"`{count}" if count else ""
