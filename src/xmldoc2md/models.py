"""Manifest models and dataclasses shared across xmldoc2md layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel


class TypeKind(StrEnum):
    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    DELEGATE = "delegate"


class MemberKind(StrEnum):
    CONSTRUCTOR = "constructor"
    PROPERTY = "property"
    METHOD = "method"
    FIELD = "field"
    EVENT = "event"


class Visibility(StrEnum):
    PUBLIC = "public"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"
    PRIVATE = "private"


class TypeRef(BaseModel):
    """A reference to a type as it appears in a signature.

    `full_name` uses the reflection form: namespace-qualified, nested types
    joined with '+', generic arity as a backtick suffix (List`1). For generic
    parameters it holds the parameter name and `generic_parameter_position`
    is set.
    """

    full_name: str
    module: str | None = None  # None = the module being documented
    generic_arguments: list[TypeRef] = []
    generic_parameter_position: int | None = None
    is_method_generic_parameter: bool = False
    array_rank: int = 0  # 0 = not an array
    is_pointer: bool = False
    is_by_ref: bool = False

    @property
    def is_generic_parameter(self) -> bool:
        return self.generic_parameter_position is not None


class ParameterInfo(BaseModel):
    name: str
    type: TypeRef


class MemberInfo(BaseModel):
    kind: MemberKind
    name: str
    visibility: Visibility = Visibility.PUBLIC
    parameters: list[ParameterInfo] = []
    # Method return type, or the declared type of a property/field/event.
    return_type: TypeRef | None = None
    generic_parameters: list[str] = []
    modifiers: list[str] = []
    accessors: list[str] = []  # property accessors, e.g. ["get", "set"]
    value: str | None = None  # constant or enum field value


class TypeInfo(BaseModel):
    namespace: str | None = None
    name: str  # simple name without arity suffix
    kind: TypeKind = TypeKind.CLASS
    visibility: Visibility = Visibility.PUBLIC
    generic_parameters: list[str] = []
    declaring_type: str | None = None  # reflection full name of the enclosing type
    modifiers: list[str] = []
    base_type: TypeRef | None = None
    interfaces: list[TypeRef] = []
    members: list[MemberInfo] = []


class ReferencedModule(BaseModel):
    name: str
    # Directory holding the module's generated pages and .meta.json sidecars,
    # relative to the output directory of this run (or absolute).
    docs_path: str | None = None
    docs_url: str | None = None


class ModuleInfo(BaseModel):
    name: str
    types: list[TypeInfo] = []
    referenced_modules: list[ReferencedModule] = []


@dataclass(frozen=True)
class CommentRecord:
    signature: str
    summary: str = ""
    remarks: str = ""
    parameters: tuple[tuple[str, str], ...] = ()
    returns: str | None = None
    exceptions: tuple[tuple[str, str], ...] = ()
    examples: tuple[str, ...] = ()
    type_parameters: tuple[tuple[str, str], ...] = ()
    value: str | None = None

    def parameter_doc(self, name: str) -> str:
        return _lookup_pair(self.parameters, name)

    def type_parameter_doc(self, name: str) -> str:
        return _lookup_pair(self.type_parameters, name)


def _lookup_pair(pairs: tuple[tuple[str, str], ...], name: str) -> str:
    for pair_name, text in pairs:
        if pair_name == name:
            return text
    return ""


@dataclass(frozen=True)
class LoadWarning:
    source: str
    message: str


@dataclass(frozen=True)
class MemberDescriptor:
    kind: MemberKind
    name: str
    parameters: tuple[ParameterInfo, ...]
    return_type: TypeRef | None
    generic_parameters: tuple[str, ...]
    visibility: Visibility
    declaring_type: TypeInfo
    modifiers: tuple[str, ...] = ()
    accessors: tuple[str, ...] = ()
    value: str | None = None

    @classmethod
    def from_member(cls, member: MemberInfo, declaring_type: TypeInfo) -> MemberDescriptor:
        return cls(
            kind=member.kind,
            name=member.name,
            parameters=tuple(member.parameters),
            return_type=member.return_type,
            generic_parameters=tuple(member.generic_parameters),
            visibility=member.visibility,
            declaring_type=declaring_type,
            modifiers=tuple(member.modifiers),
            accessors=tuple(member.accessors),
            value=member.value,
        )

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers


@dataclass(frozen=True)
class LinkTarget:
    display_name: str
    page_name: str


@dataclass(frozen=True)
class MetadataRecord:
    signature: str
    display_name: str
    kind: str
    summary: str

    def to_dict(self) -> dict[str, str]:
        return {
            "signature": self.signature,
            "display_name": self.display_name,
            "kind": self.kind,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class DocumentationOptions:
    index_page_name: str = "index"
    examples_directory: Path | None = None
    github_pages: bool = False
    gitlab_wiki: bool = False
    back_button: bool = False
    include_non_public_members: bool = False
    generate_metadata: bool = False
    dependency_links: bool = False

    @property
    def strip_extension(self) -> bool:
        return self.github_pages or self.gitlab_wiki


@dataclass(frozen=True)
class ExampleSnippet:
    file_name: str
    text: str
    language: str | None


@dataclass(frozen=True)
class RenderedPage:
    page_name: str
    text: str
    metadata: tuple[MetadataRecord, ...]


@dataclass(frozen=True)
class TypeFailure:
    type_name: str
    message: str


@dataclass(frozen=True)
class GenerationResult:
    index_path: Path
    written_paths: list[Path] = field(default_factory=list)
    metadata_paths: list[Path] = field(default_factory=list)
    failures: list[TypeFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.written_paths)

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass(frozen=True)
class ResolvedPaths:
    manifest_file_abs: Path
    output_dir_abs: Path
    comment_file_abs: Path
    comment_file_explicit: bool
    examples_dir_abs: Path | None
    log_file_abs: Path | None
