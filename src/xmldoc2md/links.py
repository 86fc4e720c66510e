"""Link strings between generated pages."""

from __future__ import annotations

import posixpath
from collections.abc import Mapping

from .markdown_builder import escape, link
from .models import DocumentationOptions, LinkTarget, ModuleInfo, TypeRef
from .signatures import (
    is_documented_type,
    link_target_of,
    short_type_name,
    type_ref_signature,
    type_signature,
)


def format_page_link(relative_page: str, options: DocumentationOptions) -> str:
    """Apply the output-path convention to a relative, extensionless page path."""
    relative = posixpath.normpath(relative_page)
    if not relative.startswith("../"):
        relative = f"./{relative}"
    if not options.strip_extension:
        relative = f"{relative}.md"
    if options.gitlab_wiki and relative.startswith("./"):
        relative = relative[2:]
    return relative


class LinkResolver:
    """Resolves type references to Markdown links under one run's conventions.

    Link forms for a page `Acme.Widget` seen from a sibling page:
    default `./Acme.Widget.md`, GitHub Pages `./Acme.Widget`, wiki `Acme.Widget`.
    Anything that cannot be resolved renders as plain text.
    """

    def __init__(
        self,
        *,
        module_name: str,
        documented_pages: Mapping[str, LinkTarget],
        options: DocumentationOptions,
        dependency_links: Mapping[str, str] | None = None,
    ) -> None:
        self._module_name = module_name
        self._documented_pages = dict(documented_pages)
        self._options = options
        self._dependency_links = dict(dependency_links or {})

    @classmethod
    def for_module(
        cls,
        module: ModuleInfo,
        options: DocumentationOptions,
        dependency_links: Mapping[str, str] | None = None,
    ) -> LinkResolver:
        documented_pages = {
            type_signature(type_info): link_target_of(type_info)
            for type_info in module.types
            if is_documented_type(type_info)
        }
        return cls(
            module_name=module.name,
            documented_pages=documented_pages,
            options=options,
            dependency_links=dependency_links,
        )

    @property
    def options(self) -> DocumentationOptions:
        return self._options

    def page_link(self, from_page: str, to_page: str) -> str:
        start = posixpath.dirname(from_page) or "."
        return format_page_link(posixpath.relpath(to_page, start), self._options)

    def index_link(self, from_page: str) -> str:
        return self.page_link(from_page, self._options.index_page_name)

    def resolve(self, from_page: str, to_type: TypeRef) -> str:
        """Return Markdown text for a type reference, linked where possible."""
        if to_type.is_generic_parameter:
            text = escape(to_type.full_name)
        else:
            text = self._resolve_named(from_page, to_type)

        if to_type.array_rank:
            text += escape(f"[{',' * (to_type.array_rank - 1)}]")
        if to_type.is_pointer:
            text += escape("*")
        if to_type.is_by_ref:
            text += "&"
        return text

    def resolve_cref(self, from_page: str, cref: str, text: str = "") -> str:
        """Return Markdown text for a comment cref such as `T:Acme.WidgetError`.

        `text` replaces the default label (already Markdown, not escaped).
        """
        kind, _, name = cref.partition(":")
        if not name:
            return text or escape(cref)
        if kind == "T":
            page = self._documented_pages.get(cref)
            if page is not None:
                label = text or escape(page.display_name)
                return link(label, self.page_link(from_page, page.page_name))
            if self._options.dependency_links and cref in self._dependency_links:
                label = text or escape(short_type_name(name))
                return link(label, self._dependency_links[cref])
        return text or escape(short_type_name(name.split("(", 1)[0]))

    def _resolve_named(self, from_page: str, to_type: TypeRef) -> str:
        signature = type_ref_signature(to_type)
        short_name = short_type_name(to_type.full_name).replace("+", ".")
        target: str | None = None

        if to_type.module is None or to_type.module == self._module_name:
            page = self._documented_pages.get(signature) if signature else None
            if page is not None:
                target = self.page_link(from_page, page.page_name)
                if not to_type.generic_arguments:
                    short_name = page.display_name
        elif self._options.dependency_links and signature:
            target = self._dependency_links.get(signature)

        text = link(escape(short_name), target) if target else escape(short_name)
        if to_type.generic_arguments:
            arguments = ", ".join(self.resolve(from_page, arg) for arg in to_type.generic_arguments)
            text = f"{text}{escape('<')}{arguments}{escape('>')}"
        return text
