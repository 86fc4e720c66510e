"""Batch generation: one page per documented type, sidecars, and the index."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from pathlib import Path

from .comment_store import CommentStore
from .errors import OutputWriteError, SignatureError
from .example_store import ExampleStore
from .index_renderer import render_index_page
from .links import LinkResolver
from .logging_utils import log_event, summarize_text
from .metadata_gateway import metadata_path_for, write_page_metadata
from .models import (
    DocumentationOptions,
    GenerationResult,
    ModuleInfo,
    RenderedPage,
    TypeFailure,
    TypeInfo,
)
from .signatures import is_documented_type, type_signature
from .type_renderer import RenderContext, render_type_page

MARKDOWN_SUFFIX = ".md"


def generate_documentation(
    *,
    module: ModuleInfo,
    comment_store: CommentStore,
    output_dir_abs: Path,
    options: DocumentationOptions,
    example_store: ExampleStore | None = None,
    dependency_links: Mapping[str, str] | None = None,
    on_page_written: Callable[[Path], None] | None = None,
) -> GenerationResult:
    """Render and write every documented type of `module`.

    A type that cannot be rendered is recorded as a failure and never linked
    to; the batch continues. Write failures abort the run with
    OutputWriteError.
    """
    started = time.perf_counter()
    index_path = output_dir_abs / f"{options.index_page_name}{MARKDOWN_SUFFIX}"
    result = GenerationResult(index_path=index_path)

    log_event(
        "generation_start",
        module=module.name,
        output_dir=output_dir_abs,
        type_count=len(module.types),
        comment_count=len(comment_store),
    )

    documented_types: list[TypeInfo] = []
    for type_info in module.types:
        if not is_documented_type(type_info):
            continue
        try:
            type_signature(type_info)
        except SignatureError as exc:
            _record_failure(result, type_info, exc)
            continue
        documented_types.append(type_info)

    # Pages are rendered before anything is written; a failed type drops out of
    # the link targets and the remaining pages are rendered again without it.
    while True:
        link_resolver = LinkResolver.for_module(
            module.model_copy(update={"types": documented_types}), options, dependency_links
        )
        context = RenderContext(
            module=module,
            comment_store=comment_store,
            options=options,
            link_resolver=link_resolver,
            example_store=example_store,
        )
        pages, failed = _render_pages(documented_types, context, result)
        if not failed:
            break
        documented_types = [type_info for type_info, _ in pages]

    rendered_types: list[TypeInfo] = []
    for type_info, page in pages:
        page_path = output_dir_abs / f"{page.page_name}{MARKDOWN_SUFFIX}"
        _write_text(page_path, page.text)
        result.written_paths.append(page_path)

        metadata_path: Path | None = None
        if options.generate_metadata:
            metadata_path = metadata_path_for(output_dir_abs, page.page_name)
            write_page_metadata(metadata_path_abs=metadata_path, records=page.metadata)
            result.metadata_paths.append(metadata_path)

        rendered_types.append(type_info)
        log_event(
            "type_rendered",
            type=type_signature(type_info),
            page_file=page_path,
            metadata_file=metadata_path,
            member_count=len(page.metadata) - 1,
        )
        if on_page_written is not None:
            on_page_written(page_path)

    index_module = module.model_copy(update={"types": rendered_types})
    _write_text(
        index_path,
        render_index_page(index_module, link_resolver=link_resolver, comment_store=comment_store),
    )

    log_event(
        "generation_stop",
        module=module.name,
        succeeded=result.succeeded,
        failed=result.failed,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return result


def _render_pages(
    types: list[TypeInfo], context: RenderContext, result: GenerationResult
) -> tuple[list[tuple[TypeInfo, RenderedPage]], int]:
    pages: list[tuple[TypeInfo, RenderedPage]] = []
    failed = 0
    for type_info in types:
        try:
            page = render_type_page(type_info, context)
        except Exception as exc:  # noqa: BLE001
            _record_failure(result, type_info, exc)
            failed += 1
            continue
        if page is not None:
            pages.append((type_info, page))
    return pages, failed


def _record_failure(result: GenerationResult, type_info: TypeInfo, exc: Exception) -> None:
    type_name = f"{type_info.namespace}.{type_info.name}" if type_info.namespace else type_info.name
    result.failures.append(TypeFailure(type_name=type_name, message=str(exc)))
    log_event(
        "type_render_failed",
        level=logging.ERROR,
        type=type_name,
        error_type=type(exc).__name__,
        error=summarize_text(exc),
    )


def _write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise OutputWriteError(f"Failed to write page: {path}") from exc

