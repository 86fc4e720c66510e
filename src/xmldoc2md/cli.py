"""CLI entry and startup wiring."""

from __future__ import annotations

import argparse
from pathlib import Path

from . import __version__
from .comment_store import CommentStore, load_comment_store
from .dependency_gateway import load_dependency_links
from .errors import Xmldoc2mdError
from .example_store import load_example_store
from .generation_service import generate_documentation
from .logging_utils import setup_logging
from .manifest_gateway import load_module_manifest
from .models import DocumentationOptions, LoadWarning
from .path_mapping import resolve_startup_paths
from .presenters import (
    render_error,
    render_load_warning_lines,
    render_loaded_parameters,
    render_page_written,
    render_summary,
    render_type_failure,
)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    app_root_abs = Path(__file__).resolve().parent

    try:
        resolved_paths = resolve_startup_paths(
            manifest_arg_raw=args.src,
            output_arg_raw=args.out,
            comment_arg_raw=args.xml,
            examples_arg_raw=args.examples_path,
            log_file_arg_raw=args.log_file,
            app_root_abs=app_root_abs,
            base_dir=Path.cwd(),
        )
        setup_logging(
            str(resolved_paths.log_file_abs) if resolved_paths.log_file_abs is not None else None
        )

        options = DocumentationOptions(
            index_page_name=args.index_page_name,
            examples_directory=resolved_paths.examples_dir_abs,
            github_pages=args.github_pages,
            gitlab_wiki=args.gitlab_wiki,
            back_button=args.back_button,
            include_non_public_members=args.private_members,
            generate_metadata=args.generate_metadata,
            dependency_links=args.dependency_links,
        )

        module = load_module_manifest(resolved_paths.manifest_file_abs)
        warnings: list[LoadWarning] = []
        if resolved_paths.comment_file_explicit or resolved_paths.comment_file_abs.exists():
            comment_store = load_comment_store(resolved_paths.comment_file_abs)
            warnings.extend(comment_store.warnings)
        else:
            comment_store = CommentStore()
            warnings.append(
                LoadWarning(
                    source=str(resolved_paths.comment_file_abs),
                    message="Comment file not found; pages will carry signatures only.",
                )
            )
        example_store = (
            load_example_store(resolved_paths.examples_dir_abs)
            if resolved_paths.examples_dir_abs is not None
            else None
        )
        dependency_links: dict[str, str] = {}
        if options.dependency_links:
            dependency_links, dependency_warnings = load_dependency_links(
                module=module,
                output_dir_abs=resolved_paths.output_dir_abs,
                options=options,
            )
            warnings.extend(dependency_warnings)

        for line in render_loaded_parameters(
            resolved_paths=resolved_paths,
            module_name=module.name,
            type_count=len(module.types),
        ):
            print(line)
        for line in render_load_warning_lines(warnings):
            print(line)

        result = generate_documentation(
            module=module,
            comment_store=comment_store,
            output_dir_abs=resolved_paths.output_dir_abs,
            options=options,
            example_store=example_store,
            dependency_links=dependency_links,
            on_page_written=lambda page_path: print(render_page_written(page_path)),
        )
    except Xmldoc2mdError as exc:
        print(render_error(str(exc)))
        return 1

    for failure in result.failures:
        print(render_type_failure(failure))
    print(render_summary(result))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xmldoc2md",
        description="Generate Markdown pages from XML documentation comments.",
    )
    parser.add_argument(
        "src",
        help="Type-surface manifest JSON (absolute, relative, or mapped with ~ / @).",
    )
    parser.add_argument(
        "out",
        help="Output directory for generated pages (created when missing).",
    )
    parser.add_argument(
        "--xml",
        help="XML documentation file (default: manifest path with an .xml suffix).",
    )
    parser.add_argument(
        "--index-page-name",
        default="index",
        help="Name of the index page without extension (default: index).",
    )
    parser.add_argument(
        "--examples-path",
        help="Directory of example snippets named after pages or member signatures.",
    )
    parser.add_argument(
        "--github-pages",
        action="store_true",
        help="Emit links without the .md extension.",
    )
    parser.add_argument(
        "--gitlab-wiki",
        action="store_true",
        help="Emit links without the .md extension and without the leading './'.",
    )
    parser.add_argument(
        "--back-button",
        action="store_true",
        help="Add a link back to the index at the top and bottom of every page.",
    )
    parser.add_argument(
        "--private-members",
        action="store_true",
        help="Document non-public members of public types.",
    )
    parser.add_argument(
        "--generate-metadata",
        action="store_true",
        help="Write a .meta.json sidecar next to every page.",
    )
    parser.add_argument(
        "--dependency-links",
        action="store_true",
        help="Link types of referenced modules whose generated docs are available.",
    )
    parser.add_argument(
        "--log-file",
        help="Optional structured log file.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser
