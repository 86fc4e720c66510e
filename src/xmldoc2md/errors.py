"""Typed exceptions for xmldoc2md."""


class Xmldoc2mdError(Exception):
    """Base exception for xmldoc2md failures."""


class PathMappingError(Xmldoc2mdError):
    """Raised when a path argument cannot be safely mapped."""


class StartupValidationError(Xmldoc2mdError):
    """Raised when startup arguments are invalid."""


class ManifestError(Xmldoc2mdError):
    """Raised when the type-surface manifest cannot be read or validated."""


class CommentFileError(Xmldoc2mdError):
    """Raised when the XML documentation file cannot be read at all."""


class SignatureError(Xmldoc2mdError):
    """Raised when a canonical signature cannot be built for a type or member."""


class RenderError(Xmldoc2mdError):
    """Raised when a type page cannot be rendered."""


class MarkdownDocumentError(Xmldoc2mdError):
    """Raised when a sealed Markdown document is modified."""


class OutputWriteError(Xmldoc2mdError):
    """Raised when a generated file cannot be written."""


class MetadataError(Xmldoc2mdError):
    """Raised when a sidecar metadata file cannot be read or parsed."""
