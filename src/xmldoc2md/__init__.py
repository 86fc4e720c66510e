"""Markdown documentation generator for XML documentation comments."""

__version__ = "0.1.0"
