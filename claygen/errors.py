"""Errors raised while loading descriptors and generating code."""

from __future__ import annotations


class ClaygenError(Exception):
    """Base class for every hard error; aborts the whole run."""


class DescriptorError(ClaygenError):
    """The descriptor-set document is malformed."""


class SerializationError(ClaygenError):
    """A swagger document could not be serialized for embedding."""


class RenderError(ClaygenError):
    """A template failed to render."""

    def __init__(self, template: str, message: str):
        super().__init__(f"{template}: {message}")
        self.template = template


class FormatError(ClaygenError):
    """Rendered source was rejected by the formatter."""
