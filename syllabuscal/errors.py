"""
Error types raised at the extraction and export boundaries.
All of them are recoverable: none leaves the event collection half-updated.
"""


class SyllabusCalError(Exception):
    """Base class for syllabuscal errors."""


class NoInputError(SyllabusCalError):
    """Extraction was invoked without any syllabus text."""

    def __init__(self, message: str = "Please upload or paste a syllabus first!"):
        super().__init__(message)


class EncodingError(SyllabusCalError):
    """The calendar export encoder could not serialize the events."""


class EmptyExportError(EncodingError):
    """Export was invoked with no events to write."""

    def __init__(self, message: str = "No events to export!"):
        super().__init__(message)
