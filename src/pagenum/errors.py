"""Exception types raised while numbering a presentation.

Only SlideMutationError is contained inside the pipeline (the slide is left
as-is and processing continues). Everything else aborts the run and its message
becomes the completion message reported to the caller.
"""


class PageNumberError(Exception):
    """Base class for all pagenum errors."""


class SourceUnavailableError(PageNumberError):
    """The input presentation could not be opened or read."""


class ArchiveFormatError(PageNumberError):
    """The input is not a readable zip container."""


class SlideMutationError(PageNumberError):
    """A single slide part could not receive a page number."""


class SinkUnavailableError(PageNumberError):
    """The output destination could not be opened or written."""


class UnexpectedError(PageNumberError):
    """Catch-all for failures that don't fit the other categories."""


class ConfigurationError(PageNumberError):
    """The run's settings are invalid (for example a color that isn't six hex digits)."""
