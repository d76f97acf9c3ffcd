"""Recoverable failures raised by the extract / import / inject pipeline.

Every error here is scoped to the single operation that raised it; the
caller reports it and the session stays usable for another attempt.
"""


class LocalizationError(Exception):
    """Base class for all pipeline failures shown to the user."""

    title = "Error"


class EmptyInputError(LocalizationError):
    title = "Empty File"


class MalformedInputError(LocalizationError):
    """Input lacks the marker every Unity localization dump contains."""
    title = "Invalid File"


class OversizedInputError(LocalizationError):
    title = "File Too Large"


class NoTranslationsFoundError(LocalizationError):
    """Translation file parsed to zero term/translation pairs."""
    title = "No Translations"


class ReadFailureError(LocalizationError):
    title = "Read Error"


class ExtractionCancelled(LocalizationError):
    title = "Cancelled"
