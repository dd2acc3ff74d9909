from __future__ import annotations


class VeritasError(Exception):
    """Base class for errors raised by the analysis core."""


class ProviderUnavailable(VeritasError):
    """A provider call failed (network, auth, quota or an empty answer).

    Resolvers catch this and move on to the fallback provider; it never
    reaches the HTTP layer.
    """


class OCRFailure(VeritasError):
    """Neither OCR provider produced readable text."""


class NoReadableContent(VeritasError):
    """The submitted image holds no text that could be analysed."""
