# --- trackdiag_lib/errors.py ---
"""Exceptions raised by the extraction and layout stages."""


class TrackDiagramError(Exception):
    """Base class for recoverable, user-reportable failures."""


class NoMarkersError(TrackDiagramError):
    """Raised when a diagram is requested but no marker survived parsing."""

    def __init__(self, message="Add at least one marker to render."):
        super().__init__(message)


class FragmentSourceUnavailableError(TrackDiagramError):
    """Raised when no document reader is available to supply text fragments."""

    def __init__(self, message="PDF parser not loaded."):
        super().__init__(message)


class DocumentReadError(TrackDiagramError):
    """Raised when a document cannot be read; the underlying error is chained as its cause."""

    def __init__(self, message="PDF import failed. Check the log for details."):
        super().__init__(message)


class InvalidPayloadError(TrackDiagramError):
    """Raised when a structured payload or one of its marker records is malformed."""

    def __init__(self, message="Malformed diagram payload."):
        super().__init__(message)
