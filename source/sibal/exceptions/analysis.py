"""This module defines custom exceptions raised by the notice intelligence pipeline.

Only `NotFoundError`, `DownloadError` and `UnsupportedTypeError` are meant to
leave an analyzer. `AiInvocationError` is always caught by the analyzer that
triggered it and replaced by a heuristic result.
"""


class AnalysisError(Exception):
    """Base exception for errors that occur during an analyzer execution."""

    pass


class NotFoundError(AnalysisError):
    """Raised when a referenced notice or document does not exist."""

    def __init__(self, entity: str, identifier: str) -> None:
        """Initializes the error.

        Args:
            entity: A human-readable name of the missing entity.
            identifier: The identifier that was looked up.
        """
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} não encontrado: {identifier}")


class DocumentError(AnalysisError):
    """Base exception for document fetching and parsing failures."""

    pass


class DownloadError(DocumentError):
    """Raised when a document cannot be downloaded from its source."""

    pass


class UnsupportedTypeError(DocumentError):
    """Raised when a document type is unknown or its content cannot be read."""

    pass


class AiInvocationError(AnalysisError):
    """Raised when the AI provider fails or returns an unusable response.

    Network errors, timeouts, non-2xx statuses, empty content and parse or
    schema failures are all normalized to this single error.
    """

    pass


class ToolArgumentError(AnalysisError):
    """Raised when the arguments of a tool call fail validation."""

    pass


class UnknownToolError(AnalysisError):
    """Raised when a caller asks for a tool that is not registered."""

    pass
