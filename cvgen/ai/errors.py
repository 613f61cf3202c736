"""Exceptions raised by the generative backend and the generation pipeline."""

from __future__ import annotations


class GenerationError(Exception):
    """Exception raised when a generative backend call fails."""

    kind = "generation-failed"

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class APIKeyNotSetError(GenerationError):
    """Raised when the backend is constructed without an API key."""


class GenerationFailedError(GenerationError):
    """Raised when the model call itself fails, including timeouts."""


class InvalidResponseError(GenerationError):
    """Raised when the model output does not decode into the expected shape."""


class GenerationPipelineError(Exception):
    """Base for errors raised by a generation pipeline step."""

    kind = "generation-failed"

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class EmptyJobDescriptionError(GenerationPipelineError):
    """Raised when the job description is missing or blank."""

    kind = "empty-input"

    def __init__(self) -> None:
        super().__init__("job description is required")


class MissingJobDetailsError(GenerationPipelineError):
    """Raised when a cover letter request lacks the job title or company."""

    kind = "empty-input"

    def __init__(self) -> None:
        super().__init__("job title and company name are required")


class AnalysisFailedError(GenerationPipelineError):
    kind = "analysis-failed"


class TailoringFailedError(GenerationPipelineError):
    kind = "tailoring-failed"


class CoverLetterFailedError(GenerationPipelineError):
    kind = "generation-failed"


class PersistFailedError(GenerationPipelineError):
    """Raised when a generated artifact could not be saved; no credit is used."""

    kind = "persist-failed"
