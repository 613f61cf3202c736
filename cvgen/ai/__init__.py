"""AI-assisted generation.

This module provides functionality for:
- Analyzing how well a master profile fits a job description
- Generating job-tailored CVs from the master profile
- Generating cover letters, optionally linked to a CV
- Gating every generation behind the credit ledger

The pipelines live in ``cvgen.ai.service`` and the model adapters in
``cvgen.ai.backend``; this package exports the shared models, errors and
configuration.

Example:
    from cvgen.ai import GenerateCVRequest
    from cvgen.ai.backend import LiteLLMBackend
    from cvgen.ai.service import GenerationService

    service = GenerationService(LiteLLMBackend(), ledger, profiles, cvs, letters)
    result = await service.generate_cv(user_id, GenerateCVRequest(job_description=text))
    print(result.cv.id, result.credits_remaining)
"""

from cvgen.ai.config import AIConfig, get_ai_config, reset_ai_config
from cvgen.ai.errors import (
    AnalysisFailedError,
    APIKeyNotSetError,
    CoverLetterFailedError,
    EmptyJobDescriptionError,
    GenerationError,
    GenerationFailedError,
    GenerationPipelineError,
    InvalidResponseError,
    MissingJobDetailsError,
    PersistFailedError,
    TailoringFailedError,
)
from cvgen.ai.models import (
    CreditsSummary,
    GenerateCoverLetterRequest,
    GenerateCVRequest,
    JobAnalysis,
)

__all__ = [
    # Configuration
    "AIConfig",
    "get_ai_config",
    "reset_ai_config",
    # Models
    "JobAnalysis",
    "GenerateCVRequest",
    "GenerateCoverLetterRequest",
    "CreditsSummary",
    # Errors
    "GenerationError",
    "APIKeyNotSetError",
    "GenerationFailedError",
    "InvalidResponseError",
    "GenerationPipelineError",
    "EmptyJobDescriptionError",
    "MissingJobDetailsError",
    "AnalysisFailedError",
    "TailoringFailedError",
    "CoverLetterFailedError",
    "PersistFailedError",
]
