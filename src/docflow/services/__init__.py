"""Service layer orchestrating translation jobs."""
from __future__ import annotations

from .jobs import (
    JobNotFoundError,
    JobNotReadyError,
    JobStatus,
    TranslationJob,
    TranslationJobService,
    UploadRejectedError,
    get_job_service,
)

__all__ = [
    "JobNotFoundError",
    "JobNotReadyError",
    "JobStatus",
    "TranslationJob",
    "TranslationJobService",
    "UploadRejectedError",
    "get_job_service",
]
