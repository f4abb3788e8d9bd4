from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from fastapi import UploadFile

from docflow.config import Settings, get_settings
from docflow.language import LanguageDetector
from docflow.logging_config import AUDIT_LOGGER_NAME
from docflow.memory import TranslationMemory
from docflow.providers import (
    GlossaryEntry,
    TranslationError,
    TranslationProvider,
    get_translation_provider,
)
from docflow.qa import QAResult, perform_qa
from docflow.segments import (
    DocumentFormat,
    DocumentSegment,
    SubtitleBlock,
    extract_document,
    reassemble,
)
from docflow.storage import resolve_download_path, save_upload
from docflow.telemetry import emit_exception, emit_job_event, emit_segmentation_event, traced_duration

LOGGER = logging.getLogger(__name__)
AUDIT_LOGGER = logging.getLogger(AUDIT_LOGGER_NAME)

AUTO_LANGUAGE = "auto"
OUTPUT_PREFIX = "translated_"


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class JobNotFoundError(KeyError):
    """Raised when a job id is unknown to the service."""


class JobNotReadyError(RuntimeError):
    """Raised when a job has not reached the state an operation needs."""


class UploadRejectedError(ValueError):
    """Raised when an upload fails validation or cannot be stored."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class TranslationJob:
    """A document moving through extraction, translation, QA and output."""

    id: str
    source_file_name: str
    source_path: Path
    target_language: str
    source_language: str = AUTO_LANGUAGE
    glossary: Tuple[GlossaryEntry, ...] = ()
    status: JobStatus = JobStatus.PENDING
    document_format: Optional[DocumentFormat] = None
    segments: List[DocumentSegment] = field(default_factory=list)
    subtitle_blocks: Optional[List[SubtitleBlock]] = None
    qa_result: Optional[QAResult] = None
    output_path: Optional[Path] = None
    output_file_name: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def touch(self, status: JobStatus | None = None) -> None:
        if status is not None:
            self.status = status
        self.updated_at = _utcnow()


class TranslationJobService:
    """Orchestrates translation jobs from upload to downloadable output."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        provider: TranslationProvider | None = None,
        memory: TranslationMemory | None = None,
        language_detector: LanguageDetector | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.provider = provider or get_translation_provider(self.settings.translation_provider)
        self.memory = memory if memory is not None else TranslationMemory()
        self.language_detector = language_detector or LanguageDetector()
        self._jobs: Dict[str, TranslationJob] = {}

    @property
    def jobs_dir(self) -> Path:
        return self.settings.upload_dir / "jobs"

    async def submit(
        self,
        upload: UploadFile,
        *,
        target_language: str,
        source_language: str | None = None,
        glossary: Iterable[GlossaryEntry] = (),
    ) -> TranslationJob:
        """Persist an upload and run it through the translation pipeline."""

        result = await save_upload(
            upload,
            self.jobs_dir,
            allowed_extensions=self.settings.allowed_extensions,
            max_size_bytes=self.settings.max_upload_bytes,
        )
        if not result.success or result.file_path is None:
            LOGGER.info("Rejected upload %s: %s", upload.filename, result.error)
            raise UploadRejectedError(result.error or "Upload failed")

        return self.process_file(
            result.file_path,
            file_name=result.file_name,
            target_language=target_language,
            source_language=source_language,
            glossary=glossary,
        )

    def process_file(
        self,
        path: Path,
        *,
        target_language: str,
        file_name: str | None = None,
        source_language: str | None = None,
        glossary: Iterable[GlossaryEntry] = (),
    ) -> TranslationJob:
        """Create a job for a stored file and run it to completion.

        Failures mark the job as failed and are re-raised to the caller.
        """

        job = TranslationJob(
            id=uuid.uuid4().hex,
            source_file_name=file_name or path.name,
            source_path=Path(path),
            target_language=target_language,
            source_language=(source_language or self.settings.default_source_language).lower(),
            glossary=tuple(glossary),
        )
        self._jobs[job.id] = job
        AUDIT_LOGGER.info(
            {
                "event": "job_created",
                "job_id": job.id,
                "file_name": job.source_file_name,
                "source_language": job.source_language,
                "target_language": job.target_language,
            }
        )

        try:
            self._run(job)
        except Exception as error:
            job.error = str(error)
            job.touch(JobStatus.FAILED)
            emit_exception(module=f"{__name__}.pipeline", error=error, job_id=job.id)
            emit_job_event("job.failed", job_id=job.id, status=job.status.value, error=job.error)
            raise
        return job

    def get_job(self, job_id: str) -> TranslationJob:
        try:
            return self._jobs[job_id]
        except KeyError as exc:
            raise JobNotFoundError(job_id) from exc

    def list_jobs(self) -> List[TranslationJob]:
        return sorted(self._jobs.values(), key=lambda job: job.created_at, reverse=True)

    def update_segments(self, job_id: str, updates: Mapping[int, str]) -> int:
        """Overwrite segment translations and regenerate the output.

        Edited translations are stored in translation memory so later jobs
        reuse them instead of the provider output. Indexes that do not exist
        in the job are skipped. Returns the number of segments updated.
        """

        job = self.get_job(job_id)
        if job.status is not JobStatus.COMPLETED:
            raise JobNotReadyError(f"Job {job_id} cannot be edited while {job.status.value}")

        by_index = {segment.index: segment for segment in job.segments}
        updated = 0
        for index, target_text in updates.items():
            segment = by_index.get(index)
            if segment is None:
                LOGGER.debug("Skipping update for unknown segment %s of job %s", index, job_id)
                continue
            segment.target_text = target_text
            if target_text:
                self.memory.store(
                    segment.source_text,
                    target_text,
                    job.source_language,
                    job.target_language,
                    job_id=job.id,
                )
            updated += 1

        if updated:
            self._finalize(job)
        AUDIT_LOGGER.info({"event": "segments_edited", "job_id": job.id, "segments_updated": updated})
        return updated

    def resolve_download(self, job_id: str) -> Path:
        job = self.get_job(job_id)
        if job.status is not JobStatus.COMPLETED:
            raise JobNotReadyError(f"Translation not completed. Status: {job.status.value}")
        if job.output_path is None:
            raise JobNotReadyError(f"No output file path set for job {job_id}")
        if not job.output_path.exists():
            raise FileNotFoundError(f"Output file not found: {job.output_path}")
        return resolve_download_path(self.settings.upload_dir, job.output_path)

    def _run(self, job: TranslationJob) -> None:
        job.touch(JobStatus.PROCESSING)
        emit_job_event("job.processing", job_id=job.id, status=job.status.value)

        started = time.perf_counter()
        document = extract_document(job.source_path)
        job.document_format = document.format
        job.subtitle_blocks = document.subtitle_blocks
        job.segments = document.to_segments()
        emit_segmentation_event(
            "segmentation.extract",
            job_id=job.id,
            file_name=job.source_file_name,
            document_format=document.format.value,
            segments=len(job.segments),
            duration_ms=(time.perf_counter() - started) * 1000.0,
        )

        if job.source_language == AUTO_LANGUAGE:
            detected = self.language_detector.detect_segments(segment.source_text for segment in job.segments)
            if detected:
                job.source_language = detected

        with traced_duration("job.translate", job_id=job.id, segments=len(job.segments)):
            for segment in job.segments:
                segment.target_text = self._translate(job, segment.source_text)

        self._finalize(job)

    def _translate(self, job: TranslationJob, text: str) -> str:
        remembered = self.memory.lookup(text, job.source_language, job.target_language)
        if remembered is not None:
            return remembered

        source_language = None if job.source_language == AUTO_LANGUAGE else job.source_language
        try:
            translated = self.provider.translate(text, job.target_language, source_language, job.glossary)
        except TranslationError as error:
            LOGGER.warning("Translation failed for a segment of job %s: %s; keeping source text", job.id, error)
            return text

        self.memory.store(text, translated, job.source_language, job.target_language, job_id=job.id)
        return translated

    def _finalize(self, job: TranslationJob) -> None:
        job.qa_result = perform_qa(job.segments, job.glossary)

        output_path = job.source_path.with_name(f"{OUTPUT_PREFIX}{job.source_path.name}")
        started = time.perf_counter()
        reassemble(job.source_path, job.segments, output_path, subtitle_blocks=job.subtitle_blocks)
        emit_segmentation_event(
            "segmentation.reassemble",
            job_id=job.id,
            file_name=output_path.name,
            document_format=(job.document_format.value if job.document_format else "unknown"),
            segments=len(job.segments),
            duration_ms=(time.perf_counter() - started) * 1000.0,
        )

        job.output_path = output_path
        job.output_file_name = f"{OUTPUT_PREFIX}{job.source_file_name}"
        job.touch(JobStatus.COMPLETED)
        emit_job_event(
            "job.completed",
            job_id=job.id,
            status=job.status.value,
            segments=len(job.segments),
            quality_score=job.qa_result.quality_score,
        )
        AUDIT_LOGGER.info(
            {
                "event": "output_generated",
                "job_id": job.id,
                "file_name": job.output_file_name,
                "segments": len(job.segments),
                "quality_score": job.qa_result.quality_score,
            }
        )


def segment_updates(pairs: Sequence[Tuple[int, str]]) -> Dict[int, str]:
    """Collapse ``(index, target_text)`` pairs; later pairs win."""

    return {index: text for index, text in pairs}


@lru_cache()
def get_job_service() -> TranslationJobService:
    """Return the process-wide job service."""

    return TranslationJobService()
