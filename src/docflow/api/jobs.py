"""API router exposing translation job endpoints."""
from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from docflow.providers import GlossaryEntry
from docflow.qa import QAResult
from docflow.segments import UnsupportedFormatError, content_type_for
from docflow.services.jobs import (
    JobNotFoundError,
    JobNotReadyError,
    TranslationJob,
    TranslationJobService,
    UploadRejectedError,
    get_job_service,
    segment_updates,
)

router = APIRouter(prefix="/jobs", tags=["jobs"])


class GlossaryEntryModel(BaseModel):
    source_term: str = Field(..., min_length=1)
    target_term: str = Field(..., min_length=1)


_GLOSSARY_ADAPTER = TypeAdapter(list[GlossaryEntryModel])


class QAResponse(BaseModel):
    """Quality checks computed for the job's current translations."""

    quality_score: int
    total_warnings: int
    glossary_warnings: list[dict[str, Any]]
    number_warnings: list[dict[str, Any]]


class JobResponse(BaseModel):
    """Summary of a translation job."""

    id: str
    status: str
    source_file_name: str
    source_language: str
    target_language: str
    document_format: str | None
    segment_count: int
    output_file_name: str | None
    error: str | None
    qa: QAResponse | None
    created_at: datetime
    updated_at: datetime


class SegmentModel(BaseModel):
    index: int
    source_text: str
    target_text: str | None


class SegmentListResponse(BaseModel):
    job_id: str
    segments: list[SegmentModel]


class SegmentUpdate(BaseModel):
    index: int = Field(..., ge=0)
    target_text: str


class SegmentUpdateRequest(BaseModel):
    segments: list[SegmentUpdate]


class SegmentUpdateResponse(BaseModel):
    job_id: str
    updated: int


def _serialise_qa(result: QAResult | None) -> QAResponse | None:
    if result is None:
        return None
    return QAResponse(
        quality_score=result.quality_score,
        total_warnings=result.total_warnings,
        glossary_warnings=[asdict(warning) for warning in result.glossary_warnings],
        number_warnings=[asdict(warning) for warning in result.number_warnings],
    )


def _serialise_job(job: TranslationJob) -> JobResponse:
    return JobResponse(
        id=job.id,
        status=job.status.value,
        source_file_name=job.source_file_name,
        source_language=job.source_language,
        target_language=job.target_language,
        document_format=job.document_format.value if job.document_format else None,
        segment_count=len(job.segments),
        output_file_name=job.output_file_name,
        error=job.error,
        qa=_serialise_qa(job.qa_result),
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def _parse_glossary(raw: str | None) -> list[GlossaryEntry]:
    if not raw:
        return []
    try:
        entries = _GLOSSARY_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid glossary: {exc.errors()}") from exc
    return [GlossaryEntry(source_term=entry.source_term, target_term=entry.target_term) for entry in entries]


def _get_job_or_404(service: TranslationJobService, job_id: str) -> TranslationJob:
    try:
        return service.get_job(job_id)
    except JobNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Job not found") from exc


@router.post("", response_model=JobResponse)
async def create_job(
    file: UploadFile = File(...),
    target_language: str = Form(..., min_length=2),
    source_language: str | None = Form(None),
    glossary: str | None = Form(None),
    service: TranslationJobService = Depends(get_job_service),
) -> JobResponse:
    """Upload a document and translate it into ``target_language``."""

    entries = _parse_glossary(glossary)
    try:
        job = await service.submit(
            file,
            target_language=target_language,
            source_language=source_language,
            glossary=entries,
        )
    except (UploadRejectedError, UnsupportedFormatError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialise_job(job)


@router.get("", response_model=list[JobResponse])
def list_jobs(service: TranslationJobService = Depends(get_job_service)) -> list[JobResponse]:
    return [_serialise_job(job) for job in service.list_jobs()]


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, service: TranslationJobService = Depends(get_job_service)) -> JobResponse:
    return _serialise_job(_get_job_or_404(service, job_id))


@router.get("/{job_id}/segments", response_model=SegmentListResponse)
def get_segments(job_id: str, service: TranslationJobService = Depends(get_job_service)) -> SegmentListResponse:
    job = _get_job_or_404(service, job_id)
    return SegmentListResponse(
        job_id=job.id,
        segments=[
            SegmentModel(index=segment.index, source_text=segment.source_text, target_text=segment.target_text)
            for segment in job.segments
        ],
    )


@router.patch("/{job_id}/segments", response_model=SegmentUpdateResponse)
def update_segments(
    job_id: str,
    request: SegmentUpdateRequest,
    service: TranslationJobService = Depends(get_job_service),
) -> SegmentUpdateResponse:
    """Store reviewer translations and regenerate the output file."""

    updates = segment_updates([(item.index, item.target_text) for item in request.segments])
    try:
        updated = service.update_segments(job_id, updates)
    except JobNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Job not found") from exc
    except JobNotReadyError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SegmentUpdateResponse(job_id=job_id, updated=updated)


@router.get("/{job_id}/download")
def download_output(job_id: str, service: TranslationJobService = Depends(get_job_service)) -> FileResponse:
    """Return the translated document as an attachment."""

    job = _get_job_or_404(service, job_id)
    try:
        path = service.resolve_download(job_id)
    except JobNotReadyError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Output file not found") from exc
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail="Access denied") from exc

    file_name = job.output_file_name or path.name
    return FileResponse(path, media_type=content_type_for(file_name), filename=file_name)
