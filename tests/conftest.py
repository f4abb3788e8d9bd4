"""Shared fixtures for the DocFlow test-suite."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Importing docflow.main configures logging into LOG_DIR; keep it out of the repository.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="docflow-logs-"))

import pytest
from fastapi.testclient import TestClient

from docflow.config import Settings
from docflow.providers import MockTranslationProvider
from docflow.services.jobs import TranslationJobService, get_job_service

SAMPLE_SRT = (
    "1\n00:00:01,000 --> 00:00:02,000\nHello\n\n"
    "2\n00:00:03,000 --> 00:00:04,000\nWorld\n\n"
)


def build_pdf(text: str) -> bytes:
    """Return a single-page PDF showing ``text`` with a correct xref table."""

    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    output = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(output)
    output += b"xref\n0 %d\n" % (len(objects) + 1)
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += b"%010d 00000 n \n" % offset
    output += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(output)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(upload_dir=tmp_path / "uploads", log_dir=tmp_path / "logs")


@pytest.fixture
def service(settings: Settings) -> TranslationJobService:
    return TranslationJobService(settings=settings, provider=MockTranslationProvider())


@pytest.fixture
def client(service: TranslationJobService):
    from docflow.main import app

    app.dependency_overrides[get_job_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def srt_file(tmp_path: Path) -> Path:
    path = tmp_path / "episode.srt"
    path.write_text(SAMPLE_SRT, encoding="utf-8")
    return path
