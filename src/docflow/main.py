import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from docflow.api.jobs import router as jobs_router
from docflow.config import get_settings
from docflow.logging_config import configure_logging
from docflow.providers import get_translation_provider
from docflow.telemetry import emit_app_startup_event

configure_logging(get_settings().log_dir)

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="DocFlow Translation API")
app.include_router(jobs_router)


@app.on_event("startup")
async def _emit_startup() -> None:
    emit_app_startup_event()


@app.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    """Healthcheck endpoint for the service."""
    return "ok"


@app.get("/healthz", response_class=PlainTextResponse)
def healthcheck() -> str:
    """Liveness probe used by container orchestrators."""
    return "ok"


@app.get("/readyz", response_class=PlainTextResponse)
def readiness_probe() -> str:
    """Readiness probe: upload storage is writable and the provider resolves."""

    settings = get_settings()
    errors: list[str] = []

    try:
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        errors.append(f"upload_dir_unavailable: {exc}")

    try:
        get_translation_provider(settings.translation_provider)
    except ValueError as exc:
        errors.append(f"provider_unavailable: {exc}")

    if errors:
        LOGGER.warning("Readiness check failed: %s", "; ".join(errors))
        raise HTTPException(status_code=503, detail="; ".join(errors))
    return "ok"
