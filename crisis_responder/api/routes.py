"""
CrisisAI Responder - REST API Routes

Endpoints for crisis classification (text, uploaded images, voice
transcripts), the session log, and service health.

Architecture:
    All classification flows through the ResponsePipeline, accessed via
    dependency injection from app.state. This keeps a single source of truth
    for classification, session recording and request logging.
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from crisis_responder.config import Settings
from crisis_responder.core.exceptions import MissingInputError, MissingTranscriptError
from crisis_responder.core.pipeline import ResponsePipeline
from crisis_responder.core.session_log import SessionRecorder
from crisis_responder.core.types import (
    ClassificationResult,
    ProcessingMode,
    SessionLogEntry,
)
from crisis_responder.services.uploads import ImageUploadHandler

from .schemas import (
    ClassificationResponse,
    CrisisRequest,
    HealthResponse,
    ResourceSchema,
    SessionClearedResponse,
    SessionLogEntrySchema,
    SessionLogResponse,
    UploadClassificationResponse,
    UploadedFileSchema,
    VoiceRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])


# =============================================================================
# Dependencies
# =============================================================================

def get_pipeline(request: Request) -> ResponsePipeline:
    """Dependency to get the response pipeline from app state."""
    return request.app.state.pipeline


def get_settings(request: Request) -> Settings:
    """Dependency to get settings from app state."""
    return request.app.state.settings


def get_session_recorder(request: Request) -> SessionRecorder:
    """Dependency to get the session recorder owned by the pipeline."""
    return request.app.state.pipeline.recorder


def get_upload_handler(request: Request) -> ImageUploadHandler:
    return request.app.state.upload_handler


# =============================================================================
# Converters (Domain -> API Schema)
# =============================================================================

def result_to_schema(result: ClassificationResult) -> ClassificationResponse:
    """Convert a domain ClassificationResult to the API schema."""
    return ClassificationResponse(
        type=result.type,
        severity=result.severity,
        message=result.message,
        steps=list(result.steps),
        resources=[ResourceSchema(**r.to_dict()) for r in result.resources],
        call_emergency=result.call_emergency,
        timestamp=result.timestamp,
        processing_mode=result.processing_mode,
    )


def entry_to_schema(entry: SessionLogEntry) -> SessionLogEntrySchema:
    return SessionLogEntrySchema(
        mode=entry.mode,
        message=entry.message,
        image_count=entry.image_count,
        severity=entry.severity,
        timestamp=entry.timestamp,
    )


# =============================================================================
# Crisis Classification
# =============================================================================

@router.post(
    "/crisis",
    response_model=ClassificationResponse,
    response_model_exclude_none=True,
)
async def analyze_crisis(
    body: CrisisRequest,
    pipeline: ResponsePipeline = Depends(get_pipeline),
):
    """
    Classify a text report, optionally with inline base64 images.

    Images are counted, not inspected.
    """
    if not body.message and not body.images:
        raise MissingInputError("No message or image provided")

    result = await pipeline.respond(body.message, len(body.images), body.mode)
    return result_to_schema(result)


@router.post(
    "/crisis/upload",
    response_model=UploadClassificationResponse,
    response_model_exclude_none=True,
)
async def analyze_crisis_upload(
    message: str = Form(default=""),
    mode: ProcessingMode = Form(default=ProcessingMode.IMAGE),
    images: Optional[List[UploadFile]] = File(default=None),
    pipeline: ResponsePipeline = Depends(get_pipeline),
    upload_handler: ImageUploadHandler = Depends(get_upload_handler),
):
    """
    Classify a report submitted as a multipart form with image files.

    Limits: up to 5 files, 10MB each, image content types only.
    """
    uploads = await upload_handler.accept(images or [])

    if not message and not uploads:
        raise MissingInputError("No message or image provided")

    result = await pipeline.respond(message, len(uploads), mode)

    return UploadClassificationResponse(
        **result_to_schema(result).model_dump(),
        uploaded_files=[UploadedFileSchema(name=u.name, size=u.size) for u in uploads],
    )


@router.post(
    "/voice",
    response_model=ClassificationResponse,
    response_model_exclude_none=True,
)
async def analyze_voice(
    body: VoiceRequest,
    pipeline: ResponsePipeline = Depends(get_pipeline),
):
    """Classify a voice transcript."""
    if not body.transcript:
        raise MissingTranscriptError("No transcript provided")

    result = await pipeline.respond(body.transcript, 0, ProcessingMode.VOICE)
    return result_to_schema(result)


# =============================================================================
# Session Log
# =============================================================================

@router.get("/session", response_model=SessionLogResponse, tags=["session"])
async def get_session_log(
    recorder: SessionRecorder = Depends(get_session_recorder),
):
    """Return every classification recorded since startup (or the last clear)."""
    entries = await recorder.list_all()
    return SessionLogResponse(
        total=len(entries),
        logs=[entry_to_schema(e) for e in entries],
    )


@router.delete("/session", response_model=SessionClearedResponse, tags=["session"])
async def clear_session_log(
    recorder: SessionRecorder = Depends(get_session_recorder),
):
    await recorder.clear()
    return SessionClearedResponse()


# =============================================================================
# Health
# =============================================================================

@router.get("/health", response_model=HealthResponse, tags=["system"])
async def health_check(
    pipeline: ResponsePipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
):
    """Service name, version and uptime."""
    return HealthResponse(
        status="online",
        service=settings.service_name,
        version=settings.service_version,
        uptime=pipeline.uptime_seconds,
        timestamp=datetime.now(timezone.utc),
        rules_version=pipeline.classifier.rules_version,
    )
