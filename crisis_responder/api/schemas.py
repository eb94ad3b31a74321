"""
CrisisAI Responder - API Schemas

Pydantic models for request/response validation.
These define the contract between frontend and backend; response fields use
the camelCase keys the frontend reads.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from crisis_responder.core.types import Category, ProcessingMode, Severity


# ===========================================
# Request Schemas
# ===========================================

class CrisisRequest(BaseModel):
    """Text (and inline image) crisis report."""

    message: str = Field(
        default="",
        description="Free-text description of the emergency",
    )
    images: List[str] = Field(
        default_factory=list,
        description="Base64-encoded images; only their count is used",
    )
    mode: ProcessingMode = Field(
        default=ProcessingMode.TEXT,
        description="Input channel: text | image | voice",
    )


class VoiceRequest(BaseModel):
    """Voice transcript submission."""

    transcript: str = Field(
        default="",
        description="Speech-to-text transcript of the caller",
    )


# ===========================================
# Response Schemas
# ===========================================

class ResourceSchema(BaseModel):
    """A reference entry: either a URL or a directive type such as 'call'."""

    name: str
    url: Optional[str] = None
    type: Optional[str] = None


class ClassificationResponse(BaseModel):
    """
    A structured response plan.

    Steps are ordered and must be shown top to bottom.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: Category = Field(description="Detected emergency category")
    severity: Severity = Field(description="LOW | MEDIUM | HIGH | CRITICAL")
    message: str = Field(description="Headline for the category")
    steps: List[str] = Field(description="Ordered action steps")
    resources: List[ResourceSchema] = Field(default_factory=list)
    call_emergency: bool = Field(
        alias="callEmergency",
        description="Whether to contact emergency services now",
    )
    timestamp: datetime
    processing_mode: ProcessingMode = Field(alias="processingMode")


class UploadedFileSchema(BaseModel):
    """An accepted uploaded image."""

    name: str
    size: int


class UploadClassificationResponse(ClassificationResponse):
    """Response plan for a multipart upload, listing the accepted files."""

    uploaded_files: List[UploadedFileSchema] = Field(
        default_factory=list,
        alias="uploadedFiles",
    )


# ===========================================
# Session Log Schemas
# ===========================================

class SessionLogEntrySchema(BaseModel):
    """One recorded classification call."""

    model_config = ConfigDict(populate_by_name=True)

    mode: ProcessingMode
    message: str
    image_count: int = Field(alias="imageCount")
    severity: Severity
    timestamp: datetime


class SessionLogResponse(BaseModel):
    """Full session log."""

    total: int
    logs: List[SessionLogEntrySchema]


class SessionClearedResponse(BaseModel):
    message: str = "Session cleared"


# ===========================================
# Health / Error Schemas
# ===========================================

class HealthResponse(BaseModel):
    """Service status."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(default="online")
    service: str
    version: str
    uptime: float = Field(description="Seconds since startup")
    timestamp: datetime
    rules_version: str = Field(alias="rulesVersion")


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx responses."""

    error: str
    code: str
