"""
CrisisAI Responder - Response Pipeline

Orchestrates a single request: classify the report, record it in the session
log, and emit one summary log line. All ingress routes go through here so the
session log and logging stay consistent across text, image and voice input.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Union

from crisis_responder.config import Settings
from crisis_responder.core.classifier import CrisisClassifier
from crisis_responder.core.session_log import SessionRecorder, create_session_recorder
from crisis_responder.core.types import (
    ClassificationResult,
    ProcessingMode,
    SessionLogEntry,
)

logger = logging.getLogger(__name__)


class ResponsePipeline:
    """
    Central orchestrator for crisis classification requests.

    Attributes:
        classifier: Keyword rule evaluator
        recorder: Session log receiving one entry per request
        settings: Application configuration
    """

    def __init__(
        self,
        classifier: CrisisClassifier,
        recorder: SessionRecorder,
        settings: Settings,
    ):
        self._classifier = classifier
        self._recorder = recorder
        self._settings = settings
        self._started_at: Optional[float] = None

    @property
    def classifier(self) -> CrisisClassifier:
        return self._classifier

    @property
    def recorder(self) -> SessionRecorder:
        return self._recorder

    @property
    def uptime_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return time.monotonic() - self._started_at

    async def respond(
        self,
        message: str,
        image_count: int = 0,
        mode: Union[ProcessingMode, str] = ProcessingMode.TEXT,
    ) -> ClassificationResult:
        """
        Classify a report and record it.

        Args:
            message: Free-text description (may be empty)
            image_count: Number of attached images
            mode: Input channel

        Returns:
            ClassificationResult for the report
        """
        start_time = time.perf_counter()

        result = self._classifier.classify(message, image_count, mode)

        await self._recorder.record(
            SessionLogEntry(
                mode=result.processing_mode,
                message=message,
                image_count=image_count,
                severity=result.severity,
            )
        )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Classified %s report: type=%s severity=%s call_emergency=%s images=%d (%.1fms)",
            result.processing_mode.value,
            result.type.value,
            result.severity.value,
            result.call_emergency,
            image_count,
            elapsed_ms,
            extra={"data": {
                "type": result.type.value,
                "severity": result.severity.value,
                "call_emergency": result.call_emergency,
                "processing_ms": round(elapsed_ms, 2),
            }},
        )

        return result

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def startup(self) -> None:
        self._started_at = time.monotonic()
        # Warm-up classification exercises the rule table once.
        self._classifier.classify("", 0, ProcessingMode.TEXT)
        logger.info(
            "ResponsePipeline started: rules=%s, env=%s",
            self._classifier.rules_version,
            self._settings.app_env,
        )

    async def shutdown(self) -> None:
        entries = await self._recorder.list_all()
        logger.info("ResponsePipeline stopping: %d session log entries discarded", len(entries))


def create_pipeline(
    settings: Settings,
    recorder: Optional[SessionRecorder] = None,
) -> ResponsePipeline:
    """
    Build a pipeline from settings.

    Args:
        settings: Application settings
        recorder: Optional recorder override (tests); built from settings otherwise
    """
    return ResponsePipeline(
        classifier=CrisisClassifier(),
        recorder=recorder if recorder is not None else create_session_recorder(settings),
        settings=settings,
    )
