"""
CrisisAI Responder - Core Package

Contains the decision logic and domain types:
- classifier: keyword rule evaluator
- playbooks: keyword sets and category payloads
- types: internal domain types
- session_log: in-memory session recorder
- pipeline: request orchestration
"""

from .types import (
    Category,
    ClassificationResult,
    ProcessingMode,
    ResourceLink,
    SessionLogEntry,
    Severity,
)
from .classifier import CrisisClassifier, classify
from .session_log import (
    InMemorySessionRecorder,
    SessionRecorder,
    create_session_recorder,
)
from .pipeline import ResponsePipeline, create_pipeline

__all__ = [
    # Classifier
    "CrisisClassifier",
    "classify",
    # Types
    "Category",
    "ClassificationResult",
    "ProcessingMode",
    "ResourceLink",
    "SessionLogEntry",
    "Severity",
    # Session log
    "SessionRecorder",
    "InMemorySessionRecorder",
    "create_session_recorder",
    # Pipeline
    "ResponsePipeline",
    "create_pipeline",
]
