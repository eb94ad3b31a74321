"""
CrisisAI Responder - Test Configuration and Fixtures

Shared fixtures for all test modules.
"""

import os
import sys
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Ensure project root is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crisis_responder.config import Settings
from crisis_responder.core.classifier import CrisisClassifier
from crisis_responder.core.pipeline import ResponsePipeline
from crisis_responder.core.session_log import InMemorySessionRecorder
from crisis_responder.core.types import ProcessingMode, SessionLogEntry, Severity


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests exercising the HTTP app")


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Test settings with safe defaults."""
    return Settings(
        app_env="testing",
        app_debug=True,
        app_log_level="WARNING",  # Reduce noise in tests
        persist_uploads=False,
        upload_dir=str(tmp_path / "uploads"),
        session_log_max_entries=0,
        anonymize_logs=True,
    )


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def classifier() -> CrisisClassifier:
    return CrisisClassifier()


@pytest.fixture
def recorder() -> InMemorySessionRecorder:
    """Create a fresh session recorder."""
    return InMemorySessionRecorder()


@pytest.fixture
def pipeline(
    classifier: CrisisClassifier,
    recorder: InMemorySessionRecorder,
    test_settings: Settings,
) -> ResponsePipeline:
    return ResponsePipeline(
        classifier=classifier,
        recorder=recorder,
        settings=test_settings,
    )


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_entries() -> list[SessionLogEntry]:
    return [
        SessionLogEntry(
            mode=ProcessingMode.TEXT,
            message="There is smoke in the hallway",
            image_count=0,
            severity=Severity.CRITICAL,
        ),
        SessionLogEntry(
            mode=ProcessingMode.IMAGE,
            message="",
            image_count=2,
            severity=Severity.HIGH,
        ),
        SessionLogEntry(
            mode=ProcessingMode.VOICE,
            message="I think I sprained my ankle",
            image_count=0,
            severity=Severity.MEDIUM,
        ),
    ]


@pytest.fixture
def png_bytes() -> bytes:
    """Minimal PNG header; content is never inspected."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# =============================================================================
# FastAPI App Fixture
# =============================================================================

@pytest.fixture
def app(test_settings: Settings):
    """Create a FastAPI app instance with test settings."""
    # Import here so the module-level app picks up the environment
    from main import create_app

    return create_app(test_settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client; entering the context runs the lifespan."""
    with TestClient(app) as c:
        yield c
