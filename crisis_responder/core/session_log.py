"""
CrisisAI Responder - Session Recorder

Keeps a timestamped summary of each classification call for the lifetime of
the serving process.

Notes:
    - Entries are immutable and returned in call order
    - One recorder instance is owned by the app and injected into handlers
    - All data is ephemeral (lost on restart)
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from threading import Lock
from typing import List, Protocol, runtime_checkable

from crisis_responder.config import Settings
from crisis_responder.core.exceptions import ConfigurationError
from crisis_responder.core.types import SessionLogEntry

logger = logging.getLogger(__name__)


# =============================================================================
# Protocol
# =============================================================================

@runtime_checkable
class SessionRecorder(Protocol):
    """
    Protocol for session log storage.

    Implementations must be safe for concurrent append, read and clear.
    """

    @abstractmethod
    async def record(self, entry: SessionLogEntry) -> None:
        """Append an entry."""
        ...

    @abstractmethod
    async def list_all(self) -> List[SessionLogEntry]:
        """All entries, oldest first."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Drop all entries."""
        ...


# =============================================================================
# In-Memory Implementation
# =============================================================================

class InMemorySessionRecorder:
    """
    In-memory, append-only session log. Thread-safe.

    With ``max_entries`` > 0 the oldest entries are trimmed once the bound is
    exceeded; the default of 0 keeps everything.
    """

    def __init__(
        self,
        max_entries: int = 0,
        anonymize_logs: bool = False,
        preview_chars: int = 80,
    ):
        """
        Initialize the recorder.

        Args:
            max_entries: Maximum number of entries to keep (0 = unbounded)
            anonymize_logs: Omit message text from log lines
            preview_chars: Length of the message preview in log lines
        """
        self._max_entries = max_entries
        self._anonymize = anonymize_logs
        self._preview_chars = preview_chars

        self._lock = Lock()
        self._entries: List[SessionLogEntry] = []

    async def record(self, entry: SessionLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

            if self._max_entries and len(self._entries) > self._max_entries:
                excess = len(self._entries) - self._max_entries
                del self._entries[:excess]
                logger.debug("Trimmed %d old entries from session log", excess)

        preview = "" if self._anonymize else entry.message[:self._preview_chars]
        logger.info(
            "%s | %s",
            entry.mode.value.upper(),
            preview,
            extra={"data": {
                "mode": entry.mode.value,
                "message": "" if self._anonymize else entry.message,
                "image_count": entry.image_count,
                "severity": entry.severity.value,
            }},
        )

    async def list_all(self) -> List[SessionLogEntry]:
        with self._lock:
            return list(self._entries)

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Session log cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# =============================================================================
# Factory Function
# =============================================================================

def create_session_recorder(settings: Settings) -> SessionRecorder:
    """
    Create the session recorder configured by settings.

    Raises:
        ConfigurationError: If the configured bound is negative
    """
    if settings.session_log_max_entries < 0:
        raise ConfigurationError(
            "session_log_max_entries must be >= 0",
            details={"value": settings.session_log_max_entries},
        )

    logger.info(
        "Creating InMemorySessionRecorder: max_entries=%d, anonymize_logs=%s",
        settings.session_log_max_entries,
        settings.anonymize_logs,
    )

    return InMemorySessionRecorder(
        max_entries=settings.session_log_max_entries,
        anonymize_logs=settings.anonymize_logs,
        preview_chars=settings.log_message_preview_chars,
    )
