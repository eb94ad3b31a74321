"""
CrisisAI Responder - Core Domain Types

Internal type definitions shared by the classifier, the session recorder and
the response pipeline. The API layer converts these to Pydantic schemas for
external communication.

Design Notes:
- Dataclasses are frozen: results and log entries are never mutated after
  creation.
- Enums subclass ``str`` so their values serialise directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


# =============================================================================
# Enums
# =============================================================================

class Severity(str, Enum):
    """Escalation urgency, ordered LOW < MEDIUM < HIGH < CRITICAL."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class ProcessingMode(str, Enum):
    """Input channel the request arrived on. Informational only."""
    TEXT = "text"
    IMAGE = "image"
    VOICE = "voice"


class Category(str, Enum):
    """Emergency category; selects the guidance payload."""
    FIRE = "fire"
    ACCIDENT = "accident"
    CARDIAC = "cardiac"
    DROWNING = "drowning"
    IMAGE_ANALYSIS = "image-analysis"
    CHOKING = "choking"
    GAS_LEAK = "gas-leak"
    GENERAL = "general"


# =============================================================================
# Guidance Payload
# =============================================================================

@dataclass(frozen=True)
class ResourceLink:
    """
    A reference attached to a response plan.

    Exactly one of ``url`` (external reference) or ``type`` (a directive such
    as ``"call"``) is set.
    """
    name: str
    url: Optional[str] = None
    type: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.url is None) == (self.type is None):
            raise ValueError(
                f"ResourceLink {self.name!r} needs exactly one of url or type"
            )

    def to_dict(self) -> Dict[str, str]:
        data = {"name": self.name}
        if self.url is not None:
            data["url"] = self.url
        else:
            data["type"] = self.type
        return data


# =============================================================================
# Classification Result
# =============================================================================

@dataclass(frozen=True)
class ClassificationResult:
    """
    Output of a single classification.

    Attributes:
        type: Category tag that selected the payload
        severity: Severity tier from keyword assessment (possibly overridden
            by the category rule)
        message: Headline for the category
        steps: Ordered action steps, read top to bottom
        resources: Ordered reference entries, possibly empty
        call_emergency: Whether emergency services should be contacted
        timestamp: When the classification was made
        processing_mode: Echo of the request mode
    """
    type: Category
    severity: Severity
    message: str
    steps: Tuple[str, ...]
    resources: Tuple[ResourceLink, ...]
    call_emergency: bool
    processing_mode: ProcessingMode
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation with the public camelCase keys."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "steps": list(self.steps),
            "resources": [r.to_dict() for r in self.resources],
            "callEmergency": self.call_emergency,
            "timestamp": self.timestamp.isoformat(),
            "processingMode": self.processing_mode.value,
        }


# =============================================================================
# Session Log
# =============================================================================

@dataclass(frozen=True)
class SessionLogEntry:
    """One recorded classification call."""
    mode: ProcessingMode
    message: str
    image_count: int
    severity: Severity
    timestamp: datetime = field(default_factory=utcnow)
