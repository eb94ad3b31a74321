"""
CrisisAI Responder - Crisis Classifier

Maps a free-text emergency description (plus image count and input mode) to
a category, a severity tier and the category's guidance payload.

The assessment runs in two independent passes over the lower-cased message:

1. Severity: critical, high and medium keyword sets, first match wins.
   Attached images in ``image`` mode count as critical.
2. Category: the ordered playbook rules, first match wins. A rule may force
   the emergency flag and, for image-only input, the severity.

The classifier holds no mutable state, so a single instance can serve any
number of concurrent requests. It never raises for well-typed input.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple, Union

from crisis_responder.core.playbooks import (
    CATEGORY_RULES,
    CRITICAL_KEYWORDS,
    FALLBACK_RULE,
    HIGH_KEYWORDS,
    MEDIUM_KEYWORDS,
    RULES_VERSION,
    CategoryRule,
)
from crisis_responder.core.types import (
    ClassificationResult,
    ProcessingMode,
    Severity,
)

logger = logging.getLogger(__name__)


class CrisisClassifier:
    """
    Deterministic keyword rule evaluator.

    The keyword sets and rule table default to the built-in playbooks but
    can be swapped for tests or alternative deployments.
    """

    def __init__(
        self,
        rules: Tuple[CategoryRule, ...] = CATEGORY_RULES,
        fallback: CategoryRule = FALLBACK_RULE,
        critical_keywords: Iterable[str] = CRITICAL_KEYWORDS,
        high_keywords: Iterable[str] = HIGH_KEYWORDS,
        medium_keywords: Iterable[str] = MEDIUM_KEYWORDS,
        rules_version: str = RULES_VERSION,
    ):
        self._rules = tuple(rules)
        self._rules_version = rules_version
        self._fallback = fallback
        self._critical = tuple(critical_keywords)
        self._high = tuple(high_keywords)
        self._medium = tuple(medium_keywords)

    @property
    def rules_version(self) -> str:
        return self._rules_version

    def classify(
        self,
        message: Optional[str] = "",
        image_count: int = 0,
        mode: Union[ProcessingMode, str] = ProcessingMode.TEXT,
    ) -> ClassificationResult:
        """
        Classify one emergency report.

        Args:
            message: Free-text description, may be empty
            image_count: Number of attached images (content is never inspected)
            mode: Input channel; only ``image`` affects the outcome

        Returns:
            ClassificationResult with category payload, severity and
            emergency flag
        """
        mode = ProcessingMode(mode)
        text_lower = (message or "").lower()
        image_count = max(0, image_count)

        severity, call_emergency = self._assess_severity(text_lower, image_count, mode)

        rule = self._match_rule(text_lower, image_count)
        if rule.forced_severity is not None:
            severity = rule.forced_severity
        if rule.forces_emergency:
            call_emergency = True

        logger.debug(
            "Classified: category=%s severity=%s emergency=%s images=%d mode=%s",
            rule.category.value, severity.value, call_emergency, image_count, mode.value,
        )

        return ClassificationResult(
            type=rule.category,
            severity=severity,
            message=rule.headline,
            steps=rule.steps,
            resources=rule.resources,
            call_emergency=call_emergency,
            processing_mode=mode,
        )

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _assess_severity(
        self,
        text_lower: str,
        image_count: int,
        mode: ProcessingMode,
    ) -> Tuple[Severity, bool]:
        if self._find_matches(text_lower, self._critical) or (
            image_count > 0 and mode == ProcessingMode.IMAGE
        ):
            return Severity.CRITICAL, True
        if self._find_matches(text_lower, self._high):
            return Severity.HIGH, True
        if self._find_matches(text_lower, self._medium):
            return Severity.MEDIUM, False
        return Severity.LOW, False

    def _match_rule(self, text_lower: str, image_count: int) -> CategoryRule:
        for rule in self._rules:
            if rule.matches(text_lower, image_count):
                return rule
        return self._fallback

    @staticmethod
    def _find_matches(text: str, keywords: Iterable[str]) -> List[str]:
        """Return keywords that occur as substrings of text."""
        return [kw for kw in keywords if kw in text]


_default_classifier = CrisisClassifier()


def classify(
    message: Optional[str] = "",
    image_count: int = 0,
    mode: Union[ProcessingMode, str] = ProcessingMode.TEXT,
) -> ClassificationResult:
    """Classify with the built-in playbooks."""
    return _default_classifier.classify(message, image_count, mode)
