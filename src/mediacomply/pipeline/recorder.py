"""Outcome recording for convert runs."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Protocol

from mediacomply.domain.enums import OutcomeStatus
from mediacomply.domain.models import ConversionOutcome

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    OutcomeStatus.KEEP: logging.INFO,
    OutcomeStatus.SUCCESS: logging.INFO,
    OutcomeStatus.DRY_RUN: logging.INFO,
    OutcomeStatus.FAIL: logging.ERROR,
    OutcomeStatus.ERROR: logging.ERROR,
    OutcomeStatus.INCONSISTENT: logging.CRITICAL,
}


class OutcomeRecorder(Protocol):
    """Receives exactly one terminal outcome per touched file."""

    def record(self, outcome: ConversionOutcome) -> None: ...


class OutcomeCollector:
    """Keeps outcomes in memory for the summary report and logs each one."""

    def __init__(self) -> None:
        self._outcomes: list[ConversionOutcome] = []

    def record(self, outcome: ConversionOutcome) -> None:
        self._outcomes.append(outcome)
        logger.log(
            _LOG_LEVELS[outcome.status],
            "%s: %s%s",
            outcome.status.value,
            outcome.path,
            f" ({outcome.reason})" if outcome.reason else "",
            extra={"status": outcome.status.value, "encoder": outcome.encoder},
        )

    @property
    def outcomes(self) -> list[ConversionOutcome]:
        return list(self._outcomes)

    def counts(self) -> Counter[OutcomeStatus]:
        """Number of outcomes per status."""
        return Counter(o.status for o in self._outcomes)
