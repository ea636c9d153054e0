"""Per-file processing for audit and convert runs.

A convert run walks each candidate through

    probe -> classify -> encoder chain -> swap -> recorder

one file at a time. An audit run stops after classify and never touches the
filesystem, so its files may be probed on a small thread pool.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from mediacomply.compliance.classifier import classify, decision_for_probe_error
from mediacomply.domain.enums import ComplianceAction, FailurePolicy, OutcomeStatus
from mediacomply.domain.exceptions import ProbeError
from mediacomply.domain.models import (
    ComplianceDecision,
    ConversionOutcome,
    MediaFile,
    StreamProbeResult,
)
from mediacomply.executor.fallback import EncoderFallbackChain
from mediacomply.executor.swap import execute_swap, plan_swap, precheck_swap
from mediacomply.introspector.interface import StreamProbe
from mediacomply.logging.context import file_context, format_file_id
from mediacomply.pipeline.recorder import OutcomeRecorder

logger = logging.getLogger(__name__)


# =============================================================================
# Audit
# =============================================================================


@dataclass(frozen=True)
class AuditEntry:
    """Classification of one file in an audit run."""

    media_file: MediaFile
    decision: ComplianceDecision
    probe: StreamProbeResult | None = None
    """None when the probe failed."""


def evaluate(probe: StreamProbe, media_file: MediaFile) -> AuditEntry:
    """Probe and classify one file without modifying it."""
    try:
        result = probe.probe(media_file.path)
    except ProbeError as e:
        logger.error("Cannot determine compliance: %s", e)
        return AuditEntry(media_file, decision_for_probe_error(e))
    return AuditEntry(media_file, classify(result), result)


def audit_files(
    probe: StreamProbe,
    files: Sequence[MediaFile],
    workers: int = 1,
) -> list[AuditEntry]:
    """Classify every file.

    Args:
        probe: Stream probe to use.
        files: Candidate files.
        workers: Number of concurrent probes. Results keep the input order.

    Returns:
        One AuditEntry per file.
    """
    total = len(files)

    def _evaluate(indexed: tuple[int, MediaFile]) -> AuditEntry:
        index, media_file = indexed
        with file_context(format_file_id(index, total), media_file.path):
            return evaluate(probe, media_file)

    indexed_files = list(enumerate(files, start=1))
    if workers <= 1 or total <= 1:
        return [_evaluate(item) for item in indexed_files]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(_evaluate, indexed_files))


# =============================================================================
# Convert
# =============================================================================


@dataclass
class RunSummary:
    """Result of a convert run."""

    outcomes: list[ConversionOutcome] = field(default_factory=list)
    aborted: bool = False
    abort_reason: str | None = None
    skipped: int = 0
    """Files left unprocessed after an abort."""

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def has_failures(self) -> bool:
        return self.count(OutcomeStatus.FAIL) > 0

    @property
    def has_inconsistent(self) -> bool:
        return self.count(OutcomeStatus.INCONSISTENT) > 0


class ConversionPipeline:
    """Drives candidate files through classification, encoding and swap.

    Example:
        pipeline = ConversionPipeline(
            probe, chain, collector, media_root=root, backup_root=backup
        )
        summary = pipeline.run(discover_candidates(root))
    """

    def __init__(
        self,
        probe: StreamProbe,
        chain: EncoderFallbackChain,
        recorder: OutcomeRecorder,
        media_root: Path,
        backup_root: Path | None = None,
        dry_run: bool = False,
        failure_policy: FailurePolicy = FailurePolicy.STOP,
    ) -> None:
        """Initialize the pipeline.

        Raises:
            ValueError: If backup_root is missing outside dry-run mode.
        """
        if backup_root is None and not dry_run:
            raise ValueError("backup_root is required unless dry_run is set")
        self._probe = probe
        self._chain = chain
        self._recorder = recorder
        # A single file given as the root mirrors relative to its directory
        media_root = media_root.resolve()
        self._media_root = media_root.parent if media_root.is_file() else media_root
        self._backup_root = backup_root
        self._dry_run = dry_run
        self._failure_policy = failure_policy

    def process_file(self, media_file: MediaFile) -> ConversionOutcome:
        """Process one file to its terminal outcome.

        Never raises for per-file problems; they become FAIL, ERROR or
        INCONSISTENT outcomes.
        """
        source = media_file.path
        title = media_file.title

        try:
            probe_result = self._probe.probe(source)
        except ProbeError as e:
            decision = decision_for_probe_error(e)
            return ConversionOutcome(
                OutcomeStatus.ERROR, source, title, decision.reason
            )

        decision = classify(probe_result)
        if decision.action == ComplianceAction.KEEP:
            return ConversionOutcome(OutcomeStatus.KEEP, source, title, decision.reason)

        logger.info("Needs conversion: %s", decision.reason)
        if self._dry_run:
            return ConversionOutcome(
                OutcomeStatus.DRY_RUN, source, title, decision.reason
            )

        assert self._backup_root is not None
        try:
            tx = plan_swap(source, self._media_root, self._backup_root)
        except ValueError as e:
            return ConversionOutcome(OutcomeStatus.FAIL, source, title, str(e))

        check = precheck_swap(tx)
        if not check.succeeded:
            return ConversionOutcome(OutcomeStatus.FAIL, source, title, check.message)

        result = self._chain.run(source, tx.temp_path)
        if not result.succeeded:
            return ConversionOutcome(
                OutcomeStatus.FAIL,
                source,
                title,
                result.failure_reason(),
                attempts=result.attempts,
            )

        swap = execute_swap(tx)
        if swap.inconsistent:
            logger.critical(
                "Inconsistent state, manual recovery required: %s",
                swap.message,
                extra={
                    "backup_path": str(tx.backup_path),
                    "temp_path": str(tx.temp_path),
                    "final_path": str(tx.final_path),
                },
            )
            return ConversionOutcome(
                OutcomeStatus.INCONSISTENT,
                source,
                title,
                swap.message,
                encoder=result.encoder,
                backup_path=tx.backup_path,
                attempts=result.attempts,
            )
        if not swap.succeeded:
            assert swap.failed_stage is not None
            logger.error(
                "Swap aborted at %s: %s", swap.failed_stage.value, swap.message
            )
            return ConversionOutcome(
                OutcomeStatus.FAIL,
                source,
                title,
                swap.message,
                encoder=result.encoder,
                attempts=result.attempts,
            )

        return ConversionOutcome(
            OutcomeStatus.SUCCESS,
            swap.final_path,
            title,
            f"Converted with {result.encoder}",
            encoder=result.encoder,
            backup_path=tx.backup_path,
            attempts=result.attempts,
        )

    def run(self, files: Sequence[MediaFile]) -> RunSummary:
        """Process files sequentially, honouring the failure policy.

        An INCONSISTENT outcome always aborts the run. A FAIL aborts it under
        FailurePolicy.STOP.
        """
        summary = RunSummary()
        total = len(files)

        for index, media_file in enumerate(files, start=1):
            with file_context(format_file_id(index, total), media_file.path):
                outcome = self.process_file(media_file)
                self._recorder.record(outcome)
            summary.outcomes.append(outcome)

            if outcome.status == OutcomeStatus.INCONSISTENT:
                summary.aborted = True
                summary.abort_reason = f"Inconsistent state for {media_file.path}"
            elif (
                outcome.status == OutcomeStatus.FAIL
                and self._failure_policy == FailurePolicy.STOP
            ):
                summary.aborted = True
                summary.abort_reason = f"Conversion failed for {media_file.path}"

            if summary.aborted:
                summary.skipped = total - index
                logger.error(
                    "Aborting run: %s (%d file(s) not processed)",
                    summary.abort_reason,
                    summary.skipped,
                )
                break

        return summary
