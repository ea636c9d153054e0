"""Encoder fallback chain.

The chain is a small state machine over an ordered list of encoder
profiles:

    Pending(0) -> Pending(1) -> ... -> AllFailed
         \\            \\
          Succeeded     Succeeded

advance() is a pure transition function over attempt results, so the
"first success wins, exhaustion is terminal" rule can be tested without
running ffmpeg. EncoderFallbackChain drives it with a real EncodeRunner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from mediacomply.domain.models import EncodeAttemptResult
from mediacomply.executor.encoders import EncoderProfile, sort_chain
from mediacomply.executor.interface import EncodeRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pending:
    """The encoder at index is next to be attempted."""

    index: int


@dataclass(frozen=True)
class Succeeded:
    """Terminal: the encoder at index produced the temp output."""

    encoder: str
    index: int


@dataclass(frozen=True)
class AllFailed:
    """Terminal: every encoder in the chain failed."""


ChainState = Union[Pending, Succeeded, AllFailed]


def advance(state: ChainState, attempt: EncodeAttemptResult, total: int) -> ChainState:
    """Compute the next chain state after one attempt.

    Args:
        state: Current state; must be Pending.
        attempt: Result of attempting the encoder at state.index.
        total: Number of encoders in the chain.

    Returns:
        Succeeded on success, the next Pending on failure, or AllFailed once
        the last encoder has failed.

    Raises:
        ValueError: If state is already terminal.
    """
    if not isinstance(state, Pending):
        raise ValueError(f"Cannot advance terminal chain state: {state!r}")
    if attempt.success:
        return Succeeded(encoder=attempt.encoder or "", index=state.index)
    next_index = state.index + 1
    if next_index >= total:
        return AllFailed()
    return Pending(next_index)


@dataclass(frozen=True)
class ChainResult:
    """Final state of a chain run and every attempt made, in order."""

    state: ChainState
    attempts: tuple[EncodeAttemptResult, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> bool:
        return isinstance(self.state, Succeeded)

    @property
    def encoder(self) -> str | None:
        if isinstance(self.state, Succeeded):
            return self.state.encoder
        return None

    @property
    def failed_attempts(self) -> tuple[EncodeAttemptResult, ...]:
        return tuple(a for a in self.attempts if not a.success)

    def failure_reason(self) -> str:
        """Summarize why every encoder failed."""
        if not self.attempts:
            return "No encoders configured"
        details = "; ".join(
            a.message or f"{a.encoder} failed" for a in self.failed_attempts
        )
        return f"All encoders failed: {details}"


def remove_partial_output(path: Path) -> None:
    """Delete a partial temp output if one exists."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove partial output %s: %s", path, e)


class EncoderFallbackChain:
    """Attempts encoders in priority order until one succeeds.

    Each encoder is tried at most once per file and attempts never overlap.
    After a failed attempt any partial output at the temp path is removed
    before the next encoder starts.
    """

    def __init__(
        self,
        profiles: list[EncoderProfile] | tuple[EncoderProfile, ...],
        runner: EncodeRunner,
    ) -> None:
        self._profiles = sort_chain(profiles)
        self._runner = runner

    @property
    def profiles(self) -> tuple[EncoderProfile, ...]:
        return self._profiles

    def run(self, source: Path, temp_path: Path) -> ChainResult:
        """Encode source into temp_path with the first working encoder.

        Args:
            source: Input media file.
            temp_path: Private temporary output path.

        Returns:
            ChainResult with a Succeeded or AllFailed state.
        """
        total = len(self._profiles)
        if total == 0:
            return ChainResult(state=AllFailed())

        state: ChainState = Pending(0)
        attempts: list[EncodeAttemptResult] = []

        while isinstance(state, Pending):
            profile = self._profiles[state.index]
            attempt = self._runner.run(profile, source, temp_path)
            attempts.append(attempt)

            if attempt.success:
                logger.info(
                    "Encoder %s succeeded for %s",
                    profile.name,
                    source.name,
                    extra={"encoder": profile.name, "attempt": len(attempts)},
                )
            else:
                logger.warning(
                    "Encoder %s failed for %s: %s",
                    profile.name,
                    source.name,
                    attempt.message or f"exit status {attempt.exit_status}",
                    extra={
                        "encoder": profile.name,
                        "exit_status": attempt.exit_status,
                        "timed_out": attempt.timed_out,
                    },
                )
                remove_partial_output(temp_path)

            state = advance(state, attempt, total)

        if isinstance(state, AllFailed):
            logger.error(
                "All %d encoders failed for %s",
                total,
                source.name,
            )
        return ChainResult(state=state, attempts=tuple(attempts))
