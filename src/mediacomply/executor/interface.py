"""EncodeRunner interface for single encode attempts."""

from pathlib import Path
from typing import Protocol

from mediacomply.domain.models import EncodeAttemptResult
from mediacomply.executor.encoders import EncoderProfile


class EncodeRunner(Protocol):
    """Protocol for running one encoder against one input file.

    Implementations report failure through the returned result rather than
    raising, so the fallback chain can decide what happens next.
    """

    def run(
        self,
        profile: EncoderProfile,
        source: Path,
        output: Path,
    ) -> EncodeAttemptResult:
        """Encode source to output with the given profile.

        Args:
            profile: Encoder profile to use.
            source: Input media file.
            output: Temporary output path to write.

        Returns:
            EncodeAttemptResult; success requires exit status 0 and an
            existing output file.
        """
        ...
