"""StreamProbe interface for stream metadata extraction."""

from pathlib import Path
from typing import Protocol

from mediacomply.domain.models import StreamProbeResult


class StreamProbe(Protocol):
    """Protocol for stream probe implementations.

    Implementations are read-only: probing never modifies the file.
    """

    def probe(self, path: Path) -> StreamProbeResult:
        """Extract the stream metadata needed for compliance checks.

        Args:
            path: Path to the media file.

        Returns:
            StreamProbeResult for the first video stream and all audio streams.

        Raises:
            ProbeError: If compliance cannot be determined. The error's kind
                distinguishes a missing tool, a failed or timed-out tool run,
                malformed output and a file without a video stream.
        """
        ...
