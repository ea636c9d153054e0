"""Domain enums for mediacomply.

Enums shared by the classifier, the encode pipeline and the reports.
"""

from enum import Enum


class ComplianceAction(Enum):
    """Action decided for one probed file."""

    KEEP = "Keep"  # Already meets the compliance standard
    CONVERT = "Convert"  # One or more rules violated
    ERROR = "Error"  # Compliance could not be determined (probe failure)


class OutcomeStatus(Enum):
    """Terminal status of one file in a convert run.

    INCONSISTENT is reserved for a swap that failed after the original was
    archived: the original sits at its backup path and the final file is
    missing. It needs operator attention and is never folded into FAIL.
    """

    KEEP = "Keep"
    SUCCESS = "Success"
    FAIL = "Fail"
    DRY_RUN = "DryRun"
    ERROR = "Error"
    INCONSISTENT = "Inconsistent"


class ProbeErrorKind(Enum):
    """Distinct reasons why a stream probe could not determine compliance."""

    TOOL_MISSING = "tool_missing"  # ffprobe not resolvable or not executable
    TOOL_FAILED = "tool_failed"  # non-zero exit status or timeout
    MALFORMED_OUTPUT = "malformed_output"  # empty or unparseable output
    NO_VIDEO_STREAM = "no_video_stream"


class SwapStage(Enum):
    """Step of the atomic swap at which a failure happened."""

    VERIFY = "verify"  # temp output missing or empty, nothing moved
    PRECHECK = "precheck"  # destination collision, nothing moved
    BACKUP = "backup"  # moving the original to the backup root failed
    PROMOTE = "promote"  # original archived, promoting the temp output failed


class FailurePolicy(Enum):
    """Run-level behaviour after a file ends in FAIL."""

    STOP = "stop"  # abort the remaining files (fail-fast)
    CONTINUE = "continue"  # keep processing; each file stays atomic
