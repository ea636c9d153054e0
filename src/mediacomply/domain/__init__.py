"""Domain types shared across mediacomply modules."""

from mediacomply.domain.enums import (
    ComplianceAction,
    FailurePolicy,
    OutcomeStatus,
    ProbeErrorKind,
    SwapStage,
)
from mediacomply.domain.exceptions import (
    ConfigError,
    EncoderConfigError,
    MediaComplyError,
    MissingToolError,
    ProbeError,
)
from mediacomply.domain.models import (
    REASON_SEPARATOR,
    ComplianceDecision,
    ConversionOutcome,
    EncodeAttemptResult,
    MediaFile,
    StreamProbeResult,
)

__all__ = [
    # Enums
    "ComplianceAction",
    "FailurePolicy",
    "OutcomeStatus",
    "ProbeErrorKind",
    "SwapStage",
    # Exceptions
    "ConfigError",
    "EncoderConfigError",
    "MediaComplyError",
    "MissingToolError",
    "ProbeError",
    # Models
    "REASON_SEPARATOR",
    "ComplianceDecision",
    "ConversionOutcome",
    "EncodeAttemptResult",
    "MediaFile",
    "StreamProbeResult",
]
