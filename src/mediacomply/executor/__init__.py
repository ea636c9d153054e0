"""Encoding and file swap for non-compliant media."""

from mediacomply.executor.encoders import (
    DEFAULT_ENCODER_CHAIN,
    EncoderChainModel,
    EncoderProfile,
    build_ffmpeg_command,
    load_encoder_chain,
)
from mediacomply.executor.fallback import (
    AllFailed,
    ChainResult,
    EncoderFallbackChain,
    Pending,
    Succeeded,
    advance,
)
from mediacomply.executor.ffmpeg_runner import FFmpegEncodeRunner
from mediacomply.executor.interface import EncodeRunner
from mediacomply.executor.swap import (
    SwapResult,
    SwapTransaction,
    execute_swap,
    is_temp_output,
    plan_swap,
    precheck_swap,
    temp_output_path,
)

__all__ = [
    "AllFailed",
    "ChainResult",
    "DEFAULT_ENCODER_CHAIN",
    "EncodeRunner",
    "EncoderChainModel",
    "EncoderFallbackChain",
    "EncoderProfile",
    "FFmpegEncodeRunner",
    "Pending",
    "Succeeded",
    "SwapResult",
    "SwapTransaction",
    "advance",
    "build_ffmpeg_command",
    "execute_swap",
    "is_temp_output",
    "load_encoder_chain",
    "plan_swap",
    "precheck_swap",
    "temp_output_path",
]
