"""Encoder profiles and ffmpeg command construction.

The default chain tries the NVIDIA and AMD hardware HEVC encoders before
falling back to libx265. A YAML file can replace the chain:

    encoders:
      - name: nvenc
        encoder: hevc_nvenc
        priority: 1
        video_args: ["-profile:v", "main10", "-pix_fmt", "p010le"]
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from mediacomply.domain.exceptions import EncoderConfigError

logger = logging.getLogger(__name__)

# Shell metacharacters rejected in encoder arguments
FORBIDDEN_ARG_PATTERNS = (";", "|", "&", "$(", "`", "${", ">", "<", "\n")

MAX_VIDEO_ARGS_COUNT = 50
MAX_VIDEO_ARG_LENGTH = 1024

# Audio, subtitle and attachment handling shared by every encoder
AUDIO_ARGS: tuple[str, ...] = (
    "-c:a",
    "aac",
    "-ac",
    "2",
    "-ar",
    "48000",
    "-b:a",
    "192k",
)
PASSTHROUGH_ARGS: tuple[str, ...] = ("-c:s", "copy", "-c:t", "copy")


class EncoderProfile(BaseModel):
    """One entry of the encoder fallback chain."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    """Short identifier reported in outcomes and logs (e.g. "nvenc")."""

    encoder: str = Field(min_length=1)
    """ffmpeg encoder passed to -c:v (e.g. "hevc_nvenc")."""

    priority: int = Field(ge=1)
    """Lower runs first."""

    video_args: tuple[str, ...] = ()
    """Arguments following -c:v: profile, pixel format and rate control."""

    @field_validator("video_args")
    @classmethod
    def validate_video_args(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject oversized argument lists and shell metacharacters."""
        if len(v) > MAX_VIDEO_ARGS_COUNT:
            raise ValueError(
                f"video_args count exceeds limit: {len(v)} > {MAX_VIDEO_ARGS_COUNT}"
            )
        for i, arg in enumerate(v):
            if len(arg) > MAX_VIDEO_ARG_LENGTH:
                raise ValueError(
                    f"video_args[{i}] exceeds {MAX_VIDEO_ARG_LENGTH} chars"
                )
            for pattern in FORBIDDEN_ARG_PATTERNS:
                if pattern in arg:
                    raise ValueError(
                        f"video_args[{i}] contains forbidden pattern {pattern!r}"
                    )
        return v


class EncoderChainModel(BaseModel):
    """Top-level structure of an encoder chain YAML file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    encoders: list[EncoderProfile] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_unique(self) -> EncoderChainModel:
        """Names and priorities must be unique across the chain."""
        names = [e.name for e in self.encoders]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate encoder names in chain: {names}")
        priorities = [e.priority for e in self.encoders]
        if len(set(priorities)) != len(priorities):
            raise ValueError(f"Duplicate encoder priorities in chain: {priorities}")
        return self


DEFAULT_ENCODER_CHAIN: tuple[EncoderProfile, ...] = (
    EncoderProfile(
        name="nvenc",
        encoder="hevc_nvenc",
        priority=1,
        video_args=(
            "-profile:v",
            "main10",
            "-pix_fmt",
            "p010le",
            "-preset",
            "p5",
            "-rc",
            "vbr",
            "-cq",
            "23",
            "-b:v",
            "0",
        ),
    ),
    EncoderProfile(
        name="amf",
        encoder="hevc_amf",
        priority=2,
        video_args=(
            "-profile:v",
            "main10",
            "-pix_fmt",
            "p010le",
            "-quality",
            "quality",
            "-rc",
            "cqp",
            "-qp_i",
            "22",
            "-qp_p",
            "22",
        ),
    ),
    EncoderProfile(
        name="libx265",
        encoder="libx265",
        priority=3,
        video_args=(
            "-profile:v",
            "main10",
            "-pix_fmt",
            "yuv420p10le",
            "-preset",
            "medium",
            "-crf",
            "22",
        ),
    ),
)


def sort_chain(
    profiles: list[EncoderProfile] | tuple[EncoderProfile, ...],
) -> tuple[EncoderProfile, ...]:
    """Return profiles ordered by priority."""
    return tuple(sorted(profiles, key=lambda p: p.priority))


def load_encoder_chain(path: Path) -> tuple[EncoderProfile, ...]:
    """Load and validate an encoder chain from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Encoder profiles sorted by priority.

    Raises:
        EncoderConfigError: If the file is missing, not valid YAML or fails
            validation.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise EncoderConfigError(f"Cannot read encoder chain {path}: {e}") from e
    except yaml.YAMLError as e:
        raise EncoderConfigError(f"Invalid YAML in encoder chain {path}: {e}") from e

    try:
        model = EncoderChainModel.model_validate(data)
    except ValidationError as e:
        raise EncoderConfigError(f"Invalid encoder chain {path}: {e}") from e

    chain = sort_chain(model.encoders)
    logger.debug(
        "Loaded encoder chain from %s: %s",
        path,
        ", ".join(p.name for p in chain),
    )
    return chain


def build_ffmpeg_command(
    ffmpeg: Path | str,
    profile: EncoderProfile,
    source: Path,
    output: Path,
) -> list[str]:
    """Build the ffmpeg command for one encode attempt.

    All streams are mapped; video is re-encoded with the profile, audio is
    transcoded to stereo AAC and subtitles/attachments are copied.
    """
    return [
        str(ffmpeg),
        "-hide_banner",
        "-nostdin",
        "-y",
        "-i",
        str(source),
        "-map",
        "0",
        "-c:v",
        profile.encoder,
        *profile.video_args,
        *AUDIO_ARGS,
        *PASSTHROUGH_ARGS,
        "-f",
        "matroska",
        str(output),
    ]
