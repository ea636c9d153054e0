"""Test doubles and sample data shared across the test suite."""

import json
from pathlib import Path

from mediacomply.domain.enums import ProbeErrorKind
from mediacomply.domain.exceptions import ProbeError
from mediacomply.domain.models import EncodeAttemptResult, StreamProbeResult
from mediacomply.executor.encoders import EncoderProfile


def ffprobe_json(*streams: dict) -> str:
    """Render ffprobe -of json output for the given streams."""
    return json.dumps({"streams": list(streams)})


COMPLIANT_PROBE = StreamProbeResult(
    video_codec="hevc",
    video_profile="Main 10",
    pix_fmt="p010le",
    audio_codecs=("aac",),
)

LEGACY_PROBE = StreamProbeResult(
    video_codec="mpeg4",
    video_profile="Simple Profile",
    pix_fmt="yuv420p",
    audio_codecs=("mp3",),
)


class FakeProbe:
    """StreamProbe returning canned results keyed by file name.

    A ProbeErrorKind value makes probe() raise ProbeError of that kind.
    """

    def __init__(self, results: dict, default: StreamProbeResult | None = None):
        self.results = results
        self.default = default
        self.calls: list[Path] = []

    def probe(self, path: Path) -> StreamProbeResult:
        self.calls.append(path)
        result = self.results.get(path.name, self.default)
        if isinstance(result, ProbeErrorKind):
            raise ProbeError(result, path, f"{result.value}: {path.name}")
        if result is None:
            raise ProbeError(ProbeErrorKind.TOOL_FAILED, path, "no canned result")
        return result


class FakeEncodeRunner:
    """EncodeRunner whose outcome per encoder name is scripted.

    Successful attempts write `content` to the output path. Failing attempts
    leave a partial file behind when `partial` is set.
    """

    def __init__(
        self,
        succeed: set[str] | None = None,
        content: bytes = b"encoded",
        partial: bool = True,
    ):
        self.succeed = succeed or set()
        self.content = content
        self.partial = partial
        self.calls: list[tuple[str, Path, Path]] = []

    def run(
        self, profile: EncoderProfile, source: Path, output: Path
    ) -> EncodeAttemptResult:
        self.calls.append((profile.name, source, output))
        if profile.name in self.succeed:
            output.write_bytes(self.content)
            return EncodeAttemptResult(profile.name, True, exit_status=0)
        if self.partial:
            output.write_bytes(b"partial")
        return EncodeAttemptResult(
            profile.name, False, exit_status=1, message=f"{profile.name} failed"
        )
