"""Stream metadata extraction via ffprobe."""

from mediacomply.introspector.ffprobe import FFprobeStreamProbe
from mediacomply.introspector.interface import StreamProbe
from mediacomply.introspector.parsers import (
    parse_audio_codecs,
    parse_stream_list,
    parse_video_stream,
)

__all__ = [
    "FFprobeStreamProbe",
    "StreamProbe",
    "parse_audio_codecs",
    "parse_stream_list",
    "parse_video_stream",
]
