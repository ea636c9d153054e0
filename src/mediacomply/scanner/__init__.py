"""Candidate file discovery."""

from mediacomply.scanner.discovery import VIDEO_EXTENSIONS, discover_candidates

__all__ = ["VIDEO_EXTENSIONS", "discover_candidates"]
