"""Core utilities shared across mediacomply modules."""

from mediacomply.core.subprocess_utils import ToolRun, run_tool

__all__ = ["ToolRun", "run_tool"]
