"""mediacomply - codec compliance auditing and safe re-encoding for media libraries."""

__version__ = "0.1.0"
