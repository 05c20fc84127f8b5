"""Utility modules for ingesting rfidsense recordings."""

from .recording import REQUIRED_COLUMNS, RecordingSchemaError, discover_recordings, load_recording

__all__ = [
    "REQUIRED_COLUMNS",
    "RecordingSchemaError",
    "discover_recordings",
    "load_recording",
]
