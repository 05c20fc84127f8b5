"""rfidsense: features and structural captions for RFID phase recordings."""

from .config import Settings, load_settings
from .pipeline import RecordingResult, build_tables, process_file, process_files, process_recording
from .types import FeatureVector, Recording, StructuralRow, TimeSeries, TrendLabel, WindowCaption

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_settings",
    "RecordingResult",
    "build_tables",
    "process_file",
    "process_files",
    "process_recording",
    "FeatureVector",
    "Recording",
    "StructuralRow",
    "TimeSeries",
    "TrendLabel",
    "WindowCaption",
]
