from .__about__ import __version__
from .catalog import DEFAULT_CATALOG, DetectionCategory
from .errors import InvalidInputError, ScanFailure, ScannerError, SetupFailure, SummaryFailure
from .fileops import OutputLayout, Sample, discover
from .pipeline import aggregate, dispatch, ensure_ready, run_pipeline

__all__ = [
    "__version__",
    "DEFAULT_CATALOG",
    "DetectionCategory",
    "InvalidInputError",
    "OutputLayout",
    "Sample",
    "ScanFailure",
    "ScannerError",
    "SetupFailure",
    "SummaryFailure",
    "aggregate",
    "discover",
    "dispatch",
    "ensure_ready",
    "run_pipeline",
]
