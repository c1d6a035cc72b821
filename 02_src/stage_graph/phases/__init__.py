"""Conversion phases for stage documents."""

from .loading import DocumentLoadingPhase
from .report import GraphReportPhase
from .traversal import StageTraversalPhase

__all__ = [
    "DocumentLoadingPhase",
    "StageTraversalPhase",
    "GraphReportPhase",
]
