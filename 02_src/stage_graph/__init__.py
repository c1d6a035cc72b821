"""Stage pipeline documents to renderable node/edge graphs."""

from .config import ConfigError, Settings, load_settings
from .converter import build_graph, convert, run_pipeline
from .graph_model import GraphEdge, GraphNode, GraphPosition, GraphState
from .graph_orchestrator import GraphOrchestrator
from .loader import DocumentParseError, load_document
from .pipeline import PipelinePhase, PipelineRunner
from .stages import StageKind, StageView, classify

__all__ = [
    "convert",
    "build_graph",
    "run_pipeline",
    "load_document",
    "DocumentParseError",
    "Settings",
    "ConfigError",
    "load_settings",
    "GraphNode",
    "GraphEdge",
    "GraphPosition",
    "GraphState",
    "GraphOrchestrator",
    "PipelinePhase",
    "PipelineRunner",
    "StageKind",
    "StageView",
    "classify",
]
