"""Public conversion entry points."""

from typing import Any, Dict, List, Optional

from .config import Settings
from .graph_orchestrator import GraphOrchestrator
from .phases import DocumentLoadingPhase, GraphReportPhase, StageTraversalPhase
from .pipeline import PipelinePhase, PipelineRunner


def build_default_phases() -> List[PipelinePhase]:
    return [
        DocumentLoadingPhase(),
        StageTraversalPhase(),
        GraphReportPhase(),
    ]


def _new_orchestrator(settings: Settings) -> GraphOrchestrator:
    return GraphOrchestrator(
        horizontal_spacing=settings.horizontal_spacing,
        vertical_spacing=settings.vertical_spacing,
    )


def run_pipeline(text: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Run every phase and return the graph artifact with its reports under ``meta``."""
    settings = settings or Settings()
    orchestrator = _new_orchestrator(settings)
    runner = PipelineRunner(phases=build_default_phases())
    final_context = runner.run(
        {
            "document_text": text,
            "settings": settings,
            "orchestrator": orchestrator,
        }
    )
    artifact = orchestrator.to_json()
    artifact["meta"] = {
        "phases": final_context.get("completed_phases", []),
        "load_report": final_context.get("load_report", {}),
        "graph_report": final_context.get("graph_report", {}),
    }
    return artifact


def build_graph(tree: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Turn an already parsed value tree into ``{"nodes": [...], "edges": [...]}``."""
    settings = settings or Settings()
    orchestrator = _new_orchestrator(settings)
    StageTraversalPhase().run({"value_tree": tree, "settings": settings, "orchestrator": orchestrator})
    payload = orchestrator.to_json()
    return {"nodes": payload["nodes"], "edges": payload["edges"]}


def convert(text: str, settings: Optional[Settings] = None, output_format: str = "plain") -> Dict[str, Any]:
    """Convert a stage document into nodes and edges.

    Malformed documents are logged by the loading phase and come back as an
    empty graph. ``output_format="reactflow"`` returns nodes with a
    ``data.label`` field instead of ``label``.
    """
    if output_format not in ("plain", "reactflow"):
        raise ValueError(f"Unknown output format: {output_format}")
    settings = settings or Settings()
    orchestrator = _new_orchestrator(settings)
    context = DocumentLoadingPhase().run({"document_text": text, "settings": settings})
    StageTraversalPhase().run({**context, "settings": settings, "orchestrator": orchestrator})
    if output_format == "reactflow":
        return orchestrator.to_reactflow()
    payload = orchestrator.to_json()
    return {"nodes": payload["nodes"], "edges": payload["edges"]}
