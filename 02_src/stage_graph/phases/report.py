"""Read-only summary of the produced graph."""

from typing import Any, Dict, List

from ..graph_model import REFERENTIAL, STRUCTURAL
from ..graph_orchestrator import GraphOrchestrator
from ..pipeline import PipelinePhase


class GraphReportPhase(PipelinePhase):
    phase_name = "report"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: GraphOrchestrator = context["orchestrator"]
        traversal_output = context.get("traversal_output", {})
        edges = orchestrator.state.edges

        warnings: List[str] = list(traversal_output.get("warnings", []))
        unresolved = orchestrator.state.unresolved_inputs
        for item in unresolved:
            warnings.append(f"Input '{item['input']}' of {item['node_id']} did not match a published output")

        graph_report = {
            "node_count": len(orchestrator.state.nodes),
            "edge_count": len(edges),
            "structural_edge_count": sum(1 for edge in edges if edge.kind == STRUCTURAL),
            "referential_edge_count": sum(1 for edge in edges if edge.kind == REFERENTIAL),
            "anchor_count": len(orchestrator.state.anchors),
            "unresolved_input_count": len(unresolved),
            "skipped_count": traversal_output.get("skipped_count", 0),
            "suppressed_root": traversal_output.get("suppressed_root"),
            "warnings": warnings,
        }
        return {"graph_report": graph_report}
