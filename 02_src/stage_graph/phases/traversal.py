"""Stage traversal phase: value tree to nodes, structural and referential edges."""

import logging
from typing import Any, Dict, List, Optional

from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from ..config import Settings
from ..graph_model import REFERENTIAL, STRUCTURAL
from ..graph_orchestrator import GraphOrchestrator
from ..pipeline import PipelinePhase
from ..stages import StageKind, classify, stage_view

logger = logging.getLogger(__name__)


class TraversalState(TypedDict):
    value_tree: Any
    roots: List[Dict[str, Any]]
    visits: List[Dict[str, Any]]
    skipped_count: int
    warnings: List[str]


class StageTraversalPhase(PipelinePhase):
    """Walks the document pre-order and writes the graph through the orchestrator.

    The walk itself only records visits; ids, anchors and edges are applied
    afterwards in visit order, which is the order that decides id numbering
    and which outputs an input can see.
    """

    phase_name = "traversal"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: GraphOrchestrator = context["orchestrator"]
        settings: Settings = context.get("settings") or Settings()

        workflow = self._build_workflow()
        result_state = workflow.invoke(
            {
                "value_tree": context.get("value_tree"),
                "roots": [],
                "visits": [],
                "skipped_count": 0,
                "warnings": [],
            }
        )

        visits = result_state.get("visits", [])
        suppressed_root = self._apply_to_graph(orchestrator, visits, settings)
        traversal_output = {
            "root_count": len(result_state.get("roots", [])),
            "visit_count": len(visits),
            "skipped_count": result_state.get("skipped_count", 0),
            "suppressed_root": suppressed_root,
            "warnings": list(result_state.get("warnings", [])),
        }
        return {"traversal_output": traversal_output}

    def _build_workflow(self):
        graph = StateGraph(TraversalState)
        graph.add_node("prepare_roots", self._prepare_roots)
        graph.add_node("walk_stages", self._walk_stages)
        graph.add_edge(START, "prepare_roots")
        graph.add_edge("prepare_roots", "walk_stages")
        graph.add_edge("walk_stages", END)
        return graph.compile()

    @staticmethod
    def _prepare_roots(state: TraversalState) -> Dict[str, Any]:
        tree = state.get("value_tree")
        if tree is None:
            return {"roots": []}
        if not isinstance(tree, dict):
            warning = f"Document root is a {type(tree).__name__}, expected a mapping of stages"
            logger.debug(warning)
            return {"roots": [], "warnings": [warning]}
        return {"roots": [{"key": str(key), "value": value} for key, value in tree.items()]}

    @staticmethod
    def _walk_stages(state: TraversalState) -> Dict[str, Any]:
        visits: List[Dict[str, Any]] = []
        warnings: List[str] = list(state.get("warnings", []))
        skipped = 0

        for root in state.get("roots", []):
            # Explicit stack so deeply nested runs cannot exhaust the interpreter stack.
            # Each entry carries the ids of the mappings on its ancestor path; aliases
            # may share a mapping between siblings but must not nest it inside itself.
            pending = [(root["value"], None, 0, 0, root["key"], frozenset())]
            while pending:
                value, parent_index, depth, sibling_index, key_hint, ancestors = pending.pop()
                kind = classify(value)
                if kind is not StageKind.STAGE:
                    logger.debug("Skipping %s value at depth %d: %r", kind.value, depth, value)
                    skipped += 1
                    continue
                if id(value) in ancestors:
                    warning = f"Stage under '{root['key']}' at depth {depth} runs one of its own ancestors"
                    logger.debug(warning)
                    warnings.append(warning)
                    skipped += 1
                    continue

                stage = stage_view(value)
                visit_index = len(visits)
                visits.append(
                    {
                        "index": visit_index,
                        "parent_index": parent_index,
                        "depth": depth,
                        "sibling_index": sibling_index,
                        "key_hint": key_hint,
                        "stage": stage,
                    }
                )
                path = ancestors | {id(value)}
                for child_index in reversed(range(len(stage.runs))):
                    pending.append((stage.runs[child_index], visit_index, depth + 1, child_index, None, path))

        return {"visits": visits, "skipped_count": skipped, "warnings": warnings}

    @staticmethod
    def _apply_to_graph(
        orchestrator: GraphOrchestrator,
        visits: List[Dict[str, Any]],
        settings: Settings,
    ) -> Optional[str]:
        node_ids: Dict[int, Optional[str]] = {}
        root_pending = settings.suppress_root
        suppressed_root: Optional[str] = None
        # Referential edges into the suppressed root, attached to the node that inherits its id.
        deferred_sources: List[str] = []

        for visit in visits:
            stage = visit["stage"]
            if root_pending and visit["depth"] == 0:
                root_pending = False
                node_ids[visit["index"]] = None
                suppressed_root = stage.name or visit["key_hint"] or "Root"
                logger.debug("Suppressing implicit root '%s'", suppressed_root)
                # The root's outputs and inputs stand for the next node emitted,
                # which takes the id the root would have had.
                inherited_id = f"node-{orchestrator.next_node_number}"
                for anchor_name in stage.outputs.values():
                    orchestrator.publish_anchor(anchor_name, inherited_id)
                for input_name in stage.inputs:
                    source_id = orchestrator.resolve_anchor(input_name, marker=settings.reference_marker)
                    if source_id is None:
                        orchestrator.add_unresolved_input(inherited_id, input_name)
                        continue
                    deferred_sources.append(source_id)
                continue

            parent_index = visit["parent_index"]
            parent_id = node_ids.get(parent_index) if parent_index is not None else None
            label = stage.name or visit["key_hint"] or f"Unnamed Node {orchestrator.next_node_number}"
            node_id = orchestrator.add_node(label, visit["depth"], visit["sibling_index"])
            node_ids[visit["index"]] = node_id

            for source_id in deferred_sources:
                orchestrator.add_edge(REFERENTIAL, source_id, node_id)
            deferred_sources = []

            if parent_id:
                orchestrator.add_edge(STRUCTURAL, parent_id, node_id)

            for anchor_name in stage.outputs.values():
                orchestrator.publish_anchor(anchor_name, node_id)

            for input_name in stage.inputs:
                source_id = orchestrator.resolve_anchor(input_name, marker=settings.reference_marker)
                if source_id is None:
                    logger.debug("Unresolved input '%s' on %s", input_name, node_id)
                    orchestrator.add_unresolved_input(node_id, input_name)
                    continue
                orchestrator.add_edge(REFERENTIAL, source_id, node_id)

        if deferred_sources:
            logger.debug("Suppressed root '%s' had no following node for its inputs", suppressed_root)
        return suppressed_root
