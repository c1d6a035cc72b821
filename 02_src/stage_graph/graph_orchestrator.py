"""Per-conversion owner of node ids, anchors and edge bookkeeping."""

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from .graph_model import REFERENTIAL, STRUCTURAL, GraphEdge, GraphNode, GraphPosition, GraphState

logger = logging.getLogger(__name__)

DEFAULT_HORIZONTAL_SPACING = 200
DEFAULT_VERTICAL_SPACING = 150


class GraphOrchestrator:
    """Owns identifiers and safe updates of graph state.

    One orchestrator lives for exactly one conversion: the anchor table and
    the node/edge accumulators never outlive the call that created them.
    """

    def __init__(
        self,
        horizontal_spacing: int = DEFAULT_HORIZONTAL_SPACING,
        vertical_spacing: int = DEFAULT_VERTICAL_SPACING,
    ) -> None:
        self.state = GraphState()
        self.horizontal_spacing = horizontal_spacing
        self.vertical_spacing = vertical_spacing

    @property
    def next_node_number(self) -> int:
        return len(self.state.nodes) + 1

    def position_for(self, depth: int, sibling_index: int) -> GraphPosition:
        return GraphPosition(
            x=sibling_index * self.horizontal_spacing,
            y=depth * self.vertical_spacing,
        )

    def add_node(self, label: str, depth: int, sibling_index: int) -> str:
        node_id = f"node-{self.next_node_number}"
        self.state.nodes[node_id] = GraphNode(
            id=node_id,
            position=self.position_for(depth, sibling_index),
            label=label,
        )
        return node_id

    def add_edge(self, kind: str, source_id: str, target_id: str) -> str:
        if kind not in (STRUCTURAL, REFERENTIAL):
            raise ValueError(f"Unknown edge kind: {kind}")
        if source_id not in self.state.nodes:
            raise ValueError(f"Unknown source node: {source_id}")
        if target_id not in self.state.nodes:
            raise ValueError(f"Unknown target node: {target_id}")

        edge_id = f"{source_id}-{target_id}"
        self.state.edges.append(GraphEdge(id=edge_id, source=source_id, target=target_id, kind=kind))
        return edge_id

    def publish_anchor(self, name: str, node_id: str) -> None:
        previous = self.state.anchors.get(name)
        if previous is not None and previous != node_id:
            logger.debug("Anchor '%s' republished: %s -> %s", name, previous, node_id)
        self.state.anchors[name] = node_id

    def resolve_anchor(self, name: str, marker: str = "") -> Optional[str]:
        node_id = self.state.anchors.get(name)
        if node_id is None and marker and name.startswith(marker):
            node_id = self.state.anchors.get(name[len(marker):])
        return node_id

    def add_unresolved_input(self, node_id: str, name: str) -> None:
        self.state.unresolved_inputs.append({"node_id": node_id, "input": name})

    def to_json(self) -> Dict[str, Any]:
        return {
            "nodes": [asdict(node) for node in self.state.nodes.values()],
            "edges": [asdict(edge) for edge in self.state.edges],
            "unresolved_inputs": [dict(item) for item in self.state.unresolved_inputs],
        }

    def to_reactflow(self) -> Dict[str, Any]:
        """Node/edge payload in the shape a React Flow canvas consumes."""
        return {
            "nodes": [
                {
                    "id": node.id,
                    "position": asdict(node.position),
                    "data": {"label": node.label},
                }
                for node in self.state.nodes.values()
            ],
            "edges": [
                {"id": edge.id, "source": edge.source, "target": edge.target}
                for edge in self.state.edges
            ],
        }
