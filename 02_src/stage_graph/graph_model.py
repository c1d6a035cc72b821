"""Graph data model primitives for stage documents."""

from dataclasses import dataclass, field
from typing import Dict, List

STRUCTURAL = "structural"
REFERENTIAL = "referential"


@dataclass
class GraphPosition:
    x: int
    y: int


@dataclass
class GraphNode:
    id: str
    position: GraphPosition
    label: str


@dataclass
class GraphEdge:
    id: str
    source: str
    target: str
    kind: str = STRUCTURAL


@dataclass
class GraphState:
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    edges: List[GraphEdge] = field(default_factory=list)
    anchors: Dict[str, str] = field(default_factory=dict)
    unresolved_inputs: List[Dict[str, str]] = field(default_factory=list)
