"""
Graph Models - Typed representation of model-proposed canvas structures

Pydantic models for nodes, edges and graphs in the JSON Canvas layout the
host application stores. Field names are snake_case in Python and keep the
canvas wire keys (type, fromNode, toNode, ...) as aliases.
"""

from typing import Dict, List, Literal, Optional, Set, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


NodeKind = Literal["text", "group", "link"]
Side = Literal["top", "right", "bottom", "left"]
EndMarker = Literal["none", "arrow"]

NODE_KINDS: Tuple[str, ...] = ("text", "group", "link")
SIDES: Tuple[str, ...] = ("top", "right", "bottom", "left")
END_MARKERS: Tuple[str, ...] = ("none", "arrow")


class GraphNode(BaseModel):
    """Positioned content unit on the canvas"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, description="Identifier, unique within the owning graph")
    x: float = Field(description="Left edge in canvas coordinates")
    y: float = Field(description="Top edge in canvas coordinates")
    width: float = Field(gt=0, description="Horizontal extent")
    height: float = Field(gt=0, description="Vertical extent")
    kind: NodeKind = Field(
        default="text",
        validation_alias=AliasChoices("type", "kind"),
        serialization_alias="type",
        description="Node variant: text, group or link"
    )
    text: Optional[str] = Field(default=None, description="Markdown body (text nodes)")
    label: Optional[str] = Field(default=None, description="Group title (group nodes)")
    url: Optional[str] = Field(default=None, description="Target address (link nodes)")
    color: Optional[str] = Field(default=None, description="Presentational colour tag")

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def contains(self, other: "GraphNode") -> bool:
        """Whether other's rectangle lies entirely inside this node's rectangle"""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.x + other.width <= self.x + self.width
            and other.y + other.height <= self.y + self.height
        )


class GraphEdge(BaseModel):
    """Directed connection between two nodes"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, description="Identifier, unique within the owning graph")
    from_node: str = Field(
        validation_alias=AliasChoices("fromNode", "from_node"),
        serialization_alias="fromNode",
        description="Source node id"
    )
    to_node: str = Field(
        validation_alias=AliasChoices("toNode", "to_node"),
        serialization_alias="toNode",
        description="Target node id"
    )
    from_side: Optional[Side] = Field(
        default=None,
        validation_alias=AliasChoices("fromSide", "from_side"),
        serialization_alias="fromSide"
    )
    to_side: Optional[Side] = Field(
        default=None,
        validation_alias=AliasChoices("toSide", "to_side"),
        serialization_alias="toSide"
    )
    from_end: Optional[EndMarker] = Field(
        default=None,
        validation_alias=AliasChoices("fromEnd", "from_end"),
        serialization_alias="fromEnd"
    )
    to_end: Optional[EndMarker] = Field(
        default=None,
        validation_alias=AliasChoices("toEnd", "to_end"),
        serialization_alias="toEnd"
    )
    label: Optional[str] = Field(default=None, description="Edge caption")
    color: Optional[str] = Field(default=None, description="Presentational colour tag")


class Graph(BaseModel):
    """Ordered collection of nodes and edges proposed for insertion"""
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    def node_ids(self) -> Set[str]:
        return {node.id for node in self.nodes}

    def node_index(self) -> Dict[str, GraphNode]:
        """Map node id to node (last occurrence wins for duplicate ids)"""
        return {node.id: node for node in self.nodes}

    def dangling_edges(self) -> List[GraphEdge]:
        """Edges with at least one endpoint that does not resolve to a node"""
        ids = self.node_ids()
        return [e for e in self.edges if e.from_node not in ids or e.to_node not in ids]

    def bounding_box(self) -> Optional[Tuple[float, float, float, float]]:
        """
        Axis-aligned bounding box of all nodes.

        Returns:
            (min_x, min_y, max_x, max_y) or None for a graph without nodes
        """
        if not self.nodes:
            return None
        min_x = min(node.x for node in self.nodes)
        min_y = min(node.y for node in self.nodes)
        max_x = max(node.x + node.width for node in self.nodes)
        max_y = max(node.y + node.height for node in self.nodes)
        return min_x, min_y, max_x, max_y

    def to_canvas_dict(self) -> Dict[str, list]:
        """Serialize using canvas wire keys, omitting unset optional fields"""
        return self.model_dump(by_alias=True, exclude_none=True)


class SanitizeStats(BaseModel):
    """Diagnostic counters from a sanitization pass"""
    removed_empty_nodes: int = Field(default=0, ge=0)
    removed_invalid_edges: int = Field(default=0, ge=0)
    removed_orphan_nodes: int = Field(default=0, ge=0)

    @property
    def total_removed(self) -> int:
        return self.removed_empty_nodes + self.removed_invalid_edges + self.removed_orphan_nodes


class SanitizeResult(BaseModel):
    """Sanitized graph plus what was dropped to produce it"""
    graph: Graph
    stats: SanitizeStats = Field(default_factory=SanitizeStats)


class SynthesisResult(BaseModel):
    """Final output of the graph synthesis pipeline, ready for insertion"""
    graph: Graph = Field(description="Graph with fresh ids, remapped and laid out")
    stats: SanitizeStats = Field(default_factory=SanitizeStats)
    warnings: List[str] = Field(
        default_factory=list,
        description="Recoverable validation findings (dangling references, dropped attributes)"
    )
