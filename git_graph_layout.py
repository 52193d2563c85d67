# git_graph_layout.py

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from git_graph_data import Commit, GraphConfig, GraphNode


class LaneAllocator:
    """
    Assigns each commit a lane in a single forward pass.

    Each slot of ``_lanes`` is either None (free) or the id of the commit the
    lane is waiting for. Commits must arrive children-first, which lets the
    allocator work without lookahead.
    """

    def __init__(self):
        self._lanes: list[Optional[str]] = []

    @property
    def active_lanes(self) -> list[Optional[str]]:
        return list(self._lanes)

    def _first_free_lane(self) -> int:
        try:
            return self._lanes.index(None)
        except ValueError:
            self._lanes.append(None)
            return len(self._lanes) - 1

    def _reserved_lane(self, commit_id: str) -> int:
        # first lane found wins when an id is reserved more than once
        try:
            return self._lanes.index(commit_id)
        except ValueError:
            return -1

    def place(self, commit: Commit) -> int:
        lane = self._reserved_lane(commit.id)
        if lane == -1:
            # new head
            lane = self._first_free_lane()

        self._lanes[lane] = None

        for parent_idx, parent_id in enumerate(commit.parent_ids):
            if self._reserved_lane(parent_id) != -1:
                continue
            if parent_idx == 0:
                # primary parent continues straight down
                self._lanes[lane] = parent_id
            else:
                self._lanes[self._first_free_lane()] = parent_id

        while self._lanes and self._lanes[-1] is None:
            self._lanes.pop()

        return lane


def assign_lanes(commits: Sequence[Commit]) -> list[int]:
    allocator = LaneAllocator()
    return [allocator.place(commit) for commit in commits]


def lane_color(lane: int, palette: Sequence[str]) -> str:
    return palette[lane % len(palette)]


class EdgeKind(Enum):
    STRAIGHT = "straight"
    CURVED = "curved"


@dataclass(frozen=True)
class GraphEdge:
    child: GraphNode
    parent: GraphNode
    kind: EdgeKind
    # (c1, c2) bezier control points for curved edges
    control_points: Optional[tuple[tuple[float, float], tuple[float, float]]] = None

    @property
    def color(self) -> str:
        return self.child.color


def classify_edge(child: GraphNode, parent: GraphNode) -> EdgeKind:
    if child.lane == parent.lane:
        return EdgeKind.STRAIGHT
    return EdgeKind.CURVED


def edge_between(child: GraphNode, parent: GraphNode) -> GraphEdge:
    """
    Builds the connector from a child node to one of its parents.

    Curved edges pull both control points to the vertical midpoint, which gives
    an S-curve leaving the child vertically and entering the parent vertically.
    """
    kind = classify_edge(child, parent)
    if kind is EdgeKind.STRAIGHT:
        return GraphEdge(child, parent, kind)

    mid_y = (child.y + parent.y) / 2
    return GraphEdge(child, parent, kind, ((child.x, mid_y), (parent.x, mid_y)))


class GraphLayout:
    """Positioned nodes of one layout pass. Edges are derived on demand."""

    def __init__(self, nodes: Sequence[GraphNode], config: GraphConfig):
        self.nodes: tuple[GraphNode, ...] = tuple(nodes)
        self.config = config
        # duplicate ids: the later node overwrites the earlier one
        self._index: dict[str, GraphNode] = {node.id: node for node in self.nodes}

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self.nodes)

    def node_for(self, commit_id: str) -> Optional[GraphNode]:
        return self._index.get(commit_id)

    @property
    def lane_count(self) -> int:
        if not self.nodes:
            return 0
        return max(node.lane for node in self.nodes) + 1

    @property
    def width(self) -> float:
        columns = max(1, self.lane_count)
        return max(1, columns * self.config.column_width + 2 * self.config.margin_left)

    @property
    def height(self) -> float:
        return max(1, len(self.nodes) * self.config.row_height + self.config.row_height)

    def parent_edges(self, node: GraphNode) -> list[GraphEdge]:
        edges = []
        for parent_id in node.commit.parent_ids:
            parent = self._index.get(parent_id)
            if parent is None:
                # parent is outside the loaded history
                continue
            edges.append(edge_between(node, parent))
        return edges

    def edges(self) -> Iterator[GraphEdge]:
        for node in self.nodes:
            yield from self.parent_edges(node)


def build_layout(commits: Sequence[Commit], config: Optional[GraphConfig] = None) -> GraphLayout:
    """
    Calculates lane, position and color for every commit.

    ``commits`` must be ordered children before parents (e.g. git log
    --topo-order). Row i is the i-th commit; x follows the lane and y the row.
    """
    config = config or GraphConfig()
    allocator = LaneAllocator()

    nodes = []
    for row, commit in enumerate(commits):
        lane = allocator.place(commit)
        nodes.append(
            GraphNode(
                commit=commit,
                lane=lane,
                row=row,
                x=config.margin_left + lane * config.column_width,
                y=row * config.row_height + config.row_height / 2,
                color=lane_color(lane, config.palette),
            )
        )

    layout = GraphLayout(nodes, config)
    logging.debug("Layout calculated: %d commits, %d lanes", len(layout), layout.lane_count)
    return layout
