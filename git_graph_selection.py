# git_graph_selection.py

import math
from typing import Optional

from git_graph_layout import GraphLayout


def hit_test(layout: GraphLayout, x: float, y: float) -> Optional[str]:
    """
    Returns the id of the node nearest to (x, y), or None.

    Only nodes within node_radius + hit_slack count. On equal distance the
    node from the earlier row wins.
    """
    reach = layout.config.node_radius + layout.config.hit_slack
    best_id = None
    best_distance = None
    for node in layout.nodes:
        distance = math.hypot(x - node.x, y - node.y)
        if distance > reach:
            continue
        if best_distance is None or distance < best_distance:
            best_id = node.id
            best_distance = distance
    return best_id


class SelectionState:
    """
    Tracks the selected commit id independently of layout passes.

    Any id can be selected, including ids missing from the current layout
    (e.g. a parent that has not been loaded yet).
    """

    def __init__(self):
        self._selected: Optional[str] = None

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    def is_selected(self, commit_id: str) -> bool:
        return self._selected is not None and self._selected == commit_id

    def select(self, commit_id: str):
        self._selected = commit_id

    def clear(self):
        self._selected = None

    def select_at(self, layout: GraphLayout, x: float, y: float) -> Optional[str]:
        """Selects the node under (x, y). A miss keeps the current selection."""
        commit_id = hit_test(layout, x, y)
        if commit_id is not None:
            self.select(commit_id)
        return commit_id

    def __repr__(self) -> str:
        return f"SelectionState(selected={self._selected!r})"
