# git_graph_view.py

import logging
from typing import Optional, Sequence

from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QAction, QPainter
from PyQt6.QtWidgets import QApplication, QGraphicsScene, QGraphicsView, QMenu

from git_graph_data import Commit, GraphConfig
from git_graph_items import CommitCircle, CommitMessageItem, EdgeLine
from git_graph_layout import GraphLayout, build_layout
from git_graph_selection import SelectionState, hit_test


class GitGraphView(QGraphicsView):
    commit_selected = pyqtSignal(str)

    def __init__(self, config: Optional[GraphConfig] = None, selection: Optional[SelectionState] = None, parent=None):
        super().__init__(parent)
        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)

        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)  # Zoom towards mouse
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)

        self.config = config or GraphConfig()
        self.selection = selection or SelectionState()
        self.layout_result: GraphLayout = build_layout([], self.config)

        self._commit_items: dict[str, CommitCircle] = {}
        self._edge_items: list[EdgeLine] = []
        self._message_items: list[CommitMessageItem] = []

        self._zoom_factor_base = 1.1

        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

    def clear_graph(self):
        self.scene.clear()
        self._commit_items.clear()
        self._edge_items.clear()
        self._message_items.clear()

    def set_commits(self, commits: Sequence[Commit]):
        """Recomputes the layout from scratch. The selection is kept."""
        self.layout_result = build_layout(commits, self.config)
        self.populate_graph(self.layout_result)

    def populate_graph(self, layout: GraphLayout):
        self.clear_graph()

        for edge in layout.edges():
            edge_item = EdgeLine(edge)
            self.scene.addItem(edge_item)
            self._edge_items.append(edge_item)

        for node in layout:
            commit_item = CommitCircle(node, self.config.node_radius)
            commit_item.set_selected(self.selection.is_selected(node.id))
            self.scene.addItem(commit_item)
            # duplicate ids: the later node owns the id, as in the layout index
            self._commit_items[node.id] = commit_item

            message_item = CommitMessageItem(node, layout.width)
            self.scene.addItem(message_item)
            self._message_items.append(message_item)

        # canvas size from the layout, widened for the message column
        canvas = QRectF(0, 0, layout.width, layout.height)
        self.scene.setSceneRect(canvas.united(self.scene.itemsBoundingRect()))

    def commit_item(self, commit_id: str) -> Optional[CommitCircle]:
        return self._commit_items.get(commit_id)

    def selected_commit(self) -> Optional[str]:
        return self.selection.selected

    def select_commit(self, commit_id: str):
        """Selects any id, even one not loaded in the view yet."""
        previous = self.selection.selected
        self.selection.select(commit_id)
        self._refresh_selection(previous)

        node = self.layout_result.node_for(commit_id)
        if node is not None:
            self.ensureVisible(node.x, node.y, 1, 1)
        else:
            logging.debug(f"Selected commit {commit_id} is not in the current view")
        self.commit_selected.emit(commit_id)

    def clear_selection(self):
        previous = self.selection.selected
        self.selection.clear()
        self._refresh_selection(previous)

    def _refresh_selection(self, previous: Optional[str]):
        # with duplicate ids only the later circle is tracked, so only it highlights
        if previous is not None and previous in self._commit_items:
            self._commit_items[previous].set_selected(False)
        current = self.selection.selected
        if current is not None and current in self._commit_items:
            self._commit_items[current].set_selected(True)

    def select_at(self, x: float, y: float) -> Optional[str]:
        """Selects the commit under a scene position, either its node or its list row; a miss changes nothing."""
        previous = self.selection.selected
        commit_id = self.selection.select_at(self.layout_result, x, y)
        if commit_id is not None:
            self._refresh_selection(previous)
            self.commit_selected.emit(commit_id)
            return commit_id

        row = self.message_item_at(x, y)
        if row is None:
            return None
        self.select_commit(row.commit_id)
        return row.commit_id

    def message_item_at(self, x: float, y: float) -> Optional[CommitMessageItem]:
        for item in self.scene.items(QPointF(x, y)):
            if isinstance(item, CommitMessageItem):
                return item
        return None

    def wheelEvent(self, event):
        """Ctrl + wheel zooms, plain wheel scrolls."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            if event.angleDelta().y() > 0:
                self.zoom_in()
            else:
                self.zoom_out()
            event.accept()
        else:
            super().wheelEvent(event)

    def zoom_in(self):
        self.scale(self._zoom_factor_base, self._zoom_factor_base)

    def zoom_out(self):
        self.scale(1.0 / self._zoom_factor_base, 1.0 / self._zoom_factor_base)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Plus or event.key() == Qt.Key.Key_Equal:
            if event.modifiers() & Qt.KeyboardModifier.ControlModifier:  # Ctrl + / Ctrl =
                self.zoom_in()
        elif event.key() == Qt.Key.Key_Minus:
            if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
                self.zoom_out()
        elif event.key() == Qt.Key.Key_Escape:
            self.clear_selection()
        else:
            super().keyPressEvent(event)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            scene_pos = self.mapToScene(event.position().toPoint())
            self.select_at(scene_pos.x(), scene_pos.y())
        super().mousePressEvent(event)

    def _show_context_menu(self, pos):
        scene_pos = self.mapToScene(pos)
        commit_id = hit_test(self.layout_result, scene_pos.x(), scene_pos.y())
        if commit_id is None:
            row = self.message_item_at(scene_pos.x(), scene_pos.y())
            if row is None:
                return
            commit_id = row.commit_id

        menu = QMenu(self)
        copy_action = QAction("Copy Commit", self)
        copy_action.triggered.connect(lambda: self._copy_commit_sha(commit_id))
        menu.addAction(copy_action)
        menu.exec(self.viewport().mapToGlobal(pos))

    def _copy_commit_sha(self, sha):
        clipboard = QApplication.clipboard()
        clipboard.setText(sha)
