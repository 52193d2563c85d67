# git_graph_items.py

from datetime import datetime

from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPainterPath, QPen
from PyQt6.QtWidgets import QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem, QGraphicsTextItem

from git_graph_data import GraphNode
from git_graph_layout import EdgeKind, GraphEdge

SELECTED_COMMIT_COLOR = QColor("#fbbf24")
SELECTED_COMMIT_BORDER = QColor("#f59e0b")
HOVER_COMMIT_COLOR = QColor(Qt.GlobalColor.lightGray)
COMMIT_BORDER_COLOR = QColor(Qt.GlobalColor.white)

EDGE_THICKNESS = 2

# Configuration for CommitMessageItem
COMMIT_MSG_MAX_LENGTH = 60
COMMIT_MSG_PADDING_X = 10
COMMIT_MSG_COLOR = QColor("#444444")
COMMIT_MSG_FONT_FAMILY = "Arial"
COMMIT_MSG_FONT_SIZE = 9


def format_commit_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


class CommitCircle(QGraphicsEllipseItem):
    def __init__(self, node: GraphNode, radius: float, parent: QGraphicsItem = None):
        super().__init__(-radius, -radius, 2 * radius, 2 * radius, parent)
        self.node = node
        self.base_color = QColor(node.color)
        self.selected = False

        self.setAcceptHoverEvents(True)
        self.setPos(node.x, node.y)
        self._apply_style()

        commit = node.commit
        author = commit.author
        if commit.email:
            author = f"{author} <{commit.email}>"
        self.setToolTip(
            f"SHA: {commit.id}\n"
            f"Author: {author}\n"
            f"Date: {format_commit_time(commit.timestamp)}\n"
            f"Message: {commit.message}"
        )

    @property
    def commit_id(self) -> str:
        return self.node.id

    def _apply_style(self):
        if self.selected:
            self.setBrush(QBrush(SELECTED_COMMIT_COLOR))
            self.setPen(QPen(SELECTED_COMMIT_BORDER, 3))
        else:
            self.setBrush(QBrush(self.base_color))
            self.setPen(QPen(COMMIT_BORDER_COLOR, 2))

    def set_selected(self, selected: bool):
        self.selected = selected
        self._apply_style()

    def hoverEnterEvent(self, event):
        if not self.selected:
            self.setBrush(QBrush(HOVER_COMMIT_COLOR))
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event):
        self._apply_style()
        super().hoverLeaveEvent(event)


class EdgeLine(QGraphicsPathItem):
    def __init__(self, edge: GraphEdge, parent: QGraphicsItem = None):
        super().__init__(parent)
        self.edge = edge

        self.setPen(
            QPen(
                QColor(edge.color),
                EDGE_THICKNESS,
                Qt.PenStyle.SolidLine,
                Qt.PenCapStyle.RoundCap,
                Qt.PenJoinStyle.RoundJoin,
            )
        )
        self.setZValue(-1)  # Draw edges behind commits
        self.setPath(self.build_path(edge))

    @staticmethod
    def build_path(edge: GraphEdge) -> QPainterPath:
        start = QPointF(edge.child.x, edge.child.y)
        end = QPointF(edge.parent.x, edge.parent.y)

        path = QPainterPath()
        path.moveTo(start)
        if edge.kind is EdgeKind.STRAIGHT:
            path.lineTo(end)
        else:
            c1, c2 = edge.control_points
            path.cubicTo(QPointF(*c1), QPointF(*c2), end)
        return path


class CommitMessageItem(QGraphicsTextItem):
    """One commit list row: short SHA, message, author and date. Clicking it selects the commit."""

    def __init__(self, node: GraphNode, x: float, parent: QGraphicsItem = None):
        super().__init__(parent)
        self.commit_id = node.id
        commit = node.commit
        full_message = commit.message

        if len(full_message) > COMMIT_MSG_MAX_LENGTH:
            message = full_message[: COMMIT_MSG_MAX_LENGTH - 3] + "..."
        else:
            message = full_message

        self.setPlainText(
            f"{commit.short_id}  {message}  · {commit.author}  · {format_commit_time(commit.timestamp)}"
        )
        self.setFont(QFont(COMMIT_MSG_FONT_FAMILY, COMMIT_MSG_FONT_SIZE))
        self.setDefaultTextColor(COMMIT_MSG_COLOR)

        if message != full_message:
            self.setToolTip(f"Full message: {full_message}")

        # vertically centered on the commit row
        self.setPos(x + COMMIT_MSG_PADDING_X, node.y - self.boundingRect().height() / 2)
