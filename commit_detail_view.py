import html
from datetime import datetime
from typing import Optional

from PyQt6.QtCore import Qt, QUrl, pyqtSignal
from PyQt6.QtWidgets import QTextBrowser, QTextEdit

from git_graph_data import Commit

PARENT_LINK_SCHEME = "commit"


class CommitDetailView(QTextBrowser):
    """
    Detail panel for the selected commit.

    Parent hashes are rendered as links; clicking one emits parent_requested
    so the graph can jump to that commit even before it is loaded.
    """

    parent_requested = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.current_commit: Optional[Commit] = None
        self.setStyleSheet(
            """
            background-color: #f5f5f5;
            border: 1px solid #ddd;
            font-family: monospace;
            padding: 5px;
        """
        )
        self.setFrameShape(QTextEdit.Shape.NoFrame)
        self.setMinimumHeight(100)
        # links are handled here, not by QTextBrowser navigation
        self.setOpenLinks(False)
        self.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
            | Qt.TextInteractionFlag.TextSelectableByKeyboard
            | Qt.TextInteractionFlag.LinksAccessibleByMouse
            | Qt.TextInteractionFlag.LinksAccessibleByKeyboard
        )
        self.anchorClicked.connect(self.handle_parent_link_click)

    def show_commit(self, commit: Optional[Commit]):
        self.current_commit = commit
        if commit is None:
            self.clear()
            return
        self.setHtml(self.render_commit_html(commit))

    @staticmethod
    def render_commit_html(commit: Commit) -> str:
        message = html.escape(commit.message.strip()).replace("\n", "<br>")
        author = html.escape(commit.author)
        if commit.email:
            author += f" &lt;{html.escape(commit.email)}&gt;"
        commit_date = datetime.fromtimestamp(commit.timestamp).strftime("%Y-%m-%d %H:%M:%S")

        parts = [
            f"<b>SHA:</b> {html.escape(commit.id)}<br>",
            f"<b>Message:</b> {message}<br>",
            f"<b>Author:</b> {author}<br>",
            f"<b>Date:</b> {commit_date}<br>",
        ]
        if commit.parent_ids:
            links = ", ".join(
                f'<a href="{PARENT_LINK_SCHEME}:{html.escape(parent_id)}">{html.escape(parent_id[:7])}</a>'
                for parent_id in commit.parent_ids
            )
            parts.append(f"<b>Parents ({len(commit.parent_ids)}):</b> {links}<br>")
        return "".join(parts)

    def handle_parent_link_click(self, url: QUrl):
        if url.scheme() != PARENT_LINK_SCHEME:
            return
        parent_id = url.path()
        if parent_id:
            self.parent_requested.emit(parent_id)
