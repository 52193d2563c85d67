import logging
import os
import sys

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication, QMainWindow, QSplitter

from commit_detail_view import CommitDetailView
from git_graph_view import GitGraphView
from git_history import HistoryLoader
from settings import settings


class GraphWindow(QMainWindow):
    def __init__(self, repo_path: str):
        super().__init__()
        self.setWindowTitle(f"Commit Graph - {os.path.abspath(repo_path)}")
        self.resize(1000, 700)

        self.loader = HistoryLoader(repo_path)
        self.commits_by_id = {}

        self.graph_view = GitGraphView(settings.graph_config())
        self.detail_view = CommitDetailView()

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.graph_view)
        splitter.addWidget(self.detail_view)
        splitter.setSizes([700, 300])
        self.setCentralWidget(splitter)

        self.graph_view.commit_selected.connect(self.on_commit_selected)
        self.detail_view.parent_requested.connect(self.graph_view.select_commit)

    def load_repository(self):
        commits = self.loader.get_commit_history(
            limit=settings.get_history_limit(), all_refs=settings.get_all_refs()
        )
        if not commits:
            logging.warning(f"No commits found in {self.loader.repo_path}")
        self.commits_by_id = {commit.id: commit for commit in commits}
        self.graph_view.set_commits(commits)

    def on_commit_selected(self, commit_id: str):
        # a parent outside the loaded history has no details to show
        self.detail_view.show_commit(self.commits_by_id.get(commit_id))


def configure_logging():
    log_level = logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO

    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"
    )
    if os.getenv("LOG_TO_FILE") == "1":
        file_handler = logging.FileHandler("mygit_graph.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s")
        )
        logging.getLogger().addHandler(file_handler)


def main():
    configure_logging()
    app = QApplication(sys.argv)

    repo_path = sys.argv[1] if len(sys.argv) > 1 else "."
    window = GraphWindow(repo_path)
    window.load_repository()
    window.show()

    window.activateWindow()
    window.raise_()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
