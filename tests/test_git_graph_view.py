import os
import sys
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import QApplication

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from commit_detail_view import CommitDetailView
from git_graph_data import Commit, commits_from_records
from git_graph_items import SELECTED_COMMIT_COLOR, CommitCircle, EdgeLine, format_commit_time
from git_graph_layout import EdgeKind
from git_graph_view import GitGraphView


class TestGitGraphView(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        # QApplication is needed for QWidget-based tests, even if not showing UI
        cls.app = QApplication.instance() or QApplication([])

    @classmethod
    def tearDownClass(cls):
        cls.app = None

    def setUp(self):
        self.view = GitGraphView()
        self.selected = []
        self.view.commit_selected.connect(self.selected.append)

    @staticmethod
    def get_scenario_merge():
        return [
            Commit(id="c3", parent_ids=("c2", "c1"), author="Alice", message="Merge c1"),
            Commit(id="c2", author="Bob", message="Commit 2"),
            Commit(id="c1", author="Carol", email="carol@example.com", message="Commit 1"),
        ]

    def test_populate_creates_items(self):
        self.view.set_commits(self.get_scenario_merge())

        self.assertEqual(len(self.view._commit_items), 3)
        self.assertEqual(len(self.view._edge_items), 2)
        self.assertEqual(len(self.view._message_items), 3)

        c1_item = self.view.commit_item("c1")
        self.assertEqual((c1_item.pos().x(), c1_item.pos().y()), (50, 125))
        self.assertEqual(c1_item.brush().color(), QColor("#10b981"))
        self.assertIn("carol@example.com", c1_item.toolTip())

    def test_scene_covers_layout_canvas(self):
        self.view.set_commits(self.get_scenario_merge())
        rect = self.view.scene.sceneRect()
        self.assertLessEqual(rect.left(), 0)
        self.assertLessEqual(rect.top(), 0)
        self.assertGreaterEqual(rect.width(), self.view.layout_result.width)
        self.assertGreaterEqual(rect.height(), self.view.layout_result.height)

    def test_edge_paths(self):
        self.view.set_commits(self.get_scenario_merge())
        edges = {(item.edge.child.id, item.edge.parent.id): item for item in self.view._edge_items}

        straight = edges[("c3", "c2")]
        self.assertIs(straight.edge.kind, EdgeKind.STRAIGHT)
        self.assertEqual(straight.path().elementCount(), 2)

        curved = edges[("c3", "c1")]
        self.assertIs(curved.edge.kind, EdgeKind.CURVED)
        # moveTo + cubicTo (cubicTo adds three elements)
        self.assertEqual(curved.path().elementCount(), 4)
        end = curved.path().currentPosition()
        self.assertEqual((end.x(), end.y()), (50, 125))

    def test_build_path_for_straight_edge(self):
        self.view.set_commits(self.get_scenario_merge())
        edge = next(e for e in self.view.layout_result.edges() if e.kind is EdgeKind.STRAIGHT)
        path = EdgeLine.build_path(edge)
        self.assertEqual(path.pointAtPercent(0).y(), 25)
        self.assertEqual(path.pointAtPercent(1).y(), 75)

    def test_click_selects_commit(self):
        self.view.set_commits(self.get_scenario_merge())

        self.assertEqual(self.view.select_at(20, 75), "c2")
        self.assertEqual(self.view.selected_commit(), "c2")
        self.assertEqual(self.selected, ["c2"])
        self.assertTrue(self.view.commit_item("c2").selected)
        self.assertEqual(self.view.commit_item("c2").brush().color(), SELECTED_COMMIT_COLOR)

    def test_click_on_empty_canvas_keeps_selection(self):
        self.view.set_commits(self.get_scenario_merge())
        self.view.select_at(20, 75)

        self.assertIsNone(self.view.select_at(300, 300))
        self.assertEqual(self.view.selected_commit(), "c2")
        self.assertEqual(self.selected, ["c2"])

    def test_selecting_moves_highlight(self):
        self.view.set_commits(self.get_scenario_merge())
        self.view.select_commit("c3")
        self.view.select_commit("c1")

        self.assertFalse(self.view.commit_item("c3").selected)
        self.assertTrue(self.view.commit_item("c1").selected)

    def test_select_commit_not_loaded(self):
        self.view.set_commits(self.get_scenario_merge()[:1])
        self.view.select_commit("c1")

        self.assertEqual(self.view.selected_commit(), "c1")
        self.assertEqual(self.selected, ["c1"])

    def test_selection_survives_relayout(self):
        commits = self.get_scenario_merge()
        self.view.set_commits(commits[:1])
        self.view.select_commit("c2")

        self.view.set_commits(commits)
        self.assertEqual(self.view.selected_commit(), "c2")
        self.assertTrue(self.view.commit_item("c2").selected)

    def test_clear_selection(self):
        self.view.set_commits(self.get_scenario_merge())
        self.view.select_commit("c3")
        self.view.clear_selection()

        self.assertIsNone(self.view.selected_commit())
        self.assertFalse(self.view.commit_item("c3").selected)

    def test_click_on_commit_row_selects_commit(self):
        self.view.set_commits(self.get_scenario_merge())
        row = next(item for item in self.view._message_items if item.commit_id == "c1")
        center = row.sceneBoundingRect().center()

        self.assertEqual(self.view.select_at(center.x(), center.y()), "c1")
        self.assertEqual(self.view.selected_commit(), "c1")
        self.assertEqual(self.selected, ["c1"])
        self.assertTrue(self.view.commit_item("c1").selected)

    def test_commit_row_shows_sha_author_and_date(self):
        commit = Commit(id="a1b2c3d4e5f6", author="Bob", message="Fix it", timestamp=1672531200)
        self.view.set_commits([commit])
        text = self.view._message_items[0].toPlainText()

        self.assertIn("a1b2c3d", text)
        self.assertIn("Fix it", text)
        self.assertIn("Bob", text)
        self.assertIn(format_commit_time(1672531200), text)

    def test_records_with_missing_metadata_render(self):
        commits = commits_from_records(
            [
                {"id": "b", "parent_ids": ["a"], "timestamp": None, "message": None, "author": None},
                {"id": "a", "parent_ids": []},
            ]
        )
        self.view.set_commits(commits)
        self.assertEqual(len(self.view._message_items), 2)
        self.assertIn(format_commit_time(0), self.view.commit_item("b").toolTip())

        detail = CommitDetailView()
        detail.show_commit(commits[0])
        self.assertIn("b", detail.toPlainText())

    def test_duplicate_ids_highlight_later_node_only(self):
        self.view.set_commits([Commit(id="a"), Commit(id="a")])
        self.view.select_commit("a")

        circles = sorted(
            (item for item in self.view.scene.items() if isinstance(item, CommitCircle)),
            key=lambda item: item.node.row,
        )
        self.assertEqual(len(circles), 2)
        self.assertFalse(circles[0].selected)
        self.assertTrue(circles[1].selected)

    def test_empty_history(self):
        self.view.set_commits([])
        self.assertEqual(len(self.view._commit_items), 0)
        self.assertIsNone(self.view.select_at(20, 25))


class TestCommitDetailView(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    @classmethod
    def tearDownClass(cls):
        cls.app = None

    def setUp(self):
        self.detail = CommitDetailView()
        self.requested = []
        self.detail.parent_requested.connect(self.requested.append)

    def test_render_commit(self):
        commit = Commit(
            id="a1b2c3d4e5f6",
            parent_ids=("f6e5d4c3b2a1", "abcdef123456"),
            author="Jules <Verne>",
            email="jules@example.com",
            message="Merge branch 'dev'",
            timestamp=1672531200,
        )
        html_text = CommitDetailView.render_commit_html(commit)

        self.assertIn("a1b2c3d4e5f6", html_text)
        self.assertIn("Jules &lt;Verne&gt;", html_text)
        self.assertIn("jules@example.com", html_text)
        self.assertIn('href="commit:f6e5d4c3b2a1"', html_text)
        self.assertIn('href="commit:abcdef123456"', html_text)
        self.assertIn("Parents (2)", html_text)

    def test_root_commit_has_no_parent_section(self):
        html_text = CommitDetailView.render_commit_html(Commit(id="root", message="Initial"))
        self.assertNotIn("Parents", html_text)

    def test_show_and_clear(self):
        commit = Commit(id="c1", message="Commit 1")
        self.detail.show_commit(commit)
        self.assertIs(self.detail.current_commit, commit)
        self.assertIn("Commit 1", self.detail.toPlainText())

        self.detail.show_commit(None)
        self.assertIsNone(self.detail.current_commit)
        self.assertEqual(self.detail.toPlainText(), "")

    def test_parent_link_requests_jump(self):
        self.detail.handle_parent_link_click(QUrl("commit:f6e5d4c3b2a1"))
        self.detail.handle_parent_link_click(QUrl("https://example.com"))
        self.assertEqual(self.requested, ["f6e5d4c3b2a1"])

    def test_parent_link_drives_graph_selection(self):
        view = GitGraphView()
        view.set_commits(TestGitGraphView.get_scenario_merge())
        self.detail.parent_requested.connect(view.select_commit)

        self.detail.handle_parent_link_click(QUrl("commit:c1"))
        self.assertEqual(view.selected_commit(), "c1")
        self.assertTrue(view.commit_item("c1").selected)


if __name__ == "__main__":
    unittest.main()
