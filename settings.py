import copy
import json
import logging
import os
from pathlib import Path
from typing import Optional

from git_graph_data import DEFAULT_PALETTE, GraphConfig

DEFAULT_GRAPH_SETTINGS = {
    "node_radius": 6,
    "row_height": 50,
    "column_width": 30,
    "margin_left": 20,
    "hit_slack": 5,
    "palette": list(DEFAULT_PALETTE),
}


class Settings:
    def __init__(self, config_file: Optional[str] = None):
        if config_file is None:
            home = str(Path.home())
            config_file = os.path.join(home, ".mygit_graph", "settings.json")
        self.config_file = config_file

        # defaults, overridden by the settings file
        self.settings = {
            "graph": copy.deepcopy(DEFAULT_GRAPH_SETTINGS),
            "history_limit": 500,  # commits loaded per repository
            "all_refs": True,  # include every branch, not only HEAD
        }

        self.load_settings()

    def load_settings(self):
        """Merges the settings file over the defaults; keeps defaults on any error."""
        if not os.path.exists(self.config_file):
            return
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                saved_settings = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Failed to load settings from {self.config_file}: {e!s}")
            return

        if not isinstance(saved_settings, dict):
            logging.warning(f"Ignoring settings file {self.config_file}: top level is not an object")
            return

        graph = saved_settings.pop("graph", None)
        if isinstance(graph, dict):
            self.settings["graph"].update(
                {key: value for key, value in graph.items() if key in DEFAULT_GRAPH_SETTINGS}
            )
        elif graph is not None:
            logging.warning("Ignoring 'graph' settings: expected an object")
        self.settings.update(saved_settings)

    def graph_config(self) -> GraphConfig:
        graph = self.settings["graph"]
        return GraphConfig(
            node_radius=graph["node_radius"],
            row_height=graph["row_height"],
            column_width=graph["column_width"],
            margin_left=graph["margin_left"],
            hit_slack=graph["hit_slack"],
            palette=tuple(graph["palette"] or ()),
        )

    def get_history_limit(self) -> int:
        return self.settings.get("history_limit", 500)

    def get_all_refs(self) -> bool:
        return self.settings.get("all_refs", True)


settings = Settings()
