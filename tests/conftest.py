import sys
from copy import deepcopy
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from DS_Visualizer.config import Config
from DS_Visualizer.graph.tree import TreeModel


@pytest.fixture(autouse=True)
def _restore_config() -> None:
    """Undo configuration changes made by a test."""

    layout = deepcopy(Config.layout)
    scalars = {
        key: getattr(Config, key)
        for key in (
            "tick_interval_ms",
            "tree_tick_interval_ms",
            "run_seed",
            "library_file",
            "config_file",
            "log_level",
            "log_file",
        )
    }
    yield
    Config.layout = layout
    for key, value in scalars.items():
        setattr(Config, key, value)


@pytest.fixture
def small_tree() -> TreeModel:
    """Return the tree ``A(left=B(left=D, right=E), right=C)``."""

    tree = TreeModel.blank()
    for label in "ABCDE":
        tree.add_node(label, node_id=label, x=0.0, y=0.0)
    tree.connect("A", "B", "left")
    tree.connect("A", "C", "right")
    tree.connect("B", "D", "left")
    tree.connect("B", "E", "right")
    return tree
