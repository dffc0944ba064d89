"""Simple version check for the package.

Verifies that the ``__version__`` attribute matches the expected release
string."""

import sys
import importlib
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

morph_metrics = importlib.import_module("morph_metrics")


def test_version_matches():
    """Ensure ``morph_metrics.__version__`` exposes the release version."""
    assert morph_metrics.__version__ == "0.1.0"


def test_public_api_exports():
    """The generators and engines are importable from the package root."""
    for name in (
        "find_point_at_distance",
        "set_at_distance",
        "metric_path",
        "hill_climb",
        "hill_climb_stochastic",
        "angle",
        "upsample",
        "NO_CONFIG",
    ):
        assert hasattr(morph_metrics, name)
