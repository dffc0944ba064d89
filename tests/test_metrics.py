"""Tests for the reference metric, registries and metric configuration."""

import importlib
import sys
from pathlib import Path

import pytest

# Ensure project root on path for reliable imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

metrics = importlib.import_module("morph_metrics.metrics")
search = importlib.import_module("morph_metrics.search")
dist_config = importlib.import_module("morph_metrics.dist_config")


def test_euclidean_distance():
    """The reference metric is the ordinary straight-line distance."""

    assert metrics.euclidean([0, 0], [3, 4]) == 5.0
    assert metrics.euclidean([1, 2, 3], [1, 2, 3]) == 0.0


def test_euclidean_ignores_config():
    """Scaling options do not change the Euclidean result."""

    cfg = dist_config.DistConfig(scale="relative")
    assert metrics.euclidean([0, 0], [3, 4], cfg) == 5.0


def test_euclidean_dimension_mismatch():
    """Vectors of different lengths cannot be compared."""

    with pytest.raises(ValueError):
        metrics.euclidean([1, 2], [1, 2, 3])


def test_registry_lookup():
    """Registered names resolve to the module level functions."""

    assert metrics.get_metric("euclidean") is metrics.euclidean
    assert metrics.get_search_function("hill_climb") is search.hill_climb
    assert metrics.get_search_function("hill_climb_stochastic") is search.hill_climb_stochastic
    assert metrics.dist("euclidean", [0, 0], [6, 8]) == 10.0


def test_registry_unknown_name_lists_known():
    """Unknown names raise ``KeyError`` mentioning the available entries."""

    with pytest.raises(KeyError, match="euclidean"):
        metrics.get_metric("ulm")
    with pytest.raises(KeyError, match="hill_climb"):
        metrics.get_search_function("annealing")


def test_registries_are_read_only():
    """Registries cannot be modified after import."""

    with pytest.raises(TypeError):
        metrics.METRICS["custom"] = lambda a, b, c=None: 0.0
    with pytest.raises(TypeError):
        metrics.SEARCH_FUNCTIONS["custom"] = search.hill_climb
    assert "custom" not in metrics.METRICS


def test_resolve_accepts_callables_and_rejects_others():
    """Callables pass through; other objects are a type error."""

    def my_metric(a, b, config=None):
        return 0.0

    assert metrics.resolve_metric(my_metric) is my_metric
    assert metrics.resolve_search_function("hill_climb") is search.hill_climb
    with pytest.raises(TypeError):
        metrics.resolve_metric(42)
    with pytest.raises(TypeError):
        metrics.resolve_search_function(None)


def test_dist_config_validates_scale():
    """Only the known scaling modes are accepted."""

    assert dist_config.DistConfig().scale == "absolute"
    assert dist_config.DistConfig("none").scale == "none"
    with pytest.raises(ValueError):
        dist_config.DistConfig(scale="logarithmic")


def test_call_metric_sentinel_handling():
    """``None`` forwards a default config; ``NO_CONFIG`` forwards nothing."""

    received = []

    def metric(a, b, *rest):
        received.append(rest)
        return 1.0

    dist_config.call_metric(metric, [0], [1])
    dist_config.call_metric(metric, [0], [1], dist_config.NO_CONFIG)
    assert received == [(dist_config.DistConfig(),), ()]
    assert repr(dist_config.NO_CONFIG) == "NO_CONFIG"
