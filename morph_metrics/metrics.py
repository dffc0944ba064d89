"""Reference metric and the name registry for metrics and search engines.

Metrics and search engines are ordinary functions. The registries below map
their names to the function objects so command line tools and settings files
can refer to them by name. Both mappings are built once when the module is
imported and exposed as read-only views.

Example
-------
>>> get_metric("euclidean")([0, 0], [3, 4])
5.0
>>> dist("euclidean", [0, 0], [3, 4])
5.0
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Callable, Mapping, Union

import numpy as np

from .dist_config import ConfigArg, call_metric
from .search import hill_climb, hill_climb_stochastic
from .vector_ops import as_pair

__all__ = [
    "euclidean",
    "METRICS",
    "SEARCH_FUNCTIONS",
    "get_metric",
    "get_search_function",
    "resolve_metric",
    "resolve_search_function",
    "dist",
]


def euclidean(v1, v2, config=None) -> float:
    """Euclidean distance between ``v1`` and ``v2``.

    ``config`` is accepted for signature compatibility with the other metrics
    and is ignored.
    """

    a, b = as_pair(v1, v2)
    return math.sqrt(float(np.sum((a - b) ** 2)))


METRICS: Mapping[str, Callable[..., float]] = MappingProxyType({"euclidean": euclidean})

SEARCH_FUNCTIONS: Mapping[str, Callable] = MappingProxyType(
    {
        "hill_climb": hill_climb,
        "hill_climb_stochastic": hill_climb_stochastic,
    }
)


def _lookup(table: Mapping[str, Callable], name: str, kind: str) -> Callable:
    try:
        return table[name]
    except KeyError:
        known = ", ".join(sorted(table))
        raise KeyError(f"Unknown {kind} {name!r}; known: {known}") from None


def get_metric(name: str) -> Callable[..., float]:
    """Return the metric registered as ``name``."""

    return _lookup(METRICS, name, "metric")


def get_search_function(name: str) -> Callable:
    """Return the search engine registered as ``name``."""

    return _lookup(SEARCH_FUNCTIONS, name, "search function")


def resolve_metric(metric: Union[str, Callable[..., float]]) -> Callable[..., float]:
    """Accept either a registered metric name or a metric callable."""

    if isinstance(metric, str):
        return get_metric(metric)
    if not callable(metric):
        raise TypeError("metric must be a callable or a registered metric name")
    return metric


def resolve_search_function(search_func: Union[str, Callable]) -> Callable:
    """Accept either a registered engine name or an engine callable."""

    if isinstance(search_func, str):
        return get_search_function(search_func)
    if not callable(search_func):
        raise TypeError("search_func must be a callable or a registered engine name")
    return search_func


def dist(name: str, v1, v2, config: ConfigArg = None) -> float:
    """Measure ``v1`` to ``v2`` with the metric registered as ``name``."""

    return call_metric(get_metric(name), v1, v2, config)
