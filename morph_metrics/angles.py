"""Angles between morphs in Euclidean and metric space.

``angle_euclidean`` is the usual angle between two rays. ``angle`` swaps
Euclidean length for an arbitrary metric and recovers an angle through the
law of cosines. The latter only makes sense for functions that satisfy the
triangle inequality; for anything else the result is not meaningful.

Example
-------
>>> round(angle_euclidean([1, 0], [0, 1]), 6)
1.570796
>>> round(angle([1, 0], [0, 1]), 6)
1.570796
"""

from __future__ import annotations

import math
from typing import Callable, Union

import numpy as np

from .dist_config import ConfigArg, call_metric
from .metrics import euclidean, resolve_metric
from .vector_ops import as_pair, as_vector, dot, length

__all__ = ["angle_euclidean", "angle"]


def _clamped_acos(cosine: float) -> float:
    # Rounding can push the cosine just outside [-1, 1].
    return math.acos(max(-1.0, min(1.0, cosine)))


def angle_euclidean(v1, v2, v3=None) -> float:
    """Return the angle in radians at ``v3`` between rays to ``v1`` and ``v2``.

    ``v3`` defaults to the origin. A zero-length ray has no direction, so the
    angle is reported as ``0.0``.
    """

    a, b = as_pair(v1, v2)
    if v3 is not None:
        vertex = as_vector(v3)
        a = a - vertex
        b = b - vertex
    norms = length(a) * length(b)
    if norms == 0.0:
        return 0.0
    return _clamped_acos(dot(a, b) / norms)


def angle(
    v1,
    v2,
    v3=None,
    dist_func: Union[str, Callable[..., float]] = euclidean,
    config: ConfigArg = None,
) -> float:
    """Return the angle at ``v3`` between ``v1`` and ``v2`` under a metric.

    The three pairwise distances ``a = d(v1, v3)``, ``b = d(v2, v3)`` and
    ``c = d(v1, v2)`` are plugged into the law of cosines
    ``cos C = (a**2 + b**2 - c**2) / (2ab)``.

    Parameters
    ----------
    v1, v2:
        Endpoints of the two rays.
    v3:
        Vertex; the origin when omitted.
    dist_func:
        Metric callable or registered metric name.
    config:
        Metric configuration, forwarded as in the generators.

    Returns
    -------
    float
        Angle in radians, or ``0.0`` when either endpoint equals the vertex.

    Raises
    ------
    ValueError
        If the metric reports a zero distance between distinct morphs, which
        leaves the angle undefined.
    """

    a_vec, b_vec = as_pair(v1, v2)
    vertex = np.zeros_like(a_vec) if v3 is None else as_vector(v3)
    if np.array_equal(a_vec, vertex) or np.array_equal(b_vec, vertex):
        return 0.0

    metric = resolve_metric(dist_func)
    a = call_metric(metric, a_vec, vertex, config)
    b = call_metric(metric, b_vec, vertex, config)
    c = call_metric(metric, a_vec, b_vec, config)
    if a == 0 or b == 0:
        raise ValueError("Metric returned zero distance between distinct morphs")
    cos_c = (a**2 + b**2 - c**2) / (2 * a * b)
    return _clamped_acos(cos_c)
