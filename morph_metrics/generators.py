"""Generate morphs that satisfy distance constraints.

The functions here turn a distance requirement into an objective and hand it
to one of the engines in :mod:`morph_metrics.search`:

``find_point_at_distance``
    A single morph roughly ``d`` away from ``v1`` under a given metric.

``set_at_distance``
    Several distinct morphs at that distance. They lie on the metric's
    "sphere" around ``v1`` but are not uniformly distributed on it.

``metric_path``
    A chain of morphs leading from ``v1`` to ``v2`` whose distances to both
    endpoints follow a linear schedule, kept close to the straight
    Euclidean line by ``euclidean_tightness``.

None of these report how accurately the constraint was met. Search results
may land in a local minimum, so measure the returned morphs before relying
on them.

Example
-------
>>> p = find_point_at_distance([1, 2, 3, 4], 0.5, "euclidean",
...                            search_opts=SearchOptions(rng=1))
>>> round(euclidean([1, 2, 3, 4], p), 1)
0.5

Design Notes
------------
- Results whose coordinates repeat are rejected and the whole search is run
  again, at most ``max_retries`` times. Exhausting the retries raises
  :class:`ConstraintNotSatisfiedError`.
- Caller supplied :class:`SearchOptions` are never mutated; each search gets
  a copy bound to its own objective.
- Low ``euclidean_tightness`` favours metric space and may leave the last
  path element short of ``v2``; ``cheat`` replaces it with ``v2``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Union

import numpy as np

from .dist_config import ConfigArg, call_metric, resolve_config
from .metrics import euclidean, resolve_metric, resolve_search_function
from .search import SearchOptions, hill_climb_stochastic
from .vector_ops import as_vector, has_duplicates, interpolate, resolve_rng

__all__ = [
    "ConstraintNotSatisfiedError",
    "find_point_at_distance",
    "set_at_distance",
    "metric_path",
]

logger = logging.getLogger(__name__)

MetricArg = Union[str, Callable[..., float]]
SearchArg = Union[str, Callable]


class ConstraintNotSatisfiedError(RuntimeError):
    """Raised when repeated searches only produce rejected morphs."""


def _search_distinct(
    search_func: Callable,
    options: SearchOptions,
    *,
    allow_duplicates: bool,
    max_retries: int,
) -> np.ndarray:
    """Run ``search_func`` until it returns a morph without repeated values."""

    if options.return_full_path:
        # The generators need a single point from each search.
        options = replace(options, return_full_path=False)

    attempts = 0
    while True:
        point = as_vector(search_func(options))
        if allow_duplicates or not has_duplicates(point):
            return point
        attempts += 1
        if attempts > max_retries:
            logger.warning(
                "Gave up after %d searches returning repeated coordinates", attempts
            )
            raise ConstraintNotSatisfiedError(
                f"No morph without repeated coordinates found in {attempts} searches"
            )
        logger.debug("Rejected %s (repeated coordinates); searching again", point.tolist())


def _validate_retries(max_retries: int) -> None:
    if max_retries < 0:
        raise ValueError("max_retries must be non-negative")


def _shared_options(search_opts: Optional[SearchOptions]) -> SearchOptions:
    """Return options whose ``rng`` is a generator reused by every search.

    A bare seed would otherwise restart the same random sequence on each
    retry, making repeated searches identical.
    """

    options = search_opts or SearchOptions()
    return replace(options, rng=resolve_rng(options.rng))


def find_point_at_distance(
    v1,
    d: float,
    dist_func: MetricArg,
    *,
    config: ConfigArg = None,
    search_func: SearchArg = hill_climb_stochastic,
    search_opts: Optional[SearchOptions] = None,
    allow_duplicates: bool = False,
    max_retries: int = 100,
) -> np.ndarray:
    """Find a morph approximately ``d`` away from ``v1``.

    Parameters
    ----------
    v1:
        Reference morph. The search starts here.
    d:
        Target distance. Must be non-negative.
    dist_func:
        Metric callable or the name of a registered metric.
    config:
        Metric configuration. ``None`` uses a default :class:`DistConfig`;
        :data:`NO_CONFIG` calls the metric with two arguments.
    search_func:
        Search engine callable or registered engine name.
    search_opts:
        Engine parameters. ``climb_func`` and ``start_vector`` are replaced.
    allow_duplicates:
        Accept morphs whose coordinates repeat.
    max_retries:
        How many rejected searches are tolerated before giving up.

    Returns
    -------
    numpy.ndarray
        The best morph found. Its true distance is not checked.

    Raises
    ------
    ValueError
        If ``d`` or ``max_retries`` is negative.
    ConstraintNotSatisfiedError
        If every search produced repeated coordinates.
    """

    if d < 0:
        raise ValueError("d must be non-negative")
    _validate_retries(max_retries)
    metric = resolve_metric(dist_func)
    search = resolve_search_function(search_func)
    origin = as_vector(v1)
    cfg = resolve_config(config)

    def climb_func(test_point: np.ndarray) -> float:
        return abs(call_metric(metric, origin, test_point, cfg) - d)

    options = _shared_options(search_opts).with_objective(climb_func, origin)
    point = _search_distinct(
        search, options, allow_duplicates=allow_duplicates, max_retries=max_retries
    )
    residual = climb_func(point)
    if not residual < options.epsilon:
        logger.debug("Point search ended %.6g away from the target distance", residual)
    return point


def set_at_distance(
    v1,
    d: float,
    dist_func: MetricArg,
    *,
    set_size: int = 10,
    max_failures: int = 1000,
    **point_kwargs,
) -> List[np.ndarray]:
    """Collect up to ``set_size`` distinct morphs about ``d`` away from ``v1``.

    Each candidate comes from :func:`find_point_at_distance`, which receives
    ``point_kwargs`` unchanged. A candidate equal to a morph already in the
    set, or a point search that exhausts its retries, counts as a failure.
    Collection stops at ``set_size`` members or ``max_failures`` failures,
    so the returned list may be shorter than requested.
    """

    if set_size < 0:
        raise ValueError("set_size must be non-negative")
    if max_failures < 0:
        raise ValueError("max_failures must be non-negative")

    point_kwargs["search_opts"] = _shared_options(point_kwargs.get("search_opts"))
    members: List[np.ndarray] = []
    failures = 0
    while len(members) < set_size and failures < max_failures:
        try:
            candidate = find_point_at_distance(v1, d, dist_func, **point_kwargs)
        except ConstraintNotSatisfiedError:
            failures += 1
            continue
        if any(np.array_equal(candidate, member) for member in members):
            failures += 1
        else:
            members.append(candidate)

    if len(members) < set_size:
        logger.info(
            "set_at_distance stopped after %d failures with %d of %d morphs",
            failures,
            len(members),
            set_size,
        )
    return members


def metric_path(
    v1,
    v2,
    metric: MetricArg,
    *,
    config: ConfigArg = None,
    steps: int = 10,
    cheat: bool = False,
    euclidean_tightness: float = 1.0,
    allow_duplicates: bool = True,
    search_func: SearchArg = hill_climb_stochastic,
    search_opts: Optional[SearchOptions] = None,
    max_retries: int = 100,
    print_stats: bool = False,
) -> List[np.ndarray]:
    """Build a path of morphs from ``v1`` to ``v2`` through metric space.

    For step ``i`` of ``steps`` the objective is::

        |inc * i - metric(v1, x)|
        + |total - inc * i - metric(v2, x)|
        + euclidean_tightness * euclidean(x, interpolate(v1, v2, i / steps))

    where ``total = metric(v1, v2)`` and ``inc = total / steps``. Each search
    starts from the previously accepted morph. Results can differ a lot with
    the metric's scaling; typical tightness values lie between 0 and 1, and
    higher values pull the path toward the straight Euclidean line.

    Parameters
    ----------
    steps:
        Number of morphs generated after ``v1``. Must be positive.
    cheat:
        Replace the final morph with ``v2`` exactly.
    euclidean_tightness:
        Weight of the Euclidean proximity term. Must be non-negative.
    allow_duplicates:
        Accept morphs with repeated coordinates. Defaults to ``True`` since
        paths between morphs with equal coordinates pass through such points.
    print_stats:
        Log the targets and achieved distances of every step at INFO level.

    Returns
    -------
    List[numpy.ndarray]
        ``steps + 1`` morphs beginning with ``v1``.
    """

    if steps <= 0:
        raise ValueError("steps must be a positive integer")
    if euclidean_tightness < 0:
        raise ValueError("euclidean_tightness must be non-negative")
    _validate_retries(max_retries)

    dist_func = resolve_metric(metric)
    search = resolve_search_function(search_func)
    start, end = as_vector(v1), as_vector(v2)
    if start.shape != end.shape:
        raise ValueError(f"Vector dimension mismatch: {start.size} vs {end.size}")
    cfg = resolve_config(config)
    base_options = _shared_options(search_opts)

    total_distance = float(call_metric(dist_func, start, end, cfg))
    inc = total_distance / steps
    logger.debug("metric_path total_distance: %.6g inc: %.6g", total_distance, inc)

    path = [start]
    for i in range(1, steps + 1):
        target_v1 = inc * i
        target_v2 = total_distance - inc * i
        anchor = interpolate(start, end, i / steps)

        def climb_func(
            test_point: np.ndarray,
            target_v1: float = target_v1,
            target_v2: float = target_v2,
            anchor: np.ndarray = anchor,
        ) -> float:
            dist_v1 = call_metric(dist_func, start, test_point, cfg)
            dist_v2 = call_metric(dist_func, end, test_point, cfg)
            return (
                abs(target_v1 - dist_v1)
                + abs(target_v2 - dist_v2)
                + euclidean_tightness * euclidean(test_point, anchor)
            )

        options = base_options.with_objective(climb_func, path[-1])
        newpoint = _search_distinct(
            search, options, allow_duplicates=allow_duplicates, max_retries=max_retries
        )
        path.append(newpoint)

        if print_stats:
            dist_v1 = call_metric(dist_func, start, newpoint, cfg)
            dist_v2 = call_metric(dist_func, end, newpoint, cfg)
            logger.info(
                "step %d: point %s target_v1 %.6g target_v2 %.6g d_v1 %.6g d_v2 %.6g "
                "off_v1 %.6g off_v2 %.6g off_euc %.6g eval %.6g",
                i,
                newpoint.tolist(),
                target_v1,
                target_v2,
                dist_v1,
                dist_v2,
                abs(target_v1 - dist_v1),
                abs(target_v2 - dist_v2),
                euclidean_tightness * euclidean(newpoint, anchor),
                climb_func(newpoint),
            )

    if cheat:
        path[-1] = end.copy()
    return path
