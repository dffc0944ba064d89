"""Local search engines used to construct morphs.

Two interchangeable hill climbers minimise an arbitrary scalar objective
(``climb_func``) over the coordinates of a vector:

``hill_climb``
    Deterministic coordinate descent. Each dimension tries ``-step``, no
    move and ``+step`` in that order and keeps the best; a dimension whose
    best option is "stay" halves its own step size.

``hill_climb_stochastic``
    Draws ``5 * dimensions`` random candidates per iteration, each
    perturbing every coordinate by ``-step``, ``0`` or ``+step`` with a
    single shared step size. The best candidate is kept only when it
    strictly improves the objective.

Both engines take a :class:`SearchOptions` bundle and return either the final
point or, with ``return_full_path``, the list of visited points. Neither
reports whether the objective reached ``epsilon``; callers must check the
result themselves since the climb may settle in a local minimum.

Example
-------
>>> opts = SearchOptions(climb_func=lambda x: float(((x - 3) ** 2).sum()),
...                      start_vector=[0, 0])
>>> hill_climb(opts).tolist()
[3.0, 3.0]

Design Notes
------------
- Objective values that are NaN or infinite rank below every finite value so
  a misbehaving objective cannot break comparisons or keep a search alive.
- The iteration budget is a hard limit; stall detection only ends a search
  earlier.
- Randomness is drawn from ``SearchOptions.rng`` (a seed or
  :class:`numpy.random.Generator`) so stochastic runs are reproducible.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Union

import numpy as np

from .vector_ops import as_vector, resolve_rng

__all__ = ["SearchOptions", "hill_climb", "hill_climb_stochastic"]

logger = logging.getLogger(__name__)

# Perturbation multipliers in evaluation order. With strict ``<`` comparison
# the earliest of equally scored candidates wins.
_CANDIDATES = (-1, 0, 1)

# Number of random candidates drawn per dimension and iteration by the
# stochastic engine.
_SAMPLES_PER_DIMENSION = 5

SearchResult = Union[np.ndarray, List[np.ndarray]]


@dataclass(frozen=True)
class SearchOptions:
    """Parameters shared by both hill climbing engines.

    ``climb_func`` and ``start_vector`` may be left unset when the bundle is
    handed to a generator, which binds its own objective through
    :meth:`with_objective`. Everything else is validated here so invalid
    values fail before any search starts.
    """

    climb_func: Optional[Callable[[np.ndarray], float]] = None
    start_vector: Optional[object] = None
    epsilon: float = 0.01
    min_step_size: float = 0.1
    start_step_size: float = 1.0
    max_iterations: int = 1000
    return_full_path: bool = False
    step_size_subtract: Optional[float] = None
    rng: Union[None, int, np.random.Generator] = None

    def __post_init__(self) -> None:
        if self.epsilon <= 0:
            raise ValueError("epsilon must be positive")
        if self.min_step_size <= 0:
            raise ValueError("min_step_size must be positive")
        if self.start_step_size < self.min_step_size:
            raise ValueError("start_step_size must be >= min_step_size")
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative")
        if self.step_size_subtract is not None and self.step_size_subtract <= 0:
            raise ValueError("step_size_subtract must be positive when given")

    def with_objective(
        self, climb_func: Callable[[np.ndarray], float], start_vector
    ) -> "SearchOptions":
        """Return a copy bound to ``climb_func`` and ``start_vector``."""

        return replace(self, climb_func=climb_func, start_vector=start_vector)


def _score(climb_func: Callable[[np.ndarray], float], point: np.ndarray) -> float:
    """Evaluate ``climb_func`` mapping non-finite results to ``inf``."""

    value = float(climb_func(point.copy()))
    if math.isnan(value) or math.isinf(value):
        return math.inf
    return value


def _prepare(options: SearchOptions) -> tuple[Callable, np.ndarray]:
    if options.climb_func is None:
        raise ValueError("SearchOptions.climb_func is required to run a search")
    if options.start_vector is None:
        raise ValueError("SearchOptions.start_vector is required to run a search")
    return options.climb_func, as_vector(options.start_vector)


def _converged(score: float, epsilon: float) -> bool:
    return -epsilon < score < epsilon


def hill_climb(options: SearchOptions) -> SearchResult:
    """Minimise ``options.climb_func`` by per-dimension coordinate descent.

    Each iteration visits every dimension in turn and scores the current
    point moved by ``-step``, ``0`` and ``+step`` along that axis, keeping
    the lowest score (earliest candidate on ties). When staying put wins and
    the dimension's step size is above ``min_step_size`` the step is halved,
    clamped to the minimum, instead of moving. The search ends when the
    objective falls within ``epsilon`` of zero, when an iteration leaves the
    point where it started, or after ``max_iterations``. A halved step size
    alone does not keep the climb going.

    Parameters
    ----------
    options:
        Search configuration. ``climb_func`` and ``start_vector`` are
        required.

    Returns
    -------
    numpy.ndarray or list of numpy.ndarray
        The final point, or every point after each iteration (starting with
        the start vector) when ``return_full_path`` is set.
    """

    climb_func, start = _prepare(options)
    dimensions = start.size
    step_size = np.full(dimensions, float(options.start_step_size))
    current = start.copy()
    path = [start.copy()]

    for iteration in range(options.max_iterations):
        previous = current.copy()
        for i in range(dimensions):
            best_candidate = 0
            best_score: Optional[float] = None
            for candidate in _CANDIDATES:
                trial = current.copy()
                trial[i] += step_size[i] * candidate
                test_score = _score(climb_func, trial)
                if best_score is None or test_score < best_score:
                    best_score = test_score
                    best_candidate = candidate
            if best_candidate == 0 and step_size[i] > options.min_step_size:
                step_size[i] = max(step_size[i] * 0.5, options.min_step_size)
            else:
                current[i] += step_size[i] * best_candidate

        path.append(current.copy())
        score = _score(climb_func, current)
        if _converged(score, options.epsilon):
            logger.debug("hill_climb converged at iteration %d (score %.6g)", iteration, score)
            break
        if np.array_equal(current, previous):
            logger.debug("hill_climb stalled at iteration %d (score %.6g)", iteration, score)
            break

    if options.return_full_path:
        return path
    return current


def hill_climb_stochastic(options: SearchOptions) -> SearchResult:
    """Minimise ``options.climb_func`` with randomised multi-candidate steps.

    Every iteration draws ``5 * dimensions`` candidate points around the
    current one. Each coordinate of a candidate is offset by ``-1``, ``0`` or
    ``+1`` times the current step size, chosen at random from
    ``options.rng``. The lowest scoring candidate replaces the current point
    only if it is strictly better. When nothing improves, the step size is
    reduced by ``step_size_subtract`` (or halved when unset) down to
    ``min_step_size``; once it is at the minimum the climb gives up.

    Returns
    -------
    numpy.ndarray or list of numpy.ndarray
        The final point, or the start vector followed by every accepted
        improvement when ``return_full_path`` is set.
    """

    climb_func, start = _prepare(options)
    rng = resolve_rng(options.rng)
    dimensions = start.size
    sample_count = dimensions * _SAMPLES_PER_DIMENSION
    step_size = float(options.start_step_size)
    current = start.copy()
    path = [start.copy()]

    for iteration in range(options.max_iterations):
        current_score = _score(climb_func, current)
        moved = False
        if sample_count:
            deviations = rng.choice(_CANDIDATES, size=(sample_count, dimensions))
            candidates = current + np.asarray(deviations, dtype=float) * step_size
            scores = [_score(climb_func, point) for point in candidates]
            winner = min(range(sample_count), key=scores.__getitem__)
            if scores[winner] < current_score:
                current = candidates[winner].copy()
                current_score = scores[winner]
                path.append(current.copy())
                moved = True

        if _converged(current_score, options.epsilon):
            logger.debug(
                "hill_climb_stochastic converged at iteration %d (score %.6g)",
                iteration,
                current_score,
            )
            break
        if not moved:
            if step_size > options.min_step_size:
                if options.step_size_subtract is not None:
                    step_size -= options.step_size_subtract
                else:
                    step_size *= 0.5
                step_size = max(step_size, options.min_step_size)
                logger.debug("hill_climb_stochastic step size lowered to %.6g", step_size)
            else:
                logger.debug(
                    "hill_climb_stochastic stalled at iteration %d (score %.6g)",
                    iteration,
                    current_score,
                )
                break

    if options.return_full_path:
        return path
    return current
