"""Morphological metrics: search tools for generating morphs.

A *morph* is an ordered sequence of numbers describing a musical shape, such
as a pitch contour or a dynamics curve. Larry Polansky's *Morphological
Metrics* measures the distance between two morphs in several ways. This
package works in the other direction: given a metric and a distance
constraint it constructs new morphs that satisfy it.

A typical workflow is to choose a metric, then call
:func:`find_point_at_distance` to obtain a single variation of a morph,
:func:`set_at_distance` for a family of variations, or :func:`metric_path`
for a gradual transformation of one morph into another. Each of these turns
the constraint into an objective and minimises it with one of the hill
climbers in :mod:`morph_metrics.search`.

Underlying Algorithm
--------------------
The hill climbers perturb a candidate morph by a step size on each
coordinate, keep improving moves and shrink the step whenever no move helps.
The deterministic :func:`hill_climb` tries every coordinate in turn while
:func:`hill_climb_stochastic` samples random perturbations of all
coordinates at once. Searches stop on success (objective within
``epsilon`` of zero), when no progress is possible or when the iteration
budget runs out.

Algorithm Pseudocode
--------------------
The following outlines :func:`metric_path`::

    total = metric(v1, v2)
    path = [v1]
    for i in 1..steps:
        objective(x) = |total*i/steps - metric(v1, x)|
                       + |total - total*i/steps - metric(v2, x)|
                       + tightness * euclidean(x, interpolate(v1, v2, i/steps))
        path.append(search(objective, start=path[-1]))
    if cheat: path[-1] = v2

Searches may settle in a local minimum and never report it, so measure the
generated morphs before relying on them.

Features include:
- Deterministic and stochastic hill climbing with adaptive step sizes.
- Point, set and path generators for arbitrary metrics.
- Vector helpers for interpolation, upsampling and n-sphere sampling.
- Angles between morphs under any metric via the law of cosines.
- A read-only registry of metrics and search engines addressable by name.
- A command line interface with JSON settings persistence.
"""

__version__ = "0.1.0"

from .dist_config import NO_CONFIG, DistConfig, call_metric  # noqa: F401
from .vector_ops import (  # noqa: F401
    as_pair,
    as_vector,
    deg2rad,
    dot,
    has_duplicates,
    interpolate,
    interpolate_path,
    interpolate_steps,
    length,
    rad2deg,
    sphere_rand_euclidean,
    upsample,
    vector_for_desired_mean,
)
from .search import SearchOptions, hill_climb, hill_climb_stochastic  # noqa: F401
from .metrics import (  # noqa: F401
    METRICS,
    SEARCH_FUNCTIONS,
    dist,
    euclidean,
    get_metric,
    get_search_function,
)
from .generators import (  # noqa: F401
    ConstraintNotSatisfiedError,
    find_point_at_distance,
    metric_path,
    set_at_distance,
)
from .angles import angle, angle_euclidean  # noqa: F401


def main() -> None:
    """Run the command line interface."""

    from .cli import main as cli_main

    cli_main()
