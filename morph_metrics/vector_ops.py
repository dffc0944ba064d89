"""Vector algebra primitives shared by the search and generation code.

Morphs are treated as one-dimensional ``numpy`` arrays of floats. The helpers
below cover the small amount of linear algebra the generators rely on: dot
products, Euclidean length, linear interpolation between two morphs,
upsampling a morph to a longer length and drawing random points on an
n-sphere.

Every function accepts plain lists or tuples as well as arrays and always
returns freshly allocated arrays so callers never see their inputs mutated.

Example
-------
>>> interpolate_steps([0, 0], [10, 10], 3)
[array([0., 0.]), array([5., 5.]), array([10., 10.])]
>>> upsample([0, 10], 4).tolist()
[0.0, 3.333333333333333, 6.666666666666666, 10.0]

Design Notes
------------
- ``upsample`` distributes inserted samples with :class:`fractions.Fraction`
  so the allocation per gap never drifts, however many samples are added.
- ``interpolate_path`` samples a half-open range:
  ``percent`` is accumulated by repeated addition and the loop stops once it
  reaches ``1.0``. Depending on rounding the final endpoint may or may not be
  present; use :func:`interpolate_steps` when both endpoints are required.
- Random draws come from an injected :class:`numpy.random.Generator` so
  results can be reproduced by passing a seed.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import List, Sequence, Union

import numpy as np

__all__ = [
    "as_vector",
    "as_pair",
    "dot",
    "length",
    "deg2rad",
    "rad2deg",
    "interpolate",
    "interpolate_path",
    "interpolate_steps",
    "upsample",
    "sphere_rand_euclidean",
    "vector_for_desired_mean",
    "has_duplicates",
    "resolve_rng",
]

VectorLike = Union[Sequence[float], np.ndarray]
RandomSource = Union[None, int, np.random.Generator]


def as_vector(v: VectorLike) -> np.ndarray:
    """Return a one-dimensional float copy of ``v``."""

    arr = np.array(v, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"Vectors must be one-dimensional, got shape {arr.shape}")
    return arr


def as_pair(v1: VectorLike, v2: VectorLike) -> tuple[np.ndarray, np.ndarray]:
    """Convert both operands with :func:`as_vector` and check their shapes agree."""

    a = as_vector(v1)
    b = as_vector(v2)
    if a.shape != b.shape:
        raise ValueError(f"Vector dimension mismatch: {a.size} vs {b.size}")
    return a, b


def dot(v1: VectorLike, v2: VectorLike) -> float:
    """Return the dot product of ``v1`` and ``v2``."""

    a, b = as_pair(v1, v2)
    return float(np.sum(a * b))


def length(v: VectorLike) -> float:
    """Return the Euclidean norm (magnitude) of ``v``."""

    return math.sqrt(dot(v, v))


def deg2rad(d: float) -> float:
    """Convert degrees to radians."""

    return (d * math.pi) / 180


def rad2deg(r: float) -> float:
    """Convert radians to degrees."""

    return (180 * float(r)) / math.pi


def interpolate(v1: VectorLike, v2: VectorLike, percent: float = 0.5) -> np.ndarray:
    """Linearly interpolate between ``v1`` and ``v2``.

    ``percent`` is not clamped, so values outside ``[0, 1]`` extrapolate
    along the line through both morphs.
    """

    a, b = as_pair(v1, v2)
    return (b - a) * float(percent) + a


def interpolate_path(v1: VectorLike, v2: VectorLike, interval: float) -> List[np.ndarray]:
    """Sample the segment from ``v1`` to ``v2`` every ``interval``.

    Parameters
    ----------
    v1, v2:
        Endpoints of the segment.
    interval:
        Sampling interval expressed as a fraction of the segment. Must lie
        strictly between ``0`` and ``1``.

    Returns
    -------
    List[numpy.ndarray]
        Samples at ``percent = 0, interval, 2 * interval, ...`` while
        ``percent < 1.0``. ``percent`` accumulates by addition, so whether a
        sample lands on ``v2`` depends on floating-point rounding; with
        ``interval = 0.25`` the last sample sits at ``0.75``.

    Raises
    ------
    ValueError
        If ``interval`` is outside the open interval ``(0, 1)``.
    """

    if not 0.0 < interval < 1.0:
        raise ValueError("Interval must be > 0 and < 1.")
    a, b = as_pair(v1, v2)
    percent = 0.0
    path: List[np.ndarray] = []
    while percent < 1.0:
        path.append(interpolate(a, b, percent))
        percent += interval
    return path


def interpolate_steps(v1: VectorLike, v2: VectorLike, num_steps: int) -> List[np.ndarray]:
    """Return ``num_steps`` evenly spaced samples from ``v1`` to ``v2``.

    Both endpoints are always included unchanged: the first element equals
    ``v1`` and the last equals ``v2`` exactly.

    Raises
    ------
    ValueError
        If ``num_steps`` is lower than two, since a single sample cannot hold
        both endpoints.
    """

    if num_steps < 2:
        raise ValueError("Number of steps must be > 1")
    a, b = as_pair(v1, v2)
    if num_steps == 2:
        return [a, b]

    interval = 1.0 / (num_steps - 1)
    path = [a]
    for step in range(1, num_steps - 1):
        path.append(interpolate(a, b, step * interval))
    path.append(b)
    return path


def upsample(v: VectorLike, new_size: int) -> np.ndarray:
    """Lengthen ``v`` to ``new_size`` members by linear interpolation.

    The ``new_size - len(v)`` extra samples are spread across the
    ``len(v) - 1`` gaps between neighbouring members as evenly as possible.
    A running :class:`~fractions.Fraction` decides how many samples each gap
    receives; every time the running total crosses an integer boundary the
    gap is filled via :func:`interpolate_steps`. The original members keep
    their values and the final member is appended unchanged.

    Raises
    ------
    ValueError
        If ``new_size`` is smaller than ``len(v)`` or ``v`` has fewer than
        two members while growth is requested.
    """

    arr = as_vector(v)
    if new_size < arr.size:
        raise ValueError("Upsample can't downsample")
    if new_size == arr.size:
        return arr
    if arr.size < 2:
        raise ValueError("Upsample needs at least two members to interpolate between")

    samples_to_insert = new_size - arr.size
    gaps = arr.size - 1
    per_gap = Fraction(samples_to_insert, gaps)

    count = Fraction(0)
    prev_count = Fraction(0)
    pieces: List[np.ndarray] = []
    for i in range(gaps):
        count += per_gap
        crossed = math.floor(count) - math.floor(prev_count)
        if crossed >= 1:
            # Drop the right endpoint; it is emitted by the next gap.
            segment = interpolate_steps(arr[i : i + 1], arr[i + 1 : i + 2], 2 + crossed)
            pieces.extend(segment[:-1])
        else:
            pieces.append(arr[i : i + 1])
        prev_count = count
    pieces.append(arr[-1:])
    return np.concatenate(pieces)


def resolve_rng(rng: RandomSource):
    """Return a random generator for ``rng``.

    ``None`` and integer seeds produce a new :class:`numpy.random.Generator`;
    any other object is assumed to already provide the generator methods and
    is returned as is.
    """

    if rng is None or isinstance(
        rng, (int, np.integer, np.random.SeedSequence, np.random.BitGenerator)
    ):
        return np.random.default_rng(rng)
    return rng


def sphere_rand_euclidean(n: int, r: float = 1.0, rng: RandomSource = None) -> np.ndarray:
    """Return a uniformly random point on the ``n``-sphere of radius ``r``.

    Normal deviates are drawn for every coordinate and the resulting vector
    is rescaled to length ``r`` (Marsaglia's hypersphere point picking).
    ``rng`` may be a seed or a :class:`numpy.random.Generator`.
    """

    if n <= 0:
        raise ValueError("n must be a positive integer")
    gen = resolve_rng(rng)
    deviates = gen.standard_normal(n)
    norm = math.sqrt(float(np.sum(deviates**2)))
    while norm == 0.0:
        deviates = gen.standard_normal(n)
        norm = math.sqrt(float(np.sum(deviates**2)))
    return (r / norm) * deviates


def vector_for_desired_mean(current_mean: float, count: int, desired_mean: float) -> float:
    """Return the value that moves a mean to ``desired_mean`` when appended.

    ``current_mean`` is the mean of ``count`` existing values; appending the
    returned value yields ``count + 1`` values averaging ``desired_mean``.
    """

    if count < 0:
        raise ValueError("count must be non-negative")
    total = current_mean * count
    desired_total = desired_mean * (count + 1)
    return desired_total - total


def has_duplicates(v: VectorLike) -> bool:
    """Return ``True`` when any coordinate of ``v`` appears more than once."""

    arr = as_vector(v)
    return np.unique(arr).size != arr.size
