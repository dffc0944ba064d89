"""Metric configuration objects and the ``NO_CONFIG`` sentinel.

Metrics accept an optional :class:`DistConfig` as their third argument. The
generators never look inside it; they only decide whether to forward it.
Two different "empty" values therefore exist:

``None``
    Use a default :class:`DistConfig` (absolute scaling).

``NO_CONFIG``
    Call the metric with two arguments only. Useful for plain callables that
    do not take a configuration at all.

Example
-------
>>> call_metric(lambda a, b: float(abs(a - b).sum()), [1, 2], [2, 4], NO_CONFIG)
3.0
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional, Union

__all__ = ["DistConfig", "NO_CONFIG", "NoConfig", "resolve_config", "call_metric"]

SCALES = ("absolute", "relative", "none")


class NoConfig(enum.Enum):
    """Marker type whose single member requests two-argument metric calls."""

    NO_CONFIG = "none"

    def __repr__(self) -> str:
        return "NO_CONFIG"


NO_CONFIG = NoConfig.NO_CONFIG


@dataclass(frozen=True)
class DistConfig:
    """Options recognised by metrics.

    ``scale`` selects how a metric normalises its result: ``"absolute"``
    (default), ``"relative"`` or ``"none"``.
    """

    scale: str = "absolute"

    def __post_init__(self) -> None:
        if self.scale not in SCALES:
            raise ValueError(
                f"Unknown scale {self.scale!r}; expected one of {', '.join(SCALES)}"
            )


ConfigArg = Union[None, DistConfig, NoConfig]


def resolve_config(config: ConfigArg) -> Union[DistConfig, NoConfig]:
    """Return ``config`` with ``None`` replaced by a default :class:`DistConfig`."""

    return DistConfig() if config is None else config


def call_metric(metric: Callable, v1, v2, config: ConfigArg = None) -> float:
    """Invoke ``metric`` with or without ``config`` depending on the sentinel."""

    if config is NO_CONFIG:
        return metric(v1, v2)
    return metric(v1, v2, resolve_config(config))
