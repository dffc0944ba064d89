"""Entry point wrapper for ``python -m morph_metrics``.

Execution is forwarded to :func:`morph_metrics.main` so ``python -m
morph_metrics`` and the installed ``morph-metrics`` console script behave
identically.

Example
-------
The following invocation builds a five-step path between two morphs::

    python -m morph_metrics path --v1 0,0 --v2 10,10 --steps 5 --cheat --seed 1
"""

from . import main

if __name__ == "__main__":
    main()
