"""Persistent default settings for the search engines.

Search defaults can be stored in a small JSON file so repeated command line
runs share the same epsilon, step sizes and seed. The file lives in the
user's home directory unless ``MORPH_METRICS_SETTINGS_FILE`` points
elsewhere.

Example
-------
>>> save_settings({"epsilon": 0.05, "seed": 3}, Path("/tmp/mm.json"))
>>> search_options_from_settings(load_settings(Path("/tmp/mm.json"))).epsilon
0.05
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping

from .search import SearchOptions

__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "SEARCH_SETTING_KEYS",
    "load_settings",
    "save_settings",
    "search_options_from_settings",
]

logger = logging.getLogger(__name__)

env_path = os.environ.get("MORPH_METRICS_SETTINGS_FILE")
if env_path:
    DEFAULT_SETTINGS_FILE = Path(env_path).expanduser()
else:
    DEFAULT_SETTINGS_FILE = Path.home() / ".morph_metrics_settings.json"

# Settings keys mapped onto ``SearchOptions`` fields. ``seed`` feeds the
# random generator of the stochastic engine.
SEARCH_SETTING_KEYS = {
    "epsilon": "epsilon",
    "min_step_size": "min_step_size",
    "start_step_size": "start_step_size",
    "max_iterations": "max_iterations",
    "step_size_subtract": "step_size_subtract",
    "seed": "rng",
}


def load_settings(path: Path = DEFAULT_SETTINGS_FILE) -> dict:
    """Load saved settings from ``path`` if it exists.

    @param path (Path): Location of the settings file.
    @returns dict: Loaded settings or an empty dictionary when unavailable.
    """

    if path.is_file():
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.error("Could not load settings from %s: %s", path, exc)
            return {}
        if isinstance(data, dict):
            return data
        logger.error("Settings file %s does not contain a JSON object", path)
    return {}


def save_settings(settings: Mapping[str, Any], path: Path = DEFAULT_SETTINGS_FILE) -> None:
    """Save ``settings`` to ``path`` as JSON.

    Write failures are logged rather than raised so a read-only home
    directory never stops a search from running.
    """

    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(dict(settings), fh, indent=2)
    except OSError as exc:
        logger.error("Could not save settings to %s: %s", path, exc)


def search_options_from_settings(settings: Mapping[str, Any]) -> SearchOptions:
    """Build :class:`SearchOptions` from the recognised keys of ``settings``.

    Unknown keys are ignored. Invalid values raise ``ValueError`` from the
    option validation.
    """

    fields: Dict[str, Any] = {}
    for key, value in settings.items():
        field_name = SEARCH_SETTING_KEYS.get(key)
        if field_name is None:
            logger.debug("Ignoring unknown setting %r", key)
            continue
        if value is not None:
            fields[field_name] = value
    return SearchOptions(**fields)
