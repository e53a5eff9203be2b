"""Default settings tree and the deep merge that layers user overrides on it.

Defaults are an explicit object and merging is an explicit function: the
user's tree is laid over :data:`DEFAULT_SETTINGS` key by key, recursing into
nested tables. Non-mapping values (scalars, lists) replace wholesale.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

DEFAULT_SETTINGS: dict[str, Any] = {
    "info": {
        "url": "http://127.0.0.1:3338",
        "listen_host": "127.0.0.1",
        "listen_port": 3338,
    },
    "mint_info": {
        "name": "CDK Mint",
        "description": "A Cashu mint powered by CDK",
    },
    "ln": {
        "ln_backend": "FakeWallet",
        "mint_max": 10000,
        "melt_max": 10000,
    },
    "database": {
        "engine": "sqlite",
    },
}


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new dict with *override* laid recursively over *base*.

    Neither argument is mutated; nested values in the result are copies.
    """
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
