"""Serializers for the two files handed to the daemon.

- :func:`render_settings` turns a settings tree into the TOML document
  passed via ``--config``.
- :func:`render_environment` turns an environment map into the
  ``NAME=VALUE`` file systemd loads through ``EnvironmentFile=``.

INVARIANT: Both renderers are deterministic. Identical input yields
byte-identical output, so redeploying an unchanged tree is a no-op.
"""

from __future__ import annotations

import datetime
import hashlib
from collections.abc import Mapping
from typing import Any

import tomli_w

_SCALARS = (str, bool, int, float, datetime.datetime, datetime.date, datetime.time)


class SerializationError(ValueError):
    """A settings value has no TOML representation."""

    def __init__(self, path: str, value: Any) -> None:
        self.path = path
        self.value = value
        super().__init__(f"settings.{path}: cannot serialize value of type {type(value).__name__}")


def _normalize(value: Any, path: str) -> Any:
    """Return *value* with mapping keys sorted, rejecting non-TOML types."""
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for key in sorted(value, key=str):
            if not isinstance(key, str):
                raise SerializationError(f"{path}.{key}" if path else str(key), key)
            child = f"{path}.{key}" if path else key
            out[key] = _normalize(value[key], child)
        return out
    if isinstance(value, (list, tuple)):
        return [_normalize(item, f"{path}[{i}]") for i, item in enumerate(value)]
    if isinstance(value, _SCALARS):
        return value
    raise SerializationError(path, value)


def render_settings(tree: Mapping[str, Any]) -> str:
    """Serialize a settings tree to TOML text.

    Raises:
        SerializationError: if any value (at any depth) is not representable,
            e.g. ``None``, a set, or an arbitrary object.
    """
    normalized = _normalize(tree, "")
    return tomli_w.dumps(normalized)


def settings_digest(content: str) -> str:
    """SHA-256 hex digest of rendered content, used to address artifacts."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def render_environment(env: Mapping[str, str]) -> str:
    """Render ``NAME=VALUE`` lines, one per variable, sorted by name.

    Values are written verbatim. A value containing a newline corrupts the
    file; see :func:`environment_hazards`. An empty map renders as ``""``.
    """
    return "".join(f"{name}={env[name]}\n" for name in sorted(env))


def environment_hazards(env: Mapping[str, str]) -> list[str]:
    """Names of variables whose values would break the ``NAME=VALUE`` format."""
    return [name for name in sorted(env) if "\n" in env[name] or "\r" in env[name]]
