"""Settings checks run before any artifact is activated.

Each rule is an independent predicate over the settings tree. All rules are
evaluated on every pass, so one run reports every missing or malformed field.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

MIN_PORT = 1
MAX_PORT = 65535


class ValidationError(BaseModel):
    """One failed rule: the dotted settings path and a readable message."""

    model_config = {"frozen": True}

    path: str
    message: str


class SettingRule(BaseModel):
    """A check on the value at ``<section>.<key>``."""

    model_config = {"frozen": True}

    section: str
    key: str

    @property
    def path(self) -> str:
        return f"{self.section}.{self.key}"

    def _fail(self, problem: str) -> ValidationError:
        return ValidationError(path=self.path, message=f"settings.{self.path} {problem}")

    def check(self, tree: Mapping[str, Any]) -> ValidationError | None:
        raise NotImplementedError


class RequiredSetting(SettingRule):
    """The key must be present; a section that is not a table counts as missing."""

    def check(self, tree: Mapping[str, Any]) -> ValidationError | None:
        section = tree.get(self.section)
        if isinstance(section, Mapping) and self.key in section:
            return None
        return self._fail("must be specified")


class PortSetting(SettingRule):
    """When present, the value must be an integer TCP port."""

    def check(self, tree: Mapping[str, Any]) -> ValidationError | None:
        section = tree.get(self.section)
        if not isinstance(section, Mapping) or self.key not in section:
            return None
        value = section[self.key]
        # bool is an int subclass; ``listen_port = true`` is still wrong
        if isinstance(value, int) and not isinstance(value, bool):
            if MIN_PORT <= value <= MAX_PORT:
                return None
        return self._fail(f"must be an integer port between {MIN_PORT} and {MAX_PORT}")


RULES: tuple[SettingRule, ...] = (
    RequiredSetting(section="info", key="listen_port"),
    RequiredSetting(section="ln", key="ln_backend"),
    RequiredSetting(section="database", key="engine"),
    PortSetting(section="info", key="listen_port"),
)


def validate(tree: Mapping[str, Any]) -> list[ValidationError]:
    """Return every rule violation in *tree*; empty when the tree is valid."""
    errors: list[ValidationError] = []
    for rule in RULES:
        error = rule.check(tree)
        if error is not None:
            errors.append(error)
    return errors
