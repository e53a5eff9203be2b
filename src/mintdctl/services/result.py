"""Result types returned by every mintdctl service operation.

Services never raise for expected failures (missing settings, values TOML
cannot hold, an unusable data directory). They return ``ok=False`` with one
of the :class:`ErrorCode` values, which scripts can match on in ``--json``
output.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    SERIALIZATION_FAILED = "SERIALIZATION_FAILED"
    DATA_DIR_FAILED = "DATA_DIR_FAILED"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation (``validate``, ``plan``, ``render``, ``deploy``).

    ``data`` is the payload on success; ``warnings`` are non-fatal findings
    reported alongside it, such as an env value containing a newline.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
