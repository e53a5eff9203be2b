"""BaseService: shared foundation for mintdctl services.

Every service receives the unified :class:`MintdctlSettings` at
construction time and reads the cdk-mintd options from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mintdctl.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from mintdctl.config.models import ServiceOptions
    from mintdctl.config.settings import MintdctlSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class DeployService(BaseService):
            def deploy(self) -> ServiceResult:
                tree = self.options.resolved_settings()
                ...
    """

    def __init__(self, settings: MintdctlSettings) -> None:
        self._settings = settings

    @property
    def options(self) -> ServiceOptions:
        return self._settings.service

    @staticmethod
    def _failure(
        op: str,
        code: ErrorCode,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
            warnings=warnings or [],
        )
