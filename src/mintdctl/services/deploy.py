"""DeployService: validate, render, and write every cdk-mintd artifact.

Pipeline (fails fast on the first stage that reports errors):

1. Validate the resolved settings tree (all rules, one pass).
2. Render the config TOML, the env file, and the provisioning snippets.
3. Build the ServiceDescriptor pointing at the rendered paths.
4. Write everything atomically under the artifact directory.

INVARIANT: Deploy is idempotent. Unchanged input rewrites nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from mintdctl.domain.render import (
    SerializationError,
    environment_hazards,
    render_environment,
    render_settings,
    settings_digest,
)
from mintdctl.domain.unit import (
    UNIT_NAME,
    ServiceDescriptor,
    build_descriptor,
    render_firewall,
    sysusers_config,
    tmpfiles_rule,
)
from mintdctl.domain.validation import ValidationError, validate
from mintdctl.infrastructure.filesystem import (
    PUBLIC_MODE,
    SECRET_MODE,
    prepare_data_dir,
    write_artifact,
)
from mintdctl.infrastructure.templates import render_unit
from mintdctl.services.base import BaseService
from mintdctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from mintdctl.config.settings import MintdctlSettings

logger = logging.getLogger(__name__)

ENV_FILE_NAME = "cdk-mintd.env"
LAUNCH_SPEC_NAME = "cdk-mintd-launch.json"
TMPFILES_NAME = "cdk-mintd.tmpfiles.conf"
SYSUSERS_NAME = "cdk-mintd.sysusers.conf"
FIREWALL_NAME = "cdk-mintd.nft"

# Artifact kinds exposed through ``mintdctl render``.
RENDER_KINDS = ("config", "env", "unit", "tmpfiles", "sysusers", "firewall")


def config_file_name(content: str) -> str:
    """Content-addressed file name for a rendered settings document."""
    return f"cdk-mintd-{settings_digest(content)[:12]}.toml"


@dataclass(frozen=True)
class Artifact:
    """One generated file: its kind, name within the artifact dir, and content."""

    kind: str
    name: str
    content: str
    mode: int = PUBLIC_MODE


@dataclass
class DeploymentBundle:
    """Everything one deploy writes, built in memory before touching disk."""

    artifact_dir: Path
    descriptor: ServiceDescriptor
    artifacts: list[Artifact] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def get(self, kind: str) -> Artifact | None:
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact
        return None


class DeployService(BaseService):
    """Validates and renders the cdk-mintd deployment for one settings object."""

    def __init__(self, settings: MintdctlSettings, *, output_dir: Path | None = None) -> None:
        super().__init__(settings)
        self._artifact_dir = (output_dir or settings.artifact_dir).absolute()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self) -> ServiceResult:
        """Check the resolved settings tree against every required-field rule."""
        errors = validate(self.options.resolved_settings())
        if errors:
            return self._validation_failure("validate", errors)
        return ServiceResult(ok=True, op="validate", data={"errors": [], "count": 0})

    def plan(self) -> ServiceResult:
        """Validate and render all artifacts without writing anything."""
        result = self._prepare("plan")
        if isinstance(result, ServiceResult):
            return result
        return ServiceResult(
            ok=True,
            op="plan",
            data=self._summary(result),
            warnings=result.warnings,
        )

    def render(self, kind: str) -> ServiceResult:
        """Render a single artifact of *kind* (one of :data:`RENDER_KINDS`)."""
        if kind not in RENDER_KINDS:
            msg = f"Unknown artifact kind: {kind!r}"
            raise ValueError(msg)
        result = self._prepare("render")
        if isinstance(result, ServiceResult):
            return result
        artifact = result.get(kind)
        return ServiceResult(
            ok=True,
            op="render",
            data={
                "kind": kind,
                "name": artifact.name if artifact else None,
                "content": artifact.content if artifact else "",
            },
            warnings=result.warnings,
        )

    def deploy(self, *, create_data_dir: bool = False) -> ServiceResult:
        """Write every artifact into the artifact directory.

        With ``enable = false`` nothing is written and the result reports
        ``enabled: false``.
        """
        if not self.options.enable:
            logger.info("cdk-mintd service disabled; nothing to deploy")
            return ServiceResult(ok=True, op="deploy", data={"enabled": False, "artifacts": []})

        result = self._prepare("deploy")
        if isinstance(result, ServiceResult):
            return result

        written: list[dict[str, object]] = []
        for artifact in result.artifacts:
            path = self._artifact_dir / artifact.name
            changed = write_artifact(path, artifact.content, mode=artifact.mode)
            logger.debug("Artifact %s %s", path, "written" if changed else "unchanged")
            written.append({"kind": artifact.kind, "path": str(path), "changed": changed})

        if create_data_dir:
            descriptor = result.descriptor
            try:
                prepare_data_dir(descriptor.working_directory, descriptor.user, descriptor.group)
            except (OSError, LookupError) as exc:
                return self._failure(
                    "deploy",
                    ErrorCode.DATA_DIR_FAILED,
                    f"Cannot prepare data directory {descriptor.working_directory}: {exc}",
                    warnings=result.warnings,
                )

        data = self._summary(result)
        data["artifacts"] = written
        data["changed"] = sum(1 for w in written if w["changed"])
        return ServiceResult(ok=True, op="deploy", data=data, warnings=result.warnings)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _prepare(self, op: str) -> DeploymentBundle | ServiceResult:
        errors = validate(self.options.resolved_settings())
        if errors:
            return self._validation_failure(op, errors)
        try:
            return self.build_bundle()
        except SerializationError as exc:
            return self._failure(
                op,
                ErrorCode.SERIALIZATION_FAILED,
                str(exc),
                detail={"path": exc.path},
            )

    def build_bundle(self) -> DeploymentBundle:
        """Render every artifact in memory.

        Raises:
            SerializationError: if the settings tree holds an unrepresentable value.
        """
        options = self.options
        artifact_dir = self._artifact_dir
        artifacts: list[Artifact] = []
        warnings: list[str] = []

        config_content = render_settings(options.resolved_settings())
        config_name = config_file_name(config_content)
        artifacts.append(Artifact("config", config_name, config_content))
        if options.config_file is not None:
            warnings.append(
                f"config_file override {options.config_file} is used; "
                f"generated {config_name} is written but not referenced"
            )

        env_path: Path | None = None
        if options.environment:
            env_content = render_environment(options.environment)
            artifacts.append(Artifact("env", ENV_FILE_NAME, env_content, SECRET_MODE))
            env_path = artifact_dir / ENV_FILE_NAME
            for name in environment_hazards(options.environment):
                warnings.append(f"environment value for {name} contains a newline and will be split")

        descriptor = build_descriptor(
            options,
            generated_config=artifact_dir / config_name,
            environment_file=env_path,
        )
        launch_spec = artifact_dir / LAUNCH_SPEC_NAME
        artifacts.append(
            Artifact("launch", LAUNCH_SPEC_NAME, descriptor.model_dump_json(indent=2) + "\n")
        )
        unit = render_unit(
            descriptor,
            launcher=options.launcher_path,
            launch_spec=launch_spec,
            override_root=artifact_dir,
        )
        artifacts.append(Artifact("unit", UNIT_NAME, unit))
        artifacts.append(Artifact("tmpfiles", TMPFILES_NAME, tmpfiles_rule(descriptor)))
        artifacts.append(Artifact("sysusers", SYSUSERS_NAME, sysusers_config(descriptor)))
        if descriptor.allowed_tcp_ports:
            firewall = render_firewall(descriptor.allowed_tcp_ports)
            artifacts.append(Artifact("firewall", FIREWALL_NAME, firewall))

        return DeploymentBundle(
            artifact_dir=artifact_dir,
            descriptor=descriptor,
            artifacts=artifacts,
            warnings=warnings,
        )

    @staticmethod
    def _summary(bundle: DeploymentBundle) -> dict[str, object]:
        descriptor = bundle.descriptor
        return {
            "enabled": True,
            "artifact_dir": str(bundle.artifact_dir),
            "config_path": str(descriptor.config_path),
            "environment_file": (
                str(descriptor.environment_file) if descriptor.environment_file else None
            ),
            "argv": descriptor.argv(),
            "allowed_tcp_ports": descriptor.allowed_tcp_ports,
            "artifacts": [
                {"kind": a.kind, "path": str(bundle.artifact_dir / a.name)}
                for a in bundle.artifacts
            ],
        }

    def _validation_failure(self, op: str, errors: list[ValidationError]) -> ServiceResult:
        paths = ", ".join(e.path for e in errors)
        return self._failure(
            op,
            ErrorCode.VALIDATION_FAILED,
            f"{len(errors)} setting check(s) failed: {paths}",
            detail={"errors": [e.model_dump() for e in errors]},
        )
