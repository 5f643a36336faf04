"""Decide which artifacts to emit for one input file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .descriptor import InputFile
from .naming import impl_output_name, wiring_output_name

logger = logging.getLogger(__name__)

NO_TARGET_SERVICE = "no target service defined in the file"


@dataclass(frozen=True)
class ArtifactPlan:
    """Output names planned for one file; None means not emitted."""

    file: InputFile
    wiring: str | None = None
    impl: str | None = None
    reason: str = ""

    @property
    def skipped(self) -> bool:
        return self.wiring is None


def plan_artifacts(
    file: InputFile,
    impl: bool,
    force: bool,
    exists: Callable[[str], bool],
) -> ArtifactPlan:
    """Plan the wiring artifact and, when enabled, the implementation stub.

    A stub is planned only when force is set or exists() reports no file at
    its output name, so hand-written implementations are never clobbered.
    """
    if not file.services:
        logger.info("%s: %s", file.name, NO_TARGET_SERVICE)
        return ArtifactPlan(file=file, reason=NO_TARGET_SERVICE)

    wiring = wiring_output_name(file.name)
    if not impl:
        return ArtifactPlan(file=file, wiring=wiring)

    output = impl_output_name(file.name)
    if not force and exists(output):
        reason = f"file '{output}' already exists"
        logger.info("Implementation will not be emitted: %s", reason)
        return ArtifactPlan(file=file, wiring=wiring, reason=reason)
    return ArtifactPlan(file=file, wiring=wiring, impl=output)
