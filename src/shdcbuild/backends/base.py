"""Protocol and shared step helpers for build-graph executors."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from shdcbuild.context import BuildContext
from shdcbuild.errors import StepExecutionError, ValidationError
from shdcbuild.graph import BuildGraph, CopyStep, Step


@dataclass(slots=True)
class ExecutionReport:
    executed: list[str] = field(default_factory=list)
    commands: dict[str, list[str]] = field(default_factory=dict)
    outputs: dict[str, tuple[Path, ...]] = field(default_factory=dict)


class Executor(Protocol):
    name: str

    def execute(self, graph: BuildGraph, ctx: BuildContext) -> ExecutionReport:
        """Run every pending step of ``graph`` in registration order."""


def ensure_dependencies_done(graph: BuildGraph, step: Step) -> None:
    for dep_name in step.depends_on:
        dep = graph.step(dep_name)
        if dep.state != "done":
            raise ValidationError(
                f"Step {step.name!r} cannot run before {dep_name!r} has completed.",
                context={"operation": "execute", "step": step.name, "dependency_state": dep.state},
            )


def prepare_outputs(step: Step, ctx: BuildContext) -> tuple[Path, ...]:
    paths = tuple(ref.resolve(ctx) for ref in step.outputs)
    for path in paths:
        path.parent.mkdir(parents=True, exist_ok=True)
    return paths


def copy_artifact(step: CopyStep, ctx: BuildContext, executor: str) -> None:
    """Copy a generated file back into the source tree.

    The step is marked ``failed`` and a ``StepExecutionError`` raised when the
    copy cannot be made, so a missing or unwritable file never leaves the step
    looking pending.
    """
    source = step.source.resolve(ctx)
    destination = step.destination.resolve(ctx)
    ctx.logger.log(
        operation="execute",
        step=step.name,
        message=f"Copying {source} to {destination}",
    )
    try:
        shutil.copy2(source, destination)
    except OSError as exc:
        step.state = "failed"
        ctx.logger.log(
            operation="execute",
            step=step.name,
            level="error",
            message=f"Copy failed: {exc}",
        )
        raise StepExecutionError(
            f"Could not copy {source} to {destination}.",
            hint="Check that the compile step produced its output and the source tree is writable.",
            context={
                "executor": executor,
                "operation": "execute",
                "step": step.name,
                "source": str(source),
                "destination": str(destination),
                "error": str(exc),
            },
        ) from exc
