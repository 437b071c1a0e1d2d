"""Run build-graph steps on the host with ``subprocess``.

Steps execute sequentially in registration order. A failing process aborts
the run immediately; its exit code and stderr are reported unchanged and no
retry is attempted.

Both roots are made absolute before the first step runs and the process
inherits the caller's working directory, so relative tool locations and
relative roots resolve against the same directory.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

from shdcbuild.backends.base import (
    ExecutionReport,
    copy_artifact,
    ensure_dependencies_done,
    prepare_outputs,
)
from shdcbuild.context import BuildContext
from shdcbuild.errors import StepExecutionError
from shdcbuild.graph import BuildGraph, CopyStep, RunStep


@dataclass(slots=True)
class LocalExecutor:
    name: str = "local"

    def execute(self, graph: BuildGraph, ctx: BuildContext) -> ExecutionReport:
        ctx = ctx.absolute()
        report = ExecutionReport()
        for step in graph.steps:
            if step.state != "pending":
                continue
            ensure_dependencies_done(graph, step)
            outputs = prepare_outputs(step, ctx)
            if isinstance(step, RunStep):
                report.commands[step.name] = self._run(step, ctx)
            elif isinstance(step, CopyStep):
                copy_artifact(step, ctx, self.name)
            step.state = "done"
            report.executed.append(step.name)
            report.outputs[step.name] = outputs
        return report

    def _run(self, step: RunStep, ctx: BuildContext) -> list[str]:
        cmd = step.command(ctx)
        ctx.logger.log(
            operation="execute",
            step=step.name,
            message="Running external process",
            extra={"command": cmd},
        )
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            step.state = "failed"
            raise StepExecutionError(
                f"Could not start {cmd[0]}.",
                hint="Check that the sokol-tools-bin location is correct and the binary is executable.",
                context={
                    "executor": self.name,
                    "operation": "execute",
                    "step": step.name,
                    "command": " ".join(cmd),
                    "error": str(exc),
                },
            ) from exc

        if result.returncode != 0:
            step.state = "failed"
            ctx.logger.log(
                operation="execute",
                step=step.name,
                level="error",
                message=f"Process exited with code {result.returncode}",
            )
            raise StepExecutionError(
                f"Step {step.name!r} failed.",
                context={
                    "executor": self.name,
                    "operation": "execute",
                    "step": step.name,
                    "returncode": str(result.returncode),
                    "command": " ".join(cmd),
                    "stdout": result.stdout or "",
                    "stderr": result.stderr or "",
                },
            )
        return cmd

