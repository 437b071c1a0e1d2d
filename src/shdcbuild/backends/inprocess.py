"""In-process executor for testing and dry runs.

Records the resolved command of every run step and writes deterministic
placeholder outputs instead of spawning sokol-shdc. Copy steps are performed
for real so copy-back behavior can be observed.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from shdcbuild.backends.base import (
    ExecutionReport,
    copy_artifact,
    ensure_dependencies_done,
    prepare_outputs,
)
from shdcbuild.context import BuildContext
from shdcbuild.graph import BuildGraph, CopyStep, RunStep


@dataclass(slots=True)
class InProcessExecutor:
    """Executor that produces placeholder artifacts in-process."""

    name: str = "inprocess"
    history: list[list[str]] = field(default_factory=list)

    def execute(self, graph: BuildGraph, ctx: BuildContext) -> ExecutionReport:
        ctx = ctx.absolute()
        report = ExecutionReport()
        for step in graph.steps:
            if step.state != "pending":
                continue
            ensure_dependencies_done(graph, step)
            outputs = prepare_outputs(step, ctx)
            if isinstance(step, RunStep):
                cmd = step.command(ctx)
                self.history.append(cmd)
                report.commands[step.name] = cmd
                digest = hashlib.sha256("\0".join(cmd).encode()).hexdigest()
                for path in outputs:
                    path.write_text(
                        f"shdc-artifact: step={step.name}\ndigest={digest}\n",
                        encoding="utf-8",
                    )
            elif isinstance(step, CopyStep):
                copy_artifact(step, ctx, self.name)
            ctx.logger.log(operation="execute", step=step.name, message="Executed in-process")
            step.state = "done"
            report.executed.append(step.name)
            report.outputs[step.name] = outputs
        return report
