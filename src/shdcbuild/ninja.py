"""Write a build graph as a Ninja build file."""

from __future__ import annotations

import io
import shlex
import subprocess
from pathlib import Path

from ninja_syntax import Writer, escape

from shdcbuild.context import BuildContext
from shdcbuild.graph import BuildGraph, CopyStep, RunStep

NINJA_REQUIRED_VERSION = "1.5"
# Command lines are long; keep every statement on one line.
LINE_WIDTH = 1 << 16


def _node_path(path: Path) -> str:
    return str(path)


def _command(cmd: list[str], ctx: BuildContext) -> str:
    if ctx.host.os == "windows":
        return subprocess.list2cmdline(cmd)
    return shlex.join(cmd)


def _copy_rule_command(ctx: BuildContext) -> str:
    if ctx.host.os == "windows":
        return "cmd /c copy /Y $in $out > NUL"
    return "cp -f $in $out"


def render_ninja(graph: BuildGraph, ctx: BuildContext) -> str:
    buffer = io.StringIO()
    writer = Writer(buffer, width=LINE_WIDTH)

    writer.variable(key="ninja_required_version", value=NINJA_REQUIRED_VERSION)
    writer.newline()

    writer.rule(
        "shdc",
        command="$cmd",
        description="Compiling shader $out",
    )
    writer.newline()

    writer.rule(
        "copy",
        command=_copy_rule_command(ctx),
        description="Updating source file $out",
    )
    writer.newline()

    outputs: list[str] = []
    for step in graph.steps:
        step_outputs = [_node_path(ref.resolve(ctx)) for ref in step.outputs]
        step_inputs = [_node_path(ref.resolve(ctx)) for ref in step.inputs]
        if isinstance(step, RunStep):
            writer.build(
                outputs=step_outputs,
                rule="shdc",
                inputs=step_inputs,
                variables={"cmd": escape(_command(step.command(ctx), ctx))},
            )
        elif isinstance(step, CopyStep):
            writer.build(outputs=step_outputs, rule="copy", inputs=step_inputs)
        writer.newline()
        outputs += step_outputs

    writer.build(outputs="all", rule="phony", inputs=outputs)
    writer.newline()
    writer.default("all")
    return buffer.getvalue()


def write_ninja(graph: BuildGraph, ctx: BuildContext, path: str | Path | None = None) -> Path:
    ninja_path = Path(path) if path is not None else ctx.build_root / "build.ninja"
    ninja_path.parent.mkdir(parents=True, exist_ok=True)
    ninja_path.write_text(render_ninja(graph, ctx), encoding="utf-8")
    ctx.logger.log(
        operation="write_ninja",
        step=None,
        message=f"Ninja build commands stored in {ninja_path}",
        extra={"steps": len(graph.steps)},
    )
    return ninja_path
