"""Register sokol-shdc compile steps in a build graph."""

from __future__ import annotations

from dataclasses import dataclass

from shdcbuild.args import INPUT_FLAG, OUTPUT_FLAG, options_to_args
from shdcbuild.context import BuildContext
from shdcbuild.graph import (
    BuildGraph,
    CopyStep,
    ExplicitPath,
    FileRef,
    GeneratedPath,
    RunStep,
    SourcePath,
)
from shdcbuild.models import Options
from shdcbuild.platforms import resolve_tool_path


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Handle returned to callers so they can chain further steps."""

    step: RunStep
    output: FileRef
    copy_step: CopyStep | None = None


def compile_shader(graph: BuildGraph, options: Options, ctx: BuildContext) -> CompileResult:
    # Resolve first: tool location and platform errors must surface before
    # anything is registered.
    tool_path = resolve_tool_path(options, ctx.host)

    name = f"shdc {options.output.as_posix()}"
    input_ref = SourcePath(options.input)
    output_ref: FileRef
    if options.output.is_absolute():
        output_ref = ExplicitPath(options.output)
    else:
        output_ref = GeneratedPath(owner=name, rel=options.output)

    argv = (
        *options_to_args(options, tool_path),
        INPUT_FLAG,
        input_ref,
        OUTPUT_FLAG,
        output_ref,
    )
    step = graph.add_system_command(name, argv, inputs=(input_ref,), outputs=(output_ref,))
    ctx.logger.log(
        operation="register",
        step=name,
        message=f"Registered sokol-shdc step for {input_ref}",
        extra={"tool": str(tool_path), "slang": options.slang.to_arg(), "format": str(options.format)},
    )

    copy_step: CopyStep | None = None
    if options.update_source is not None:
        destination = SourcePath(options.update_source)
        copy_step = graph.add_copy(
            f"update-source {destination}",
            output_ref,
            destination,
            after=step,
        )
        ctx.logger.log(
            operation="register",
            step=copy_step.name,
            message=f"Registered copy-back of {output_ref} to {destination}",
        )

    return CompileResult(step=step, output=output_ref, copy_step=copy_step)
