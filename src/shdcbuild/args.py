"""Translate invocation options into the sokol-shdc command line."""

from __future__ import annotations

from pathlib import Path

from shdcbuild.models import Options

INPUT_FLAG = "--input"
OUTPUT_FLAG = "--output"


def options_to_args(options: Options, tool_path: str | Path) -> list[str]:
    """Return the argument vector without the input/output file arguments."""
    args = [
        str(tool_path),
        "-l",
        options.slang.to_arg(),
        "-f",
        str(options.format),
    ]
    if options.tmp_dir is not None:
        args.extend(["--tmpdir", str(options.tmp_dir)])
    if options.defines:
        args.extend(["--defines", ":".join(options.defines)])
    if options.module is not None:
        args.extend(["--module", options.module])
    if options.reflection:
        args.append("--reflection")
    if options.bytecode:
        args.append("--bytecode")
    if options.dump:
        args.append("--dump")
    if options.genver is not None:
        args.extend(["--genver", options.genver])
    if options.ifdef:
        args.append("--ifdef")
    if options.noifdef:
        args.append("--noifdef")
    if options.save_intermediate_spirv:
        args.append("--save-intermediate-spirv")
    if options.no_log_cmdline:
        args.append("--no-log-cmdline")
    if options.errfmt is not None:
        args.extend(["--errfmt", str(options.errfmt)])
    return args


def command_line(
    options: Options,
    tool_path: str | Path,
    input_path: str | Path,
    output_path: str | Path,
) -> list[str]:
    """Full argument vector; file arguments always come last."""
    return [
        *options_to_args(options, tool_path),
        INPUT_FLAG,
        str(input_path),
        OUTPUT_FLAG,
        str(output_path),
    ]
