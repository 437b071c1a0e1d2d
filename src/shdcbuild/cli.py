"""Command-line entry point: ``shdcbuild {which,compile,ninja}``."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from shdcbuild.backends import InProcessExecutor, LocalExecutor
from shdcbuild.context import BuildContext
from shdcbuild.errors import MissingToolLocationError, ShdcError
from shdcbuild.graph import BuildGraph
from shdcbuild.models import ErrorFormat, Format, Options, Slang
from shdcbuild.ninja import write_ninja
from shdcbuild.platforms import host_platform, tool_subpath
from shdcbuild.shader import compile_shader


def _add_tool_location(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--shdc-dir", type=Path, help="sokol-tools-bin checkout")


def _add_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", type=Path)
    parser.add_argument("output", type=Path)
    parser.add_argument("-l", "--slang", required=True, help="colon-separated, e.g. glsl430:hlsl5")
    parser.add_argument("-f", "--format", choices=[f.value for f in Format], default=Format.SOKOL.value)
    _add_tool_location(parser)
    parser.add_argument("--tmpdir", type=Path)
    parser.add_argument("--defines", help="colon-separated preprocessor defines")
    parser.add_argument("--module")
    parser.add_argument("--reflection", action="store_true")
    parser.add_argument("--bytecode", action="store_true")
    parser.add_argument("--dump", action="store_true")
    parser.add_argument("--genver")
    parser.add_argument("--ifdef", action="store_true")
    parser.add_argument("--noifdef", action="store_true")
    parser.add_argument("--save-intermediate-spirv", action="store_true")
    parser.add_argument("--no-log-cmdline", action="store_true")
    parser.add_argument("--errfmt", choices=[f.value for f in ErrorFormat])
    parser.add_argument("--update-source", type=Path, help="copy the result to this source-tree path")
    parser.add_argument("--source-root", type=Path, default=Path("."))
    parser.add_argument("--build-dir", type=Path, default=Path("build"))
    parser.add_argument("--log-json", type=Path, help="write structured log records here")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shdcbuild", description="sokol-shdc build integration")
    sub = parser.add_subparsers(dest="command", required=True)

    which = sub.add_parser("which", help="print the sokol-shdc path for this host")
    _add_tool_location(which)

    compile_cmd = sub.add_parser("compile", help="compile one shader now")
    _add_options(compile_cmd)
    compile_cmd.add_argument("--dry-run", action="store_true", help="record commands only")

    ninja_cmd = sub.add_parser("ninja", help="write a build.ninja for one shader")
    _add_options(ninja_cmd)
    ninja_cmd.add_argument("--ninja-file", type=Path)
    return parser


def options_from_args(args: argparse.Namespace) -> Options:
    return Options(
        input=args.input,
        output=args.output,
        slang=Slang.parse(args.slang),
        format=Format(args.format),
        shdc_dir=args.shdc_dir,
        tmp_dir=args.tmpdir,
        defines=tuple(args.defines.split(":")) if args.defines else None,
        module=args.module,
        reflection=args.reflection,
        bytecode=args.bytecode,
        dump=args.dump,
        genver=args.genver,
        ifdef=args.ifdef,
        noifdef=args.noifdef,
        save_intermediate_spirv=args.save_intermediate_spirv,
        no_log_cmdline=args.no_log_cmdline,
        errfmt=ErrorFormat(args.errfmt) if args.errfmt else None,
        update_source=args.update_source,
    )


def _context(args: argparse.Namespace) -> BuildContext:
    source_root = args.source_root
    return BuildContext(
        source_root=source_root,
        build_root=source_root / args.build_dir,
        host=host_platform(),
    )


def cmd_which(args: argparse.Namespace) -> None:
    if args.shdc_dir is None:
        raise MissingToolLocationError(
            "No sokol-shdc location was provided.",
            hint="Pass --shdc-dir.",
            context={"operation": "which"},
        )
    print(args.shdc_dir / tool_subpath(host_platform()))


def cmd_compile(args: argparse.Namespace) -> None:
    ctx = _context(args)
    graph = BuildGraph()
    result = compile_shader(graph, options_from_args(args), ctx)
    executor = InProcessExecutor() if args.dry_run else LocalExecutor()
    try:
        report = executor.execute(graph, ctx)
    finally:
        if args.log_json is not None:
            ctx.logger.to_json_lines(args.log_json)
    if args.dry_run:
        for cmd in report.commands.values():
            print(" ".join(cmd))
    print(result.output.resolve(ctx.absolute()))


def cmd_ninja(args: argparse.Namespace) -> None:
    ctx = _context(args)
    graph = BuildGraph()
    compile_shader(graph, options_from_args(args), ctx)
    path = write_ninja(graph, ctx, args.ninja_file)
    if args.log_json is not None:
        ctx.logger.to_json_lines(args.log_json)
    print(path)


COMMANDS = {
    "which": cmd_which,
    "compile": cmd_compile,
    "ninja": cmd_ninja,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        COMMANDS[args.command](args)
    except ShdcError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0
