"""fips code-generator adapter for sokol-shdc.

fips calls ``generate(input, out_src, out_hdr, args)`` for every shader
registered with the ``sokol_shader``/``sokol_shader_variant`` cmake macros.
:func:`shader` and :func:`shader_variant` produce the same jobs from Python.

The tool location comes from ``args["shdc_dir"]`` or the ``SOKOL_TOOLS_BIN``
environment variable.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shdcbuild.backends.local import LocalExecutor
from shdcbuild.context import BuildContext
from shdcbuild.errors import MissingToolLocationError
from shdcbuild.graph import BuildGraph
from shdcbuild.models import ErrorFormat, Format, Options, Slang
from shdcbuild.observability import StructuredLogger
from shdcbuild.platforms import HostPlatform, host_platform
from shdcbuild.shader import compile_shader

# Stamped into generated headers via --genver; bump to force regeneration.
Version = 1

TOOLS_ENV_VAR = "SOKOL_TOOLS_BIN"
VERSION_SCAN_LINES = 8


@dataclass(frozen=True, slots=True)
class GeneratorJob:
    input: Path
    header: Path
    args: Mapping[str, Any] = field(default_factory=dict)

    def run(
        self,
        *,
        host: HostPlatform | None = None,
        logger: StructuredLogger | None = None,
    ) -> bool:
        return generate(self.input, None, self.header, self.args, host=host, logger=logger)


def shader(
    shd: str | Path,
    slang: str,
    *,
    compiler: str = "GNU",
    out_dir: str | Path | None = None,
) -> GeneratorJob:
    """Job for ``sokol_shader(shd slang)``; writes ``<shd>.h``."""
    shd_path = Path(shd)
    header_dir = Path(out_dir) if out_dir is not None else shd_path.parent
    return GeneratorJob(
        input=shd_path,
        header=header_dir / f"{shd_path.name}.h",
        args={"slang": slang, "compiler": compiler},
    )


def shader_variant(
    shd: str | Path,
    slang: str,
    module: str,
    defines: str,
    *,
    compiler: str = "GNU",
    out_dir: str | Path | None = None,
) -> GeneratorJob:
    """Job for ``sokol_shader_variant(shd slang module defines)``; writes ``<shd>.<module>.h``."""
    shd_path = Path(shd)
    header_dir = Path(out_dir) if out_dir is not None else shd_path.parent
    return GeneratorJob(
        input=shd_path,
        header=header_dir / f"{shd_path.name}.{module}.h",
        args={"slang": slang, "compiler": compiler, "defines": defines, "module": module},
    )


def version_marker(version: int | str) -> str:
    return f"#version:{version}#"


def is_dirty(version: int | str, inputs: list[Path], outputs: list[Path]) -> bool:
    """True if any output is missing, older than an input, or stamped with another version."""
    marker = version_marker(version)
    for output in outputs:
        if not output.exists():
            return True
        out_mtime = output.stat().st_mtime
        for input_path in inputs:
            if input_path.stat().st_mtime > out_mtime:
                return True
        with output.open(encoding="utf-8", errors="replace") as f:
            head = [f.readline() for _ in range(VERSION_SCAN_LINES)]
        if not any(marker in line for line in head):
            return True
    return False


def tools_dir(args: Mapping[str, Any], environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    value = args.get("shdc_dir") or env.get(TOOLS_ENV_VAR)
    if not value:
        raise MissingToolLocationError(
            "No sokol-shdc location was provided to the fips generator.",
            hint=f"Pass 'shdc_dir' in the generator args or set {TOOLS_ENV_VAR}.",
            context={"operation": "fips_generate"},
        )
    # Relative locations are taken from the directory the generator runs in.
    return Path(value).absolute()


def generator_options(
    input: Path,
    out_hdr: Path,
    args: Mapping[str, Any],
    *,
    environ: Mapping[str, str] | None = None,
) -> Options:
    defines = args.get("defines")
    errfmt = ErrorFormat.MSVC if args.get("compiler") == "MSVC" else ErrorFormat.GCC
    return Options(
        input=input,
        output=out_hdr,
        slang=Slang.parse(str(args["slang"])),
        format=Format.SOKOL,
        shdc_dir=tools_dir(args, environ),
        defines=tuple(d for d in str(defines).split(":") if d) if defines else None,
        module=args.get("module") or None,
        reflection=bool(args.get("reflection", False)),
        genver=str(Version),
        errfmt=errfmt,
    )


def generate(
    input: str | Path,
    out_src: str | Path | None,
    out_hdr: str | Path,
    args: Mapping[str, Any],
    *,
    host: HostPlatform | None = None,
    logger: StructuredLogger | None = None,
) -> bool:
    """fips generator entry point; returns True when sokol-shdc was run.

    ``out_src`` is unused: sokol-shdc only produces a header.
    """
    input_path = Path(input).absolute()
    header_path = Path(out_hdr).absolute()
    log = logger if logger is not None else StructuredLogger()
    if not is_dirty(Version, [input_path], [header_path]):
        log.log(operation="fips_generate", step=None, message=f"{header_path} is up to date")
        return False

    options = generator_options(input_path, header_path, args)
    ctx = BuildContext(
        source_root=input_path.parent,
        build_root=header_path.parent,
        host=host if host is not None else host_platform(),
        logger=log,
    )
    log.log(
        operation="fips_generate",
        step=None,
        message=f"sokol-shdc: {input_path} {header_path}",
        extra={"args": {k: str(v) for k, v in args.items()}},
    )
    graph = BuildGraph()
    compile_shader(graph, options, ctx)
    LocalExecutor().execute(graph, ctx)
    return True
