import importlib.util
import os
import sys
from pathlib import Path
from types import ModuleType

import pytest

from shdcbuild import fips
from shdcbuild.errors import MissingToolLocationError, StepExecutionError
from shdcbuild.models import ErrorFormat, Format, Slang
from shdcbuild.observability import StructuredLogger
from shdcbuild.platforms import HostPlatform

LINUX_X64 = HostPlatform(os="linux", arch="x86_64")

linux_only = pytest.mark.skipif(
    not sys.platform.startswith("linux"), reason="Uses a shell-script stand-in for sokol-shdc."
)


def _shader(tmp_path: Path) -> Path:
    shd = tmp_path / "shaders" / "triangle.glsl"
    shd.parent.mkdir(parents=True, exist_ok=True)
    shd.write_text("@vs vs\n@end\n", encoding="utf-8")
    return shd


def test_shader_job_mirrors_cmake_macro(tmp_path: Path) -> None:
    job = fips.shader(tmp_path / "triangle.glsl", "glsl430:hlsl5", compiler="MSVC")

    assert job.header == tmp_path / "triangle.glsl.h"
    assert job.args == {"slang": "glsl430:hlsl5", "compiler": "MSVC"}


def test_shader_variant_job_uses_module_in_header_name(tmp_path: Path) -> None:
    job = fips.shader_variant(
        "triangle.glsl", "glsl430", "fog", "USE_FOG:FOG_LINEAR", out_dir=tmp_path / "gen"
    )

    assert job.header == tmp_path / "gen" / "triangle.glsl.fog.h"
    assert job.args["module"] == "fog"
    assert job.args["defines"] == "USE_FOG:FOG_LINEAR"


def test_generator_options_follow_args(tmp_path: Path) -> None:
    options = fips.generator_options(
        tmp_path / "triangle.glsl",
        tmp_path / "triangle.glsl.h",
        {
            "slang": "glsl430:metal_macos",
            "compiler": "MSVC",
            "defines": "A:B",
            "module": "tri",
            "shdc_dir": str(tmp_path / "tools"),
        },
    )

    assert options.slang == Slang(glsl430=True, metal_macos=True)
    assert options.format is Format.SOKOL
    assert options.errfmt is ErrorFormat.MSVC
    assert options.defines == ("A", "B")
    assert options.module == "tri"
    assert options.genver == str(fips.Version)
    assert options.shdc_dir == tmp_path / "tools"


def test_generator_options_default_to_gcc_errors(tmp_path: Path) -> None:
    options = fips.generator_options(
        tmp_path / "a.glsl",
        tmp_path / "a.h",
        {"slang": "wgsl", "compiler": "Clang"},
        environ={fips.TOOLS_ENV_VAR: "/opt/sokol-tools-bin"},
    )

    assert options.errfmt is ErrorFormat.GCC
    assert options.defines is None
    assert options.module is None
    assert options.shdc_dir == Path("/opt/sokol-tools-bin")


def test_missing_tool_location(tmp_path: Path) -> None:
    with pytest.raises(MissingToolLocationError):
        fips.tools_dir({"slang": "glsl430"}, environ={})


def test_is_dirty_rules(tmp_path: Path) -> None:
    shd = _shader(tmp_path)
    header = tmp_path / "triangle.glsl.h"

    assert fips.is_dirty(1, [shd], [header])

    header.write_text("/* #version:1# */\n", encoding="utf-8")
    os.utime(header, (shd.stat().st_mtime + 10, shd.stat().st_mtime + 10))
    assert not fips.is_dirty(1, [shd], [header])
    assert fips.is_dirty(2, [shd], [header])

    os.utime(shd, (header.stat().st_mtime + 10, header.stat().st_mtime + 10))
    assert fips.is_dirty(1, [shd], [header])


@linux_only
def test_generate_runs_tool_then_skips_when_clean(tmp_path: Path, fake_tools: Path) -> None:
    shd = _shader(tmp_path)
    header = tmp_path / "out" / "triangle.glsl.h"
    args = {"slang": "glsl430", "compiler": "GNU", "shdc_dir": str(fake_tools)}
    logger = StructuredLogger()

    assert fips.generate(shd, None, header, args, host=LINUX_X64, logger=logger)
    assert fips.version_marker(fips.Version) in header.read_text(encoding="utf-8")

    os.utime(header, (shd.stat().st_mtime + 10, shd.stat().st_mtime + 10))
    assert not fips.generate(shd, None, header, args, host=LINUX_X64, logger=logger)
    assert any("up to date" in record["message"] for record in logger.records)


@linux_only
def test_generator_job_run(tmp_path: Path, fake_tools: Path) -> None:
    shd = _shader(tmp_path)
    job = fips.shader_variant(shd, "glsl430", "fog", "USE_FOG", out_dir=tmp_path / "gen")
    job = fips.GeneratorJob(
        input=job.input, header=job.header, args={**job.args, "shdc_dir": str(fake_tools)}
    )

    assert job.run(host=LINUX_X64)
    assert (tmp_path / "gen" / "triangle.glsl.fog.h").exists()


@linux_only
def test_generate_propagates_tool_failure(tmp_path: Path, failing_tools: Path) -> None:
    shd = _shader(tmp_path)
    args = {"slang": "glsl430", "compiler": "GNU", "shdc_dir": str(failing_tools)}

    with pytest.raises(StepExecutionError):
        fips.generate(shd, None, tmp_path / "triangle.glsl.h", args, host=LINUX_X64)


def test_relative_tool_dir_is_anchored_at_cwd(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    from_args = fips.tools_dir({"shdc_dir": "sokol-tools-bin"}, environ={})
    from_env = fips.tools_dir({}, environ={fips.TOOLS_ENV_VAR: "deps/sokol-tools-bin"})

    assert from_args == Path.cwd() / "sokol-tools-bin"
    assert from_env == Path.cwd() / "deps" / "sokol-tools-bin"


@linux_only
def test_generate_with_relative_paths(
    tmp_path: Path, fake_tools: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _shader(tmp_path)
    monkeypatch.chdir(tmp_path)
    args = {"slang": "glsl430", "compiler": "GNU", "shdc_dir": fake_tools.name}

    assert fips.generate("shaders/triangle.glsl", None, "gen/triangle.glsl.h", args, host=LINUX_X64)
    assert fips.version_marker(fips.Version) in (tmp_path / "gen" / "triangle.glsl.h").read_text(
        encoding="utf-8"
    )


FIPS_FILES = Path(__file__).resolve().parents[1] / "fips-files"


def _load_generator() -> ModuleType:
    spec = importlib.util.spec_from_file_location(
        "SokolShader", FIPS_FILES / "generators" / "SokolShader.py"
    )
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_fips_generator_file_delegates_to_package(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[tuple[object, ...]] = []

    def fake_generate(*call_args: object) -> bool:
        calls.append(call_args)
        return True

    monkeypatch.setattr(fips, "generate", fake_generate)
    generator = _load_generator()
    args = {"slang": "glsl430", "compiler": "GNU"}

    assert generator.Version == fips.Version
    assert generator.generate("a.glsl", "a.c", "a.glsl.h", args)
    assert calls == [("a.glsl", "a.c", "a.glsl.h", args)]


def test_include_cmake_registers_generator_macros() -> None:
    text = (FIPS_FILES / "include.cmake").read_text(encoding="utf-8")

    assert "macro(sokol_shader shd slang)" in text
    assert "macro(sokol_shader_variant shd slang module defines)" in text
    assert text.count("fips_generate(TYPE SokolShader") == 2
    assert "HEADER ${shd}.${module}.h" in text
