"""Core typed dataclasses for sokol-shdc invocation options."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import StrEnum
from pathlib import Path

from shdcbuild.errors import ValidationError


@dataclass(frozen=True, slots=True)
class Slang:
    """Target shader languages.

    Field names must match the tool's ``--slang`` names; declaration order is
    the serialization order.
    """

    glsl410: bool = False
    glsl430: bool = False
    glsl300es: bool = False
    glsl310es: bool = False
    hlsl4: bool = False
    hlsl5: bool = False
    metal_macos: bool = False
    metal_ios: bool = False
    metal_sim: bool = False
    wgsl: bool = False

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def parse(cls, value: str) -> Slang:
        """Build a flag set from the colon-joined form, e.g. ``glsl430:hlsl5``."""
        known = cls.names()
        flags: dict[str, bool] = {}
        for name in value.split(":"):
            name = name.strip()
            if not name:
                continue
            if name not in known:
                raise ValidationError(
                    f"Unknown shader language {name!r}.",
                    hint=f"Use one of: {', '.join(known)}.",
                    context={"operation": "slang_parse", "value": value},
                )
            flags[name] = True
        return cls(**flags)

    def enabled(self) -> tuple[str, ...]:
        return tuple(name for name in self.names() if getattr(self, name))

    def to_arg(self) -> str:
        return ":".join(self.enabled())


class Format(StrEnum):
    """Code-generation target; values are the tool's ``--format`` names."""

    SOKOL = "sokol"
    SOKOL_IMPL = "sokol_impl"
    SOKOL_ZIG = "sokol_zig"
    SOKOL_NIM = "sokol_nim"
    SOKOL_ODIN = "sokol_odin"
    SOKOL_RUST = "sokol_rust"
    SOKOL_D = "sokol_d"
    SOKOL_JAI = "sokol_jai"


class ErrorFormat(StrEnum):
    GCC = "gcc"
    MSVC = "msvc"


@dataclass(frozen=True, slots=True)
class ToolDependency:
    """A fetched ``sokol-tools-bin`` distribution rooted at ``root``."""

    root: Path

    def __post_init__(self) -> None:
        if isinstance(self.root, str):
            object.__setattr__(self, "root", Path(self.root))


@dataclass(frozen=True, slots=True)
class Options:
    input: Path
    output: Path
    slang: Slang
    format: Format = Format.SOKOL
    dep_shdc: ToolDependency | None = None
    shdc_dir: Path | None = None
    tmp_dir: Path | None = None
    defines: tuple[str, ...] | None = None
    module: str | None = None
    reflection: bool = False
    bytecode: bool = False
    dump: bool = False
    genver: str | None = None
    ifdef: bool = False
    noifdef: bool = False
    save_intermediate_spirv: bool = False
    no_log_cmdline: bool = False
    errfmt: ErrorFormat | None = None
    # Copy the generated file to this path under the source root.
    update_source: Path | None = None

    def __post_init__(self) -> None:
        for name in ("input", "output", "shdc_dir", "tmp_dir", "update_source"):
            value = getattr(self, name)
            if isinstance(value, str):
                object.__setattr__(self, name, Path(value))
        if self.defines is not None and not isinstance(self.defines, tuple):
            object.__setattr__(self, "defines", tuple(self.defines))

    def with_changes(self, **changes: object) -> Options:
        return replace(self, **changes)
