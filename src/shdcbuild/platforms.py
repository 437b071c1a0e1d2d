"""Host platform detection and sokol-shdc executable resolution."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from pathlib import Path

from shdcbuild.errors import MissingToolLocationError, UnsupportedPlatformError
from shdcbuild.models import Options

TOOL_NAME = "sokol-shdc"

_OS_ALIASES: dict[str, str] = {
    "darwin": "macos",
    "macos": "macos",
    "linux": "linux",
    "windows": "windows",
}

_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "aarch64": "aarch64",
}

_TOOL_SUBPATHS: dict[tuple[str, str], str] = {
    ("macos", "x86_64"): f"bin/osx/{TOOL_NAME}",
    ("macos", "aarch64"): f"bin/osx_arm64/{TOOL_NAME}",
    ("linux", "x86_64"): f"bin/linux/{TOOL_NAME}",
    ("linux", "aarch64"): f"bin/linux_arm64/{TOOL_NAME}",
    ("windows", "x86_64"): f"bin/win32/{TOOL_NAME}.exe",
}


@dataclass(frozen=True, slots=True)
class HostPlatform:
    os: str
    arch: str

    @classmethod
    def normalize(cls, system: str, machine: str) -> HostPlatform:
        """Map raw ``platform.system()``/``platform.machine()`` values to tags.

        Unknown values are kept lower-cased so the resolver can report them.
        """
        system_key = system.strip().lower()
        machine_key = machine.strip().lower()
        return cls(
            os=_OS_ALIASES.get(system_key, system_key),
            arch=_ARCH_ALIASES.get(machine_key, machine_key),
        )


def host_platform() -> HostPlatform:
    return HostPlatform.normalize(platform.system(), platform.machine())


def supported_platforms() -> tuple[HostPlatform, ...]:
    return tuple(HostPlatform(os=os_tag, arch=arch) for os_tag, arch in _TOOL_SUBPATHS)


def tool_subpath(host: HostPlatform) -> str:
    """Return the executable path relative to a tool-distribution root."""
    sub_path = _TOOL_SUBPATHS.get((host.os, host.arch))
    if sub_path is None:
        raise UnsupportedPlatformError(
            f"sokol-shdc has no prebuilt binary for {host.os}/{host.arch}.",
            hint="Supported hosts: "
            + ", ".join(f"{p.os}/{p.arch}" for p in supported_platforms())
            + ".",
            context={"operation": "resolve_tool", "os": host.os, "arch": host.arch},
        )
    return sub_path


def tool_root(options: Options) -> Path:
    if options.dep_shdc is not None:
        return options.dep_shdc.root
    if options.shdc_dir is not None:
        return options.shdc_dir
    raise MissingToolLocationError(
        "No sokol-shdc location was provided.",
        hint="Set Options.dep_shdc or Options.shdc_dir.",
        context={"operation": "resolve_tool", "input": str(options.input)},
    )


def resolve_tool_path(options: Options, host: HostPlatform) -> Path:
    """Resolve the absolute-or-root-relative executable path for ``options``.

    The tool location is checked before the platform so that a missing
    location is reported even on unsupported hosts.
    """
    root = tool_root(options)
    return root / tool_subpath(host)
