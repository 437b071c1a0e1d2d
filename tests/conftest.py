"""Shared test fixtures."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from shdcbuild.context import BuildContext
from shdcbuild.platforms import HostPlatform

LINUX_X64 = HostPlatform(os="linux", arch="x86_64")

# Stand-in for sokol-shdc: writes a header stamped with --genver to --output.
FAKE_SHDC = """#!/bin/sh
out=""
genver="0"
while [ $# -gt 0 ]; do
  case "$1" in
    --output) out="$2"; shift ;;
    --genver) genver="$2"; shift ;;
  esac
  shift
done
printf '/* #version:%s# machine generated */\\n' "$genver" > "$out"
echo "fake-shdc ok"
"""

FAILING_SHDC = """#!/bin/sh
echo "triangle.glsl:3:0: error: unknown tag @progam" >&2
exit 10
"""


def _install(root: Path, script: str) -> Path:
    tool = root / "bin" / "linux" / "sokol-shdc"
    tool.parent.mkdir(parents=True, exist_ok=True)
    tool.write_text(script, encoding="utf-8")
    tool.chmod(tool.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return root


@pytest.fixture
def ctx(tmp_path: Path) -> BuildContext:
    """Linux x86_64 build context rooted in a temporary source tree."""
    source_root = tmp_path / "project"
    source_root.mkdir()
    return BuildContext(source_root=source_root, build_root=tmp_path / "build", host=LINUX_X64)


@pytest.fixture
def fake_tools(tmp_path: Path) -> Path:
    """sokol-tools-bin layout whose linux binary is a working stand-in."""
    return _install(tmp_path / "sokol-tools-bin", FAKE_SHDC)


@pytest.fixture
def failing_tools(tmp_path: Path) -> Path:
    return _install(tmp_path / "broken-tools-bin", FAILING_SHDC)
