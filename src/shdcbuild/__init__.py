"""Public package entrypoint for the sokol-shdc build integration."""

from .args import command_line, options_to_args
from .context import BuildContext
from .errors import (
    ErrorCode,
    MissingToolLocationError,
    ShdcError,
    StepExecutionError,
    UnsupportedPlatformError,
    ValidationError,
)
from .graph import BuildGraph, CopyStep, ExplicitPath, GeneratedPath, RunStep, SourcePath
from .models import ErrorFormat, Format, Options, Slang, ToolDependency
from .platforms import HostPlatform, host_platform, resolve_tool_path, tool_subpath
from .shader import CompileResult, compile_shader

__all__ = [
    "BuildContext",
    "BuildGraph",
    "CompileResult",
    "CopyStep",
    "ErrorCode",
    "ErrorFormat",
    "ExplicitPath",
    "Format",
    "GeneratedPath",
    "HostPlatform",
    "MissingToolLocationError",
    "Options",
    "RunStep",
    "ShdcError",
    "Slang",
    "SourcePath",
    "StepExecutionError",
    "ToolDependency",
    "UnsupportedPlatformError",
    "ValidationError",
    "command_line",
    "compile_shader",
    "host_platform",
    "options_to_args",
    "resolve_tool_path",
    "tool_subpath",
]
