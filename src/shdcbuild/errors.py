"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    VALIDATION = "E_VALIDATION"
    UNSUPPORTED_PLATFORM = "E_UNSUPPORTED_PLATFORM"
    MISSING_TOOL_LOCATION = "E_MISSING_TOOL_LOCATION"
    STEP_EXECUTION = "E_STEP_EXECUTION"


# Context keys holding captured process output, rendered last as indented blocks.
PROCESS_OUTPUT_KEYS = ("stdout", "stderr")


class ShdcError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for key, value in self.context.items():
            if value and key not in PROCESS_OUTPUT_KEYS:
                parts.append(f"  {key}: {value}")
        for key in PROCESS_OUTPUT_KEYS:
            output = self.context.get(key, "").rstrip()
            if output:
                parts.append(f"  {key}:")
                parts.extend(f"    {line}" for line in output.splitlines())
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(ShdcError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class UnsupportedPlatformError(ShdcError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message, code=ErrorCode.UNSUPPORTED_PLATFORM, hint=hint, context=context
        )


class MissingToolLocationError(ShdcError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message, code=ErrorCode.MISSING_TOOL_LOCATION, hint=hint, context=context
        )


class StepExecutionError(ShdcError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.STEP_EXECUTION, hint=hint, context=context)


__all__ = [
    "ErrorCode",
    "MissingToolLocationError",
    "ShdcError",
    "StepExecutionError",
    "UnsupportedPlatformError",
    "ValidationError",
]
