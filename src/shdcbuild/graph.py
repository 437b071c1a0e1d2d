"""Minimal build-graph model: file references, steps and the step registry.

Steps are plain description records. A host (the local executor, the Ninja
writer) walks :attr:`BuildGraph.steps` in registration order, which is always
a valid dependency order because a step may only depend on steps that were
registered before it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Literal

from shdcbuild.errors import ValidationError

if TYPE_CHECKING:
    from shdcbuild.context import BuildContext

StepState = Literal["pending", "done", "failed"]

GENERATED_DIR = "shdc"

# ── File references ─────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SourcePath:
    """A path relative to the source root."""

    rel: Path

    def resolve(self, ctx: BuildContext) -> Path:
        return ctx.source_root / self.rel

    def __str__(self) -> str:
        return self.rel.as_posix()


@dataclass(frozen=True, slots=True)
class GeneratedPath:
    """A graph-managed path owned by the step named ``owner``."""

    owner: str
    rel: Path

    def resolve(self, ctx: BuildContext) -> Path:
        return ctx.build_root / GENERATED_DIR / step_slug(self.owner) / self.rel

    def __str__(self) -> str:
        return f"<{self.owner}>/{self.rel.as_posix()}"


@dataclass(frozen=True, slots=True)
class ExplicitPath:
    """A caller-chosen output location, used as-is."""

    path: Path

    def resolve(self, ctx: BuildContext) -> Path:
        return self.path

    def __str__(self) -> str:
        return str(self.path)


FileRef = SourcePath | GeneratedPath | ExplicitPath
Token = str | SourcePath | GeneratedPath | ExplicitPath


def step_slug(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("_")


# ── Steps ───────────────────────────────────────────────────────────


@dataclass(slots=True)
class RunStep:
    """Run an external process; file tokens are resolved at execution time."""

    kind: ClassVar[str] = "run"

    name: str
    argv: tuple[Token, ...]
    inputs: tuple[FileRef, ...] = ()
    outputs: tuple[FileRef, ...] = ()
    depends_on: tuple[str, ...] = ()
    state: StepState = "pending"

    def command(self, ctx: BuildContext) -> list[str]:
        return [token if isinstance(token, str) else str(token.resolve(ctx)) for token in self.argv]


@dataclass(slots=True)
class CopyStep:
    """Copy a produced file into the versioned source tree."""

    kind: ClassVar[str] = "copy"

    name: str
    source: FileRef
    destination: SourcePath
    depends_on: tuple[str, ...] = ()
    state: StepState = "pending"

    @property
    def inputs(self) -> tuple[FileRef, ...]:
        return (self.source,)

    @property
    def outputs(self) -> tuple[FileRef, ...]:
        return (self.destination,)


Step = RunStep | CopyStep


@dataclass(slots=True)
class BuildGraph:
    steps: list[Step] = field(default_factory=list)

    def step(self, name: str) -> Step:
        for step in self.steps:
            if step.name == name:
                return step
        raise ValidationError(
            f"Unknown build step {name!r}.",
            context={"operation": "graph_lookup", "step": name},
        )

    def __contains__(self, name: object) -> bool:
        return any(step.name == name for step in self.steps)

    def add_system_command(
        self,
        name: str,
        argv: tuple[Token, ...],
        *,
        inputs: tuple[FileRef, ...] = (),
        outputs: tuple[FileRef, ...] = (),
        after: tuple[Step, ...] = (),
    ) -> RunStep:
        self._ensure_new(name)
        depends_on = self._dependencies(name, after)
        for output in outputs:
            if isinstance(output, GeneratedPath) and output.owner != name:
                raise ValidationError(
                    "Generated outputs must be owned by the step producing them.",
                    context={"operation": "add_system_command", "step": name, "owner": output.owner},
                )
        step = RunStep(name=name, argv=argv, inputs=inputs, outputs=outputs, depends_on=depends_on)
        self.steps.append(step)
        return step

    def add_copy(
        self,
        name: str,
        source: FileRef,
        destination: SourcePath,
        *,
        after: Step,
    ) -> CopyStep:
        self._ensure_new(name)
        if source not in after.outputs:
            raise ValidationError(
                "Copy source is not an output of the step it depends on.",
                context={"operation": "add_copy", "step": name, "after": after.name},
            )
        depends_on = self._dependencies(name, (after,))
        step = CopyStep(name=name, source=source, destination=destination, depends_on=depends_on)
        self.steps.append(step)
        return step

    def dependents_of(self, name: str) -> list[Step]:
        return [step for step in self.steps if name in step.depends_on]

    def _ensure_new(self, name: str) -> None:
        if name in self:
            raise ValidationError(
                f"Build step {name!r} is already registered.",
                hint="Give each shader output a distinct path.",
                context={"operation": "register", "step": name},
            )

    def _dependencies(self, name: str, after: tuple[Step, ...]) -> tuple[str, ...]:
        for dep in after:
            if not any(step is dep for step in self.steps):
                raise ValidationError(
                    f"Step {name!r} depends on a step outside this graph.",
                    context={"operation": "register", "step": name, "dependency": dep.name},
                )
        return tuple(dep.name for dep in after)
