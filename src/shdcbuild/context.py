"""Explicit build context threaded through registration and execution."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

from shdcbuild.observability import StructuredLogger
from shdcbuild.platforms import HostPlatform, host_platform


@dataclass(frozen=True, slots=True)
class BuildContext:
    source_root: Path
    build_root: Path
    host: HostPlatform = field(default_factory=host_platform)
    logger: StructuredLogger = field(default_factory=StructuredLogger)

    @classmethod
    def for_directory(cls, root: str | Path, *, build_dir: str = "build") -> BuildContext:
        """Context with the build root nested under ``root``."""
        source_root = Path(root)
        return cls(source_root=source_root, build_root=source_root / build_dir)

    def absolute(self) -> BuildContext:
        """Same context with both roots anchored at the current working directory."""
        return replace(
            self,
            source_root=self.source_root.absolute(),
            build_root=self.build_root.absolute(),
        )
