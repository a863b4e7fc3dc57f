"""Data models for analyzer results and package references."""

from dataclasses import dataclass, field
from typing import Any

# Prefix marking values filled in locally because the analyzer left them out.
DEFAULT_PREFIX = "[web-default:"
UNKNOWN = "[web-default: unknown]"
UNKNOWN_VERSION = "[web-default: 0.0.0]"
UNNAMED = "[web-default: Unnamed Mod]"


@dataclass(frozen=True)
class PackageUuid:
    """Parts of a package uuid: ``game@version/category/.../name``."""

    game: str = UNKNOWN
    version: str = UNKNOWN_VERSION
    category: str = UNKNOWN
    name: str = UNKNOWN
    path: str = ""


@dataclass(frozen=True)
class AnalysisResult:
    """Normalized output of one analyzer run over one archive."""

    valid: bool
    error: str | None = None
    id: str = UNKNOWN
    uuid: str = ""
    game: str = UNKNOWN
    name: str = UNNAMED
    description: str = ""
    version: str = UNKNOWN_VERSION
    category: str = UNKNOWN
    path: str = ""
    bytes: int = 0
    data: dict[str, Any] = field(default_factory=dict)
    dependencies: tuple[str, ...] = ()
    stdout: str = ""
    stderr: str = ""

    @property
    def is_library(self) -> bool:
        return self.data.get("type") == "library"


@dataclass(frozen=True)
class PackageDependencies:
    """Packages one analyzed package depends on."""

    package_id: str
    dependencies: tuple[str, ...] = ()
    name: str = ""
