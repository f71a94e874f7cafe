"""Scan roots and per-entry records."""

from dataclasses import dataclass

from dirstat.config import ConfigError


@dataclass(frozen=True)
class Tag:
    """Free-form name/value label carried through to the report."""

    name: str
    value: str


@dataclass(frozen=True)
class ScanRoot:
    """A directory tree selected for scanning."""

    path: str
    tags: tuple[Tag, ...] = ()
    expand_children: bool = False

    def __post_init__(self) -> None:
        if not self.path:
            raise ConfigError("Path cannot be empty")


@dataclass(frozen=True)
class EntryInfo:
    """One enumerated directory child, read from disk exactly once."""

    name: str
    is_dir: bool
    size: int
    created: float
    modified: float
    identity: tuple[int, int] | None = None
