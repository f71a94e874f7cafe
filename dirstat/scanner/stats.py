"""Per-root running aggregates."""

from dataclasses import dataclass, field

from dirstat.patterns.rules import EntryKind, PatternRule
from dirstat.scanner.filesystem import file_extension
from dirstat.scanner.models import EntryInfo, ScanRoot

AGE_THRESHOLDS = (1, 2, 3, 4, 5, 10, 20, 30, 182, 365, 730, 1095, 1460, 1825)
SECONDS_PER_DAY = 86400


@dataclass
class SizeAndCount:
    size: int = 0
    count: int = 0

    def add(self, size: int) -> None:
        self.size += size
        self.count += 1


@dataclass
class FileExtension:
    extension: str
    size: int = 0
    count: int = 0


@dataclass
class AgeBucket:
    """Cumulative histogram bucket: files at least ``days_ago`` days old."""

    days_ago: int
    created: SizeAndCount = field(default_factory=SizeAndCount)
    modified: SizeAndCount = field(default_factory=SizeAndCount)


@dataclass(frozen=True)
class PatternMatch:
    rule_text: str
    rule_options: str
    path: str
    kind: EntryKind
    size: int
    created: float
    modified: float


def age_in_days(now: float, timestamp: float) -> int:
    """Whole days elapsed between ``timestamp`` and ``now``, truncated toward zero."""
    return int((now - timestamp) / SECONDS_PER_DAY)


class StatsAccumulator:
    """Aggregates collected while walking one scan root.

    Owned by a single walker until ``finish`` is called, after which the
    accumulator is frozen and any further update raises RuntimeError.
    """

    def __init__(self, root: ScanRoot) -> None:
        self.root = root
        self.total_size = 0
        self.file_count = 0
        self.directory_count = 0
        self.largest_file_path: str | None = None
        self.largest_file_size = 0
        self.long_paths: list[str] = []
        self.failed_directories: list[str] = []
        self.pattern_matches: list[PatternMatch] = []
        self.extensions: dict[str, FileExtension] = {}
        self.age_buckets: dict[int, AgeBucket] = {days: AgeBucket(days) for days in AGE_THRESHOLDS}
        self.elapsed_seconds = 0.0
        self.frozen = False

    def add_directory(self) -> None:
        self._ensure_open()
        self.directory_count += 1

    def add_file(self, path: str, size: int) -> None:
        self._ensure_open()
        self.file_count += 1
        self.total_size += size
        # Strictly greater: ties keep the first file seen.
        if size > self.largest_file_size:
            self.largest_file_size = size
            self.largest_file_path = path

    def add_long_path(self, path: str) -> None:
        self._ensure_open()
        self.long_paths.append(path)

    def add_failed_directory(self, path: str) -> None:
        self._ensure_open()
        self.failed_directories.append(path)

    def add_match(self, rule: PatternRule, path: str, kind: EntryKind, entry: EntryInfo) -> None:
        self._ensure_open()
        self.pattern_matches.append(
            PatternMatch(
                rule_text=rule.text,
                rule_options=rule.options.describe(),
                path=path,
                kind=kind,
                size=entry.size if kind is EntryKind.FILE else 0,
                created=entry.created,
                modified=entry.modified,
            )
        )

    def add_extension(self, filename: str, size: int) -> None:
        self._ensure_open()
        ext = file_extension(filename)
        record = self.extensions.get(ext)
        if record is None:
            record = self.extensions[ext] = FileExtension(ext)
        record.size += size
        record.count += 1

    def add_age(self, size: int, created: float, modified: float, now: float) -> None:
        """Add a file to every bucket its created and modified ages reach.

        Files never modified after creation only count on the created side.
        """
        self._ensure_open()
        created_days = age_in_days(now, created)
        modified_days = age_in_days(now, modified)
        was_modified = created != modified
        for days, bucket in self.age_buckets.items():
            if days <= created_days:
                bucket.created.add(size)
            if was_modified and days <= modified_days:
                bucket.modified.add(size)

    def finish(self, elapsed_seconds: float) -> None:
        self._ensure_open()
        self.elapsed_seconds = elapsed_seconds
        self.frozen = True

    def _ensure_open(self) -> None:
        if self.frozen:
            raise RuntimeError(f"Statistics for {self.root.path} are already finished")
