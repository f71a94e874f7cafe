"""Depth-first traversal of one scan root."""

import logging
import os
import time
from collections.abc import Callable

from dirstat.config import ConfigError, ScannerConfig
from dirstat.patterns.rules import EntryKind, PatternSet
from dirstat.scanner.filesystem import directory_identity, list_directory
from dirstat.scanner.models import EntryInfo, ScanRoot
from dirstat.scanner.progress import ProgressReporter
from dirstat.scanner.stats import StatsAccumulator

logger = logging.getLogger(__name__)

Lister = Callable[[str], list[EntryInfo]]
Identify = Callable[[str], tuple[int, int] | None]
CancelCheck = Callable[[], bool]

_PSEUDO_ENTRIES = (".", "..")


class ScanCancelled(Exception):
    """Raised when a walk is stopped by its cancel check."""

    def __init__(self, stats: StatsAccumulator):
        self.stats = stats
        super().__init__(f"Scan of {stats.root.path} was cancelled")


class TreeWalker:
    """Walks a directory tree and feeds every entry to a StatsAccumulator.

    Traversal uses an explicit stack so tree depth is bounded by memory,
    not by the interpreter's recursion limit. The walker keeps no state
    between walks, so one instance can serve several roots concurrently.
    """

    def __init__(
        self,
        patterns: PatternSet | None = None,
        config: ScannerConfig | None = None,
        lister: Lister = list_directory,
        progress: ProgressReporter | None = None,
        identify: Identify = directory_identity,
    ):
        self.patterns = patterns if patterns is not None else PatternSet()
        self.config = config or ScannerConfig()
        self.lister = lister
        self.progress = progress
        self.identify = identify

    def walk(
        self,
        root: ScanRoot,
        now: float | None = None,
        cancel: CancelCheck | None = None,
    ) -> StatsAccumulator:
        """Scan ``root`` and return its finished statistics.

        Args:
            root: Tree to scan.
            now: Reference time for age analysis; shared by every root of a run.
            cancel: Checked before each directory is read.

        Returns:
            Frozen accumulator for the root.
        """
        if not root.path:
            raise ConfigError("Path cannot be empty")
        if now is None:
            now = time.time()

        stats = StatsAccumulator(root)
        root_path = _normalize_root(root.path)
        visited: set[tuple[int, int]] = set()
        root_identity = self.identify(root_path)
        if _is_usable(root_identity):
            visited.add(root_identity)
        stack = [root_path]
        started = time.perf_counter()

        logger.info("Starting scan of %s", root.path)
        while stack:
            if cancel is not None and cancel():
                stats.finish(time.perf_counter() - started)
                raise ScanCancelled(stats)

            path = stack.pop()
            try:
                entries = self.lister(path)
            except PermissionError:
                logger.warning("Permission denied listing directory: %s", path)
                stats.add_failed_directory(path)
                continue
            except OSError as e:
                logger.error("Error listing directory %s: %s", path, e)
                stats.add_failed_directory(path)
                continue

            for entry in entries:
                if entry.name in _PSEUDO_ENTRIES:
                    continue
                full_path = os.path.join(path, entry.name)
                if len(full_path) > self.config.long_path_threshold:
                    stats.add_long_path(full_path)

                if entry.is_dir:
                    self._visit_directory(stats, stack, visited, entry, full_path)
                else:
                    self._visit_file(stats, entry, full_path, now)
                    if self.progress is not None:
                        self.progress.report_if_needed(stats, path)

        stats.finish(time.perf_counter() - started)
        logger.info(
            "Finished scan of %s: %d files, %d directories, %d failed",
            root.path,
            stats.file_count,
            stats.directory_count,
            len(stats.failed_directories),
        )
        return stats

    def _visit_directory(
        self,
        stats: StatsAccumulator,
        stack: list[str],
        visited: set[tuple[int, int]],
        entry: EntryInfo,
        full_path: str,
    ) -> None:
        stats.add_directory()
        if not _is_usable(entry.identity):
            stack.append(full_path)
        elif entry.identity not in visited:
            visited.add(entry.identity)
            stack.append(full_path)
        else:
            logger.debug("Directory already visited, not descending: %s", full_path)

        rule = self.patterns.resolve(EntryKind.DIRECTORY, entry.name, full_path)
        if rule is not None:
            stats.add_match(rule, full_path, EntryKind.DIRECTORY, entry)

    def _visit_file(
        self,
        stats: StatsAccumulator,
        entry: EntryInfo,
        full_path: str,
        now: float,
    ) -> None:
        stats.add_file(full_path, entry.size)

        rule = self.patterns.resolve(EntryKind.FILE, entry.name, full_path)
        if rule is not None:
            stats.add_match(rule, full_path, EntryKind.FILE, entry)

        config = self.config
        if config.analyze_extensions and (not config.extensions_for_matches_only or rule is not None):
            stats.add_extension(entry.name, entry.size)

        if config.analyze_age:
            stats.add_age(entry.size, entry.created, entry.modified, now)


def _is_usable(identity: tuple[int, int] | None) -> bool:
    return identity is not None and identity[1] != 0


def _normalize_root(path: str) -> str:
    stripped = path.rstrip("/" + os.sep)
    if not stripped or (len(stripped) == 2 and stripped[1] == ":"):
        # Filesystem or drive root keeps its separator.
        return stripped + os.sep if stripped else os.sep
    return stripped
