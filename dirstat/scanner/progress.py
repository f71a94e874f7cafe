"""Progress reporting utilities for scanning."""

import sys
from datetime import timedelta

from dirstat.scanner.stats import StatsAccumulator


class ProgressReporter:
    """Reports scan progress to the user."""

    def __init__(self, interval: int = 10000):
        self.interval = interval

    def report_if_needed(self, stats: StatsAccumulator, current_directory: str) -> None:
        if stats.file_count and stats.file_count % self.interval == 0:
            self._print_progress(stats, current_directory)

    def report_completion(self, stats: StatsAccumulator) -> None:
        print(
            f"Scanned {stats.root.path}: {stats.file_count:,} files in "
            f"{stats.directory_count:,} directories ({format_duration(stats.elapsed_seconds)})"
        )
        print(f"Total size: {format_bytes(stats.total_size)}")
        if stats.failed_directories:
            print(f"Unreadable directories: {len(stats.failed_directories):,}")

    def _print_progress(self, stats: StatsAccumulator, current_directory: str) -> None:
        print(f"[{stats.file_count:,} files] Scanning: {current_directory}", file=sys.stderr)


def format_duration(seconds: float) -> str:
    """Format as ``H:MM:SS`` with a microsecond fraction when there is one."""
    return str(timedelta(seconds=seconds))


def format_bytes(size: int) -> str:
    size_f = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_f < 1024:
            return f"{size_f:.2f} {unit}"
        size_f /= 1024
    return f"{size_f:.2f} PB"
