"""JSON report of scan results."""

import json
import logging
import os
import stat
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from dirstat.scanner.progress import format_duration
from dirstat.scanner.stats import PatternMatch, StatsAccumulator

logger = logging.getLogger(__name__)


class OutputWriteError(Exception):
    """Raised when the report file cannot be written."""


def stats_to_dict(stats: StatsAccumulator) -> dict[str, Any]:
    """Convert finished statistics to the report structure."""
    return {
        "Directory": {
            "Path": stats.root.path,
            "TagList": [{"Name": tag.name, "Value": tag.value} for tag in stats.root.tags]
            if stats.root.tags
            else None,
        },
        "LargestFilePath": stats.largest_file_path,
        "LargestFileSize": stats.largest_file_size,
        "TotalSize": stats.total_size,
        "FileCount": stats.file_count,
        "DirectoryCount": stats.directory_count,
        "ScanTime": format_duration(stats.elapsed_seconds),
        "ScanTimeInMS": round(stats.elapsed_seconds * 1000),
        "LongPathList": list(stats.long_paths),
        "FailedDirectoryList": list(stats.failed_directories),
        "PatternMatchList": [_match_to_dict(m) for m in stats.pattern_matches],
        "FileExtensionList": [
            {"Extension": ext.extension, "Size": ext.size, "Count": ext.count}
            for ext in stats.extensions.values()
        ],
        "FileChangedList": [
            {
                "DaysAgo": bucket.days_ago,
                "Created": {"Size": bucket.created.size, "Count": bucket.created.count},
                "Modified": {"Size": bucket.modified.size, "Count": bucket.modified.count},
            }
            for bucket in stats.age_buckets.values()
        ],
    }


def _match_to_dict(match: PatternMatch) -> dict[str, Any]:
    return {
        "Pattern": match.rule_text,
        "Options": match.rule_options,
        "Path": match.path,
        "Kind": match.kind.value,
        "Size": match.size,
        "Created": _format_timestamp(match.created),
        "Modified": _format_timestamp(match.modified),
    }


def _format_timestamp(timestamp: float) -> str | None:
    try:
        return datetime.fromtimestamp(timestamp).isoformat()
    except (OverflowError, OSError, ValueError):
        return None


def render_report(results: list[StatsAccumulator], indent: int | None = None) -> str:
    return json.dumps([stats_to_dict(s) for s in results], ensure_ascii=False, indent=indent)


def write_report(results: list[StatsAccumulator], output_path: Path, indent: int | None = None) -> None:
    """Write the report atomically: either the complete file appears or nothing changes."""
    content = render_report(results, indent=indent)
    directory = output_path.parent

    tmp_name = None
    try:
        mode = _report_mode(output_path)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=directory,
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, output_path)
    except OSError as e:
        if tmp_name is not None:
            _remove_quietly(tmp_name)
        raise OutputWriteError(f"Failed to write analysis data to {output_path}: {e}") from e

    logger.info("Wrote %d results to %s", len(results), output_path)


def _report_mode(output_path: Path) -> int:
    """Keep the mode of a report being replaced, else use the umask default for new files."""
    try:
        return stat.S_IMODE(os.stat(output_path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary file %s: %s", path, e)
