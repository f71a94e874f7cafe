"""Scanner module for filesystem traversal and statistics."""

from .filesystem import file_extension, list_directory
from .models import EntryInfo, ScanRoot, Tag
from .orchestrator import ScanOrchestrator, expand_roots
from .progress import ProgressReporter
from .stats import AGE_THRESHOLDS, StatsAccumulator
from .walker import ScanCancelled, TreeWalker

__all__ = [
    "AGE_THRESHOLDS",
    "EntryInfo",
    "ProgressReporter",
    "ScanCancelled",
    "ScanOrchestrator",
    "ScanRoot",
    "StatsAccumulator",
    "Tag",
    "TreeWalker",
    "expand_roots",
    "file_extension",
    "list_directory",
]
