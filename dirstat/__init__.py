"""DirStat - directory tree statistics and pattern reporting."""

__version__ = "0.1.0"

from dirstat.patterns import PatternSet
from dirstat.scanner import ScanOrchestrator, StatsAccumulator, TreeWalker

__all__ = ["PatternSet", "ScanOrchestrator", "StatsAccumulator", "TreeWalker"]
