"""Multi-root scan orchestration."""

import logging
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from dirstat.config import ConfigError
from dirstat.scanner.filesystem import list_subdirectories
from dirstat.scanner.models import ScanRoot
from dirstat.scanner.progress import ProgressReporter
from dirstat.scanner.stats import StatsAccumulator
from dirstat.scanner.walker import CancelCheck, TreeWalker

logger = logging.getLogger(__name__)


def expand_roots(
    roots: Iterable[ScanRoot],
    list_children: Callable[[str], list[str]] = list_subdirectories,
) -> list[ScanRoot]:
    """Replace every expand-children root with one root per immediate subdirectory.

    Tags are copied to the new roots unchanged and their expand flag is cleared.
    """
    expanded: list[ScanRoot] = []
    for root in roots:
        if not root.expand_children:
            expanded.append(root)
            continue
        try:
            children = list_children(root.path)
        except OSError as e:
            raise ConfigError(f"Cannot list subdirectories of {root.path}: {e}") from e
        logger.debug("Expanded %s into %d roots", root.path, len(children))
        expanded.extend(ScanRoot(child, root.tags, False) for child in children)
    return expanded


class ScanOrchestrator:
    """Runs a TreeWalker over every configured root."""

    def __init__(
        self,
        walker: TreeWalker,
        workers: int = 1,
        progress: ProgressReporter | None = None,
    ):
        self.walker = walker
        self.workers = workers
        self.progress = progress

    def run(
        self,
        roots: Iterable[ScanRoot],
        now: float | None = None,
        cancel: CancelCheck | None = None,
    ) -> list[StatsAccumulator]:
        """Scan all roots and return their statistics in root order.

        ``now`` is read once here so every root shares one age reference.
        """
        if now is None:
            now = time.time()
        scan_roots = expand_roots(roots)

        def scan(root: ScanRoot) -> StatsAccumulator:
            stats = self.walker.walk(root, now=now, cancel=cancel)
            if self.progress is not None:
                self.progress.report_completion(stats)
            return stats

        if self.workers <= 1 or len(scan_roots) <= 1:
            return [scan(root) for root in scan_roots]

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(scan, scan_roots))
