"""Tests for TreeWalker."""

import os
from pathlib import Path
from types import SimpleNamespace

import pytest

from dirstat.config import ConfigError, ScannerConfig
from dirstat.patterns import parse_pattern_lines
from dirstat.patterns.rules import EntryKind
from dirstat.scanner.models import EntryInfo, ScanRoot
from dirstat.scanner.stats import SECONDS_PER_DAY
from dirstat.scanner.walker import ScanCancelled, TreeWalker

NOW = 1_700_000_000.0
OLD = NOW - 400 * SECONDS_PER_DAY
RECENT = NOW - 2 * SECONDS_PER_DAY


def _file(name: str, size: int, created: float = OLD, modified: float = OLD) -> EntryInfo:
    return EntryInfo(name=name, is_dir=False, size=size, created=created, modified=modified)


def _dir(name: str, identity: tuple[int, int] | None = None) -> EntryInfo:
    return EntryInfo(name=name, is_dir=True, size=0, created=OLD, modified=OLD, identity=identity)


class FakeLister:
    """In-memory directory tree keyed by full path."""

    def __init__(self, tree: dict[str, list[EntryInfo] | Exception]):
        self.tree = tree
        self.listed: list[str] = []

    def __call__(self, path: str) -> list[EntryInfo]:
        self.listed.append(path)
        result = self.tree.get(path, [])
        if isinstance(result, Exception):
            raise result
        return result


def _walk(tree, patterns=None, config=None, root="/r", identify=lambda path: None, **kwargs):
    lister = FakeLister(tree)
    walker = TreeWalker(patterns=patterns, config=config, lister=lister, identify=identify)
    return walker.walk(ScanRoot(root), now=NOW, **kwargs), lister


class TestTreeWalkerWithFakeTree:
    """Tests for traversal and classification against an in-memory tree."""

    def test_counts_files_and_directories(self) -> None:
        stats, _ = _walk(
            {
                "/r": [_file("a.txt", 5), _dir("sub")],
                os.path.join("/r", "sub"): [_file("b.TXT", 7), _file("c", 1)],
            }
        )

        assert stats.file_count == 3
        assert stats.directory_count == 1
        assert stats.total_size == 13
        assert stats.extensions[".txt"].count == 2
        assert stats.extensions[""].size == 1
        assert stats.frozen is True

    def test_skips_pseudo_entries(self) -> None:
        stats, lister = _walk(
            {"/r": [_dir("."), _dir(".."), _file("x", 1)]},
            patterns=parse_pattern_lines(["::DIRECTORY NAME REGEX", "."]),
        )

        assert stats.directory_count == 0
        assert stats.pattern_matches == []
        assert lister.listed == ["/r"]

    def test_failed_directory_does_not_stop_siblings(self) -> None:
        stats, _ = _walk(
            {
                "/r": [_dir("locked"), _dir("open")],
                os.path.join("/r", "locked"): PermissionError("denied"),
                os.path.join("/r", "open"): [_file("f", 3)],
            }
        )

        assert stats.failed_directories == [os.path.join("/r", "locked")]
        assert stats.directory_count == 2
        assert stats.file_count == 1

    def test_unreadable_root_is_recorded(self) -> None:
        stats, _ = _walk({"/r": FileNotFoundError("gone")})
        assert stats.failed_directories == ["/r"]
        assert stats.file_count == 0

    def test_largest_file_first_seen(self) -> None:
        stats, _ = _walk(
            {"/r": [_file("a", 10), _file("b", 50), _file("c", 50), _file("d", 30)]}
        )
        assert stats.largest_file_path == os.path.join("/r", "b")

    def test_long_paths(self) -> None:
        root = "/" + "x" * 250
        short_name = "y" * (260 - len(root) - 1)
        long_name = "z" * (261 - len(root) - 1)
        stats, _ = _walk(
            {root: [_file(short_name, 1), _dir(long_name)]},
            root=root,
        )

        assert len(os.path.join(root, short_name)) == 260
        assert stats.long_paths == [os.path.join(root, long_name)]

    def test_custom_long_path_threshold(self) -> None:
        stats, _ = _walk(
            {"/r": [_file("abc", 1)]},
            config=ScannerConfig(long_path_threshold=5),
        )
        assert stats.long_paths == [os.path.join("/r", "abc")]

    def test_pattern_matches(self) -> None:
        patterns = parse_pattern_lines(
            ["*.tmp", "report.tmp", "::DIRECTORY NAME SIMPLE", "cache"]
        )
        stats, _ = _walk(
            {
                "/r": [_file("report.tmp", 9), _file("keep.txt", 2), _dir("cache")],
            },
            patterns=patterns,
        )

        by_path = {m.path: m for m in stats.pattern_matches}
        assert len(stats.pattern_matches) == 2
        assert by_path[os.path.join("/r", "report.tmp")].rule_text == "*.tmp"
        assert by_path[os.path.join("/r", "cache")].kind is EntryKind.DIRECTORY
        assert by_path[os.path.join("/r", "cache")].size == 0

    def test_extensions_restricted_to_matches(self) -> None:
        stats, _ = _walk(
            {"/r": [_file("a.tmp", 4), _file("b.txt", 6)]},
            patterns=parse_pattern_lines(["*.tmp"]),
            config=ScannerConfig(extensions_for_matches_only=True),
        )

        assert list(stats.extensions) == [".tmp"]
        assert stats.total_size == 10
        assert stats.file_count == 2

    def test_directory_match_does_not_count_extension(self) -> None:
        stats, _ = _walk(
            {"/r": [_dir("logs.d"), _file("x.log", 1)]},
            patterns=parse_pattern_lines(["::DIRECTORY NAME SIMPLE", "*.d"]),
            config=ScannerConfig(extensions_for_matches_only=True),
        )
        assert stats.extensions == {}
        assert len(stats.pattern_matches) == 1

    def test_analysis_toggles(self) -> None:
        stats, _ = _walk(
            {"/r": [_file("a.txt", 4, created=OLD, modified=RECENT)]},
            config=ScannerConfig(analyze_age=False, analyze_extensions=False),
        )

        assert stats.extensions == {}
        assert all(b.created.count == 0 for b in stats.age_buckets.values())

    def test_age_uses_shared_now(self) -> None:
        stats, _ = _walk({"/r": [_file("a.txt", 4, created=OLD, modified=RECENT)]})

        assert stats.age_buckets[365].created.count == 1
        assert stats.age_buckets[730].created.count == 0
        assert stats.age_buckets[2].modified.count == 1
        assert stats.age_buckets[3].modified.count == 0

    def test_revisited_directory_not_descended(self) -> None:
        stats, lister = _walk(
            {
                "/r": [_dir("a", identity=(1, 10)), _dir("b", identity=(1, 20))],
                os.path.join("/r", "a"): [_dir("loop", identity=(1, 10))],
                os.path.join("/r", "b"): [],
            }
        )

        assert stats.directory_count == 3
        assert os.path.join("/r", "a", "loop") not in lister.listed

    def test_zero_identity_still_descended(self) -> None:
        stats, lister = _walk(
            {
                "/r": [_dir("a", identity=(0, 0)), _dir("b", identity=(0, 0))],
                os.path.join("/r", "a"): [_file("x", 1)],
                os.path.join("/r", "b"): [_file("y", 2)],
            }
        )

        assert stats.file_count == 2
        assert os.path.join("/r", "a") in lister.listed
        assert os.path.join("/r", "b") in lister.listed

    def test_root_mounted_inside_itself_not_descended(self) -> None:
        stats, lister = _walk(
            {
                "/r": [_dir("mnt", identity=(1, 2))],
                os.path.join("/r", "mnt"): [_file("x", 1)],
            },
            identify=lambda path: (1, 2),
        )

        assert stats.directory_count == 1
        assert stats.file_count == 0
        assert lister.listed == ["/r"]

    def test_trailing_separator_stripped(self) -> None:
        stats, lister = _walk({"/r": [_file("f", 1)]}, root="/r/")
        assert lister.listed == ["/r"]
        assert stats.largest_file_path == os.path.join("/r", "f")

    def test_cancel(self) -> None:
        with pytest.raises(ScanCancelled) as exc:
            _walk({"/r": [_file("f", 1)]}, cancel=lambda: True)
        assert exc.value.stats.frozen is True
        assert exc.value.stats.file_count == 0

    def test_empty_root_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ScanRoot("")
        with pytest.raises(ConfigError):
            TreeWalker().walk(SimpleNamespace(path=""), now=NOW)  # type: ignore[arg-type]


class TestTreeWalkerOnDisk:
    """Tests against real directory trees."""

    def test_scans_tree(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("hello")
        sub = tmp_path / "sub" / "deeper"
        sub.mkdir(parents=True)
        (sub / "b.bin").write_bytes(b"\x00" * 100)

        stats = TreeWalker().walk(ScanRoot(str(tmp_path)), now=NOW)

        assert stats.file_count == 2
        assert stats.directory_count == 2
        assert stats.total_size == 105
        assert stats.largest_file_path == str(sub / "b.bin")
        assert stats.failed_directories == []

    def test_symlinks_not_followed(self, tmp_path: Path) -> None:
        target = tmp_path / "target"
        target.mkdir()
        (target / "f.txt").write_text("x")
        (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)

        stats = TreeWalker().walk(ScanRoot(str(tmp_path)), now=NOW)

        assert stats.directory_count == 1
        assert stats.file_count == 2

    def test_deep_tree(self, tmp_path: Path) -> None:
        current = tmp_path
        for _ in range(200):
            current = current / "d"
        current.mkdir(parents=True)
        (current / "leaf.txt").write_text("leaf")

        stats = TreeWalker(config=ScannerConfig(long_path_threshold=100000)).walk(
            ScanRoot(str(tmp_path)), now=NOW
        )

        assert stats.directory_count == 200
        assert stats.file_count == 1

    def test_missing_root(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing"
        stats = TreeWalker().walk(ScanRoot(str(missing)), now=NOW)
        assert stats.failed_directories == [str(missing)]
