"""Filesystem enumeration utilities for scanning directories."""

import logging
import os
import stat

from dirstat.scanner.models import EntryInfo

logger = logging.getLogger(__name__)


def file_extension(filename: str) -> str:
    """Return the lower-cased extension including its dot, or "" if there is none.

    Only the last dot counts, so ``archive.tar.GZ`` gives ``.gz``. A name
    that starts with its only dot (``.gitignore``) is its own extension and
    a trailing dot (``file.``) means no extension.
    """
    dot_index = filename.rfind(".")
    if dot_index < 0 or dot_index == len(filename) - 1:
        return ""
    return filename[dot_index:].lower()


def list_directory(path: str) -> list[EntryInfo]:
    """Enumerate the immediate children of ``path`` sorted by name.

    Raises OSError when the directory itself cannot be read. Children that
    disappear or cannot be stat'ed between enumeration and stat are skipped.
    Symbolic links are never followed.
    """
    entries: list[EntryInfo] = []
    with os.scandir(path) as it:
        for entry in sorted(it, key=lambda e: e.name):
            info = _entry_info(entry)
            if info is not None:
                entries.append(info)
    return entries


def list_subdirectories(path: str) -> list[str]:
    """Return full paths of the immediate, non-symlinked subdirectories of ``path``."""
    subdirs: list[str] = []
    with os.scandir(path) as it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(entry.path)
    return sorted(subdirs)


def _entry_info(entry: os.DirEntry) -> EntryInfo | None:
    try:
        stat_result = entry.stat(follow_symlinks=False)
    except FileNotFoundError:
        logger.warning("Entry disappeared during scan: %s", entry.path)
        return None
    except OSError as e:
        logger.warning("Could not stat %s: %s", entry.path, e)
        return None

    is_dir = stat.S_ISDIR(stat_result.st_mode)
    return EntryInfo(
        name=entry.name,
        is_dir=is_dir,
        size=0 if is_dir else stat_result.st_size,
        created=_get_birthtime(stat_result),
        modified=stat_result.st_mtime,
        identity=_identity(stat_result) if is_dir else None,
    )


def directory_identity(path: str) -> tuple[int, int] | None:
    """Return the (device, inode) pair of ``path``, or None when it is unavailable."""
    try:
        return _identity(os.stat(path, follow_symlinks=False))
    except OSError as e:
        logger.debug("Could not stat %s: %s", path, e)
        return None


def _identity(stat_result: os.stat_result) -> tuple[int, int] | None:
    # Some platforms report 0 for st_ino from directory enumeration.
    if stat_result.st_ino == 0:
        return None
    return stat_result.st_dev, stat_result.st_ino


def _get_birthtime(stat_result: os.stat_result) -> float:
    try:
        return stat_result.st_birthtime
    except AttributeError:
        return stat_result.st_ctime
