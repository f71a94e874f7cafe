"""Loading scan roots from a list file."""

import json
from pathlib import Path
from typing import Any

from dirstat.config import ConfigError
from dirstat.scanner.models import ScanRoot, Tag

EXPAND_KEYS = ("groupOnSubdirectories", "groupOnImmediateChildren")


class RootListError(Exception):
    """Raised when a root list file cannot be read or is malformed."""


def load_root_list(path: Path) -> list[ScanRoot]:
    """Read scan roots from ``path``.

    The file is either a JSON array of ``{"Path", "TagList",
    "GroupOnSubdirectories"}`` objects or plain text with one path per line.
    """
    try:
        content = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise RootListError(f"File not found: {path}") from e
    except OSError as e:
        raise RootListError(f"Could not read {path}: {e}") from e

    if content.lstrip().startswith("["):
        return parse_json_roots(content, str(path))
    return [ScanRoot(line.strip()) for line in content.splitlines() if line.strip()]


def parse_json_roots(content: str, source: str = "<roots>") -> list[ScanRoot]:
    try:
        items = json.loads(content)
    except json.JSONDecodeError as e:
        raise RootListError(f"{source}: invalid JSON: {e}") from e
    if not isinstance(items, list):
        raise RootListError(f"{source}: expected a JSON array of directories")

    roots = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise RootListError(f"{source}: entry {index} is not an object")
        try:
            roots.append(_root_from_json(item))
        except ConfigError as e:
            raise RootListError(f"{source}: entry {index}: {e}") from e
    return roots


def _root_from_json(item: dict[str, Any]) -> ScanRoot:
    # Keys are matched case-insensitively.
    fields = {key.lower(): value for key, value in item.items()}

    tags = tuple(
        Tag(name=str(_get(tag, "name", "") or ""), value=str(_get(tag, "value", "") or ""))
        for tag in fields.get("taglist") or []
    )
    expand = any(bool(fields.get(key.lower())) for key in EXPAND_KEYS)
    return ScanRoot(path=str(fields.get("path") or ""), tags=tags, expand_children=expand)


def _get(mapping: Any, key: str, default: Any) -> Any:
    if not isinstance(mapping, dict):
        raise ConfigError("tags must be objects with Name and Value")
    for k, value in mapping.items():
        if k.lower() == key:
            return value
    return default
