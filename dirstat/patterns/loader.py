"""Pattern file parsing.

A pattern file is a sequence of lines. A line starting with ``::`` is an
option block whose space separated tokens (FILE, DIRECTORY, SIMPLE, REGEX,
NAME, PATH) apply to every following pattern line until the next block.
Pattern lines before the first block use ``FILE NAME SIMPLE``.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from dirstat.patterns.rules import (
    DEFAULT_OPTIONS,
    EntryKind,
    MatchSubject,
    PatternRule,
    PatternSet,
    RuleOptions,
    Syntax,
)

logger = logging.getLogger(__name__)

OPTION_MARKER = "::"

_KIND_TOKENS = {"FILE": EntryKind.FILE, "DIRECTORY": EntryKind.DIRECTORY}
_SUBJECT_TOKENS = {"NAME": MatchSubject.NAME, "PATH": MatchSubject.PATH}
_SYNTAX_TOKENS = {"SIMPLE": Syntax.SIMPLE, "REGEX": Syntax.REGEX}


class PatternFileError(Exception):
    """Raised when a pattern file cannot be read or parsed."""

    def __init__(self, message: str, source: str, line_number: int | None = None, line: str = ""):
        self.source = source
        self.line_number = line_number
        self.line = line
        location = source if line_number is None else f"{source}, line {line_number}"
        super().__init__(f"{location}: {message}")


def parse_options(line: str) -> RuleOptions:
    """Parse an option block line into validated rule options."""
    tokens = line.strip().strip(": ").split()

    applies_to: set[EntryKind] = set()
    match_on: set[MatchSubject] = set()
    syntax: Syntax | None = None

    for token in tokens:
        upper = token.upper()
        if upper in _KIND_TOKENS:
            applies_to.add(_KIND_TOKENS[upper])
        elif upper in _SUBJECT_TOKENS:
            match_on.add(_SUBJECT_TOKENS[upper])
        elif upper in _SYNTAX_TOKENS:
            if syntax is not None and syntax is not _SYNTAX_TOKENS[upper]:
                raise ValueError("REGEX and SIMPLE can not be combined")
            syntax = _SYNTAX_TOKENS[upper]
        else:
            raise ValueError(f'Unknown pattern match option "{token}"')

    if syntax is None:
        if not applies_to:
            raise ValueError("FILE or DIRECTORY (or both) must be present in options")
        raise ValueError("SIMPLE or REGEX must be present in options")

    return RuleOptions(applies_to=frozenset(applies_to), match_on=frozenset(match_on), syntax=syntax)


def build_rule(text: str, options: RuleOptions) -> PatternRule:
    if options.is_regex:
        return PatternRule.regular_expression(text, options)
    return PatternRule.simple(text, options)


def parse_pattern_lines(lines: Iterable[str], source: str = "<patterns>") -> PatternSet:
    """Parse pattern definition lines into a PatternSet, preserving declaration order."""
    rules: list[PatternRule] = []
    options = DEFAULT_OPTIONS

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue

        try:
            if line.startswith(OPTION_MARKER):
                options = parse_options(line)
                logger.debug("%s:%d: options %s", source, line_number, options.describe())
            else:
                rules.append(build_rule(line.strip(), options))
        except ValueError as e:
            raise PatternFileError(str(e), source, line_number, line) from e

    return PatternSet(rules)


def load_pattern_file(path: Path) -> PatternSet:
    """Read and parse a pattern file."""
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise PatternFileError("File not found", str(path)) from e
    except OSError as e:
        raise PatternFileError(f"Could not read file: {e}", str(path)) from e

    pattern_set = parse_pattern_lines(text.splitlines(), source=str(path))
    logger.info(
        "Loaded %d patterns from %s (%d file, %d directory)",
        len(pattern_set),
        path,
        len(pattern_set.file_rules),
        len(pattern_set.directory_rules),
    )
    return pattern_set
