"""Pattern rules and first-match-wins rule resolution."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class EntryKind(Enum):
    """Kind of filesystem entry a rule can apply to."""

    FILE = "File"
    DIRECTORY = "Directory"


class MatchSubject(Enum):
    """Which string of an entry a rule is tested against."""

    NAME = "Name"
    PATH = "Path"


class Syntax(Enum):
    """Pattern syntax selected by an option block."""

    SIMPLE = "Simple"
    REGEX = "Regex"


class SyntaxKind(Enum):
    """Concrete matching strategy of a constructed rule."""

    LITERAL = "literal"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    CONTAINS = "contains"
    REGEX = "regex"


@dataclass(frozen=True)
class RuleOptions:
    """Validated combination of scope, subject and syntax flags."""

    applies_to: frozenset[EntryKind]
    match_on: frozenset[MatchSubject]
    syntax: Syntax

    def __post_init__(self) -> None:
        if not self.applies_to:
            raise ValueError("FILE or DIRECTORY (or both) must be present in options")
        if not self.match_on:
            raise ValueError("NAME or PATH (or both) must be present in options")

    @property
    def applies_to_files(self) -> bool:
        return EntryKind.FILE in self.applies_to

    @property
    def applies_to_directories(self) -> bool:
        return EntryKind.DIRECTORY in self.applies_to

    @property
    def matches_on_name(self) -> bool:
        return MatchSubject.NAME in self.match_on

    @property
    def matches_on_path(self) -> bool:
        return MatchSubject.PATH in self.match_on

    @property
    def is_regex(self) -> bool:
        return self.syntax is Syntax.REGEX

    def describe(self) -> str:
        """Return a stable, human-readable flag list, e.g. ``File, Name, Simple``."""
        parts = [kind.value for kind in EntryKind if kind in self.applies_to]
        parts += [subject.value for subject in MatchSubject if subject in self.match_on]
        parts.append(self.syntax.value)
        return ", ".join(parts)


DEFAULT_OPTIONS = RuleOptions(
    applies_to=frozenset({EntryKind.FILE}),
    match_on=frozenset({MatchSubject.NAME}),
    syntax=Syntax.SIMPLE,
)


@dataclass(frozen=True)
class PatternRule:
    """One parsed pattern together with the options it was declared under."""

    text: str
    options: RuleOptions
    kind: SyntaxKind
    needle: str
    regex: re.Pattern[str] | None = field(default=None, compare=False)

    @classmethod
    def simple(cls, text: str, options: RuleOptions = DEFAULT_OPTIONS) -> "PatternRule":
        """Build a wildcard rule.

        A leading and/or trailing asterisk selects suffix, prefix or contains
        matching on the remaining substring; without asterisks the pattern is
        compared for equality. All comparisons ignore case.
        """
        if not text or not text.strip("*"):
            raise ValueError(f"Invalid pattern {text!r}: pattern has no text to match")

        starts = text.startswith("*")
        ends = text.endswith("*")
        if starts and ends:
            if len(text) < 3:
                raise ValueError(f"Invalid pattern {text!r}")
            kind, needle = SyntaxKind.CONTAINS, text[1:-1]
        elif starts:
            kind, needle = SyntaxKind.SUFFIX, text[1:]
        elif ends:
            kind, needle = SyntaxKind.PREFIX, text[:-1]
        else:
            kind, needle = SyntaxKind.LITERAL, text

        return cls(text=text, options=options, kind=kind, needle=needle.casefold())

    @classmethod
    def regular_expression(cls, text: str, options: RuleOptions) -> "PatternRule":
        """Build a case-insensitive regular expression rule."""
        try:
            compiled = re.compile(text, re.IGNORECASE)
        except re.error as e:
            raise ValueError(f"Invalid regular expression {text!r}: {e}") from e
        return cls(text=text, options=options, kind=SyntaxKind.REGEX, needle=text, regex=compiled)

    def is_match(self, subject: str) -> bool:
        match self.kind:
            case SyntaxKind.REGEX:
                assert self.regex is not None
                return self.regex.search(subject) is not None
            case SyntaxKind.CONTAINS:
                return self.needle in subject.casefold()
            case SyntaxKind.PREFIX:
                return subject.casefold().startswith(self.needle)
            case SyntaxKind.SUFFIX:
                return subject.casefold().endswith(self.needle)
            case SyntaxKind.LITERAL:
                return subject.casefold() == self.needle
        return False

    def matches_entry(self, name: str, full_path: str) -> bool:
        if self.options.matches_on_name and self.is_match(name):
            return True
        return self.options.matches_on_path and self.is_match(full_path)


class PatternSet:
    """Ordered rule list, partitioned by the kind of entry each rule applies to."""

    def __init__(self, rules: Iterable[PatternRule] = ()) -> None:
        self.rules: list[PatternRule] = list(rules)
        self.file_rules = [r for r in self.rules if r.options.applies_to_files]
        self.directory_rules = [r for r in self.rules if r.options.applies_to_directories]

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def rules_for(self, kind: EntryKind) -> list[PatternRule]:
        if kind is EntryKind.DIRECTORY:
            return self.directory_rules
        return self.file_rules

    def resolve(self, kind: EntryKind, name: str, full_path: str) -> PatternRule | None:
        """Return the first declared rule matching the entry, if any."""
        for rule in self.rules_for(kind):
            if rule.matches_entry(name, full_path):
                return rule
        return None
