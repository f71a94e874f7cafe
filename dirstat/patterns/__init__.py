"""Name and path pattern matching."""

from .loader import PatternFileError, load_pattern_file, parse_pattern_lines
from .rules import EntryKind, MatchSubject, PatternRule, PatternSet, RuleOptions, Syntax, SyntaxKind

__all__ = [
    "EntryKind",
    "MatchSubject",
    "PatternFileError",
    "PatternRule",
    "PatternSet",
    "RuleOptions",
    "Syntax",
    "SyntaxKind",
    "load_pattern_file",
    "parse_pattern_lines",
]
