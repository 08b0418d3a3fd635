"""Regex pattern engine for command signatures."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Pattern:
    name: str
    regex: str
    severity: str  # low | medium | high | critical
    description: str = ""


@dataclass
class PatternMatch:
    pattern: Pattern
    match: str
    start: int = 0


class PatternEngine:
    """Evaluates an ordered list of patterns against command text.

    Patterns compile once, at construction. A pattern whose regex does not
    compile is dropped rather than failing the whole engine.
    """

    def __init__(self, patterns: Sequence[Pattern]):
        self._patterns: list[tuple[Pattern, re.Pattern]] = []
        for pattern in patterns:
            compiled = self._compile(pattern.regex)
            if compiled is not None:
                self._patterns.append((pattern, compiled))

    @property
    def patterns(self) -> list[Pattern]:
        return [p for p, _ in self._patterns]

    def scan(self, text: str) -> list[PatternMatch]:
        """Return every pattern that matches *text*, in pattern order."""
        matches: list[PatternMatch] = []
        for pattern, compiled in self._patterns:
            m = compiled.search(text)
            if m:
                matches.append(PatternMatch(pattern=pattern, match=m.group(0), start=m.start()))
        return matches

    def first_match(self, text: str) -> PatternMatch | None:
        """Return the first pattern (in order) that matches, or None."""
        for pattern, compiled in self._patterns:
            m = compiled.search(text)
            if m:
                return PatternMatch(pattern=pattern, match=m.group(0), start=m.start())
        return None

    def has_matches(self, text: str) -> bool:
        return self.first_match(text) is not None

    # ------------------------------------------------------------------

    @staticmethod
    def _compile(regex_str: str) -> re.Pattern | None:
        flags = 0
        pattern = regex_str
        if pattern.startswith("(?i)"):
            flags |= re.IGNORECASE
            pattern = pattern[4:]
        try:
            return re.compile(pattern, flags)
        except re.error:
            return None
