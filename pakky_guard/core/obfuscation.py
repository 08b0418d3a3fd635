"""Heuristics for shell obfuscation techniques.

Each check is independent and every technique that matches is reported.
Checks that only make sense where the shell would actually expand the
text (quote splitting, backslash splitting, brace expansion, wildcard
paths) run on the command with its quoted regions blanked out.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass
class ObfuscationResult:
    is_obfuscated: bool = False
    techniques: list[str] = field(default_factory=list)


_QUOTED = re.compile(r"'[^']*'|\"(?:[^\"\\]|\\.)*\"")

_QUOTE_SPLITTING = re.compile(
    # Anchored at a word start: `-m"msg"` does not match
    r"(?:^|(?<=[\s;|&(`]))\w+(['\"])\w+\1"          # c"ur"l, r'm'
    r"|(?:^|(?<=[\s;|&(`]))(['\"])\w+\2(['\"])\w+\3"  # 'r''m'
    r"|(?:^|(?<=[\s;|&(`]))\w+(['\"])\4\w"           # r''m
)
_BACKSLASH_SPLITTING = re.compile(r"[a-zA-Z]\\[a-zA-Z]|(?:^|[\s;|&(])\\[a-zA-Z]")
_IFS = re.compile(r"\$\{?IFS\}?")
_BRACE_EXPANSION = re.compile(r"(?<!\$)\{[^{}\s,]*,[^{}\s]*\}")
_ESCAPES = re.compile(r"\\x[0-9a-fA-F]{2}|\\[0-7]{3}|\\u[0-9a-fA-F]{4}|\\U[0-9a-fA-F]{8}")
_BASE64_PIPE = re.compile(
    r"\|\s*base64\s+(?:-\w+\s+)*(?:-d|-D|--decode)\b"
    r"|\bbase64\s+(?:-\w+\s+)*(?:-d|-D|--decode)\b[^|]*\|"
)
_PARAM_MANIPULATION = re.compile(
    r"\$\{\w+(?::\s?-?\d|//?[^}]*/|##?|%%?|\^|,)[^}]*\}"
    r"|\$\{!\w+\}"
)
_WILDCARD_PATH = re.compile(
    r"(?:^|[\s;|&(])/(?:[\w.*\[\]-]*/)*[\w.*\[\]-]*\?[\w.?*\[\]-]*"
    r"|(?:^|[\s;|&(])/[\w.-]*\*[\w.-]*/"
)
_EMPTY_INSERTION = re.compile(
    r"\w\$(?:\(\)|\{\}|@|\*)\w"
    r"|\w\$(?:\(\)|\{\})"
    r"|\$(?:\(\)|\{\})\w"
)
_REVERSAL = re.compile(r"\|\s*rev\b")

# (label, regex, runs on unquoted text)
_CHECKS: tuple[tuple[str, re.Pattern, bool], ...] = (
    ("Quote splitting", _QUOTE_SPLITTING, False),
    ("Backslash character splitting", _BACKSLASH_SPLITTING, True),
    ("IFS variable bypass", _IFS, False),
    ("Brace expansion", _BRACE_EXPANSION, True),
    ("Hex/octal/unicode escape sequences", _ESCAPES, False),
    ("Base64 decode piping", _BASE64_PIPE, False),
    ("Parameter expansion manipulation", _PARAM_MANIPULATION, False),
    ("Wildcard path obfuscation", _WILDCARD_PATH, True),
    ("Empty variable insertion", _EMPTY_INSERTION, False),
    ("String reversal", _REVERSAL, False),
)

TECHNIQUES: tuple[str, ...] = tuple(label for label, _, _ in _CHECKS)


def _strip_quoted(command: str) -> str:
    return _QUOTED.sub(" ", command)


def detect_obfuscation(command: str) -> ObfuscationResult:
    """Check *command* for techniques used to slip past text filters."""
    if not isinstance(command, str) or not command:
        return ObfuscationResult()

    unquoted = _strip_quoted(command)
    techniques = [
        label
        for label, regex, on_unquoted in _CHECKS
        if regex.search(unquoted if on_unquoted else command)
    ]
    return ObfuscationResult(is_obfuscated=bool(techniques), techniques=techniques)
