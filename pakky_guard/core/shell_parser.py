"""Shell command AST parser.

Wraps bashlex to turn one command line into the ordered list of commands
it would invoke, looking through pipelines, ``&&``/``||`` chains,
subshells, command substitution and compound statements.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

import bashlex

logger = logging.getLogger(__name__)

_SUBSTITUTION_KINDS = ("commandsubstitution", "processsubstitution")
_SUBSTITUTION_RE = re.compile(r"\$\([^)]+\)|`[^`]+`")


@dataclass
class ParsedCommand:
    command: str
    args: list[str] = field(default_factory=list)
    text: str = ""
    is_piped: bool = False
    has_subshell: bool = False
    has_redirect: bool = False


@dataclass
class CommandParseResult:
    success: bool
    commands: list[ParsedCommand] = field(default_factory=list)
    raw_command: str = ""
    error: str | None = None


# ── AST walk ─────────────────────────────────────────────────────────


def _iter_substitutions(node: Any):
    """Yield command/process substitution nodes nested inside a word-like node."""
    kind = getattr(node, "kind", None)
    if kind in _SUBSTITUTION_KINDS:
        yield node
        return
    if kind == "redirect":
        target = getattr(node, "output", None)
        if target is not None and not isinstance(target, int):
            yield from _iter_substitutions(target)
        return
    for child in getattr(node, "parts", None) or []:
        yield from _iter_substitutions(child)


def _visit_substitutions(node: Any, out: list[ParsedCommand]) -> None:
    for sub in _iter_substitutions(node):
        _visit(sub.command, out, piped=False, in_subshell=True)


def _visit_command(node: Any, out: list[ParsedCommand], piped: bool, in_subshell: bool) -> None:
    parts = node.parts
    words = [p.word for p in parts if p.kind == "word"]
    has_redirect = any(p.kind == "redirect" for p in parts)

    if words and words[0]:
        name, args = words[0], words[1:]
        out.append(ParsedCommand(
            command=name,
            args=args,
            text=" ".join([name, *args]).strip(),
            is_piped=piped,
            has_subshell=in_subshell,
            has_redirect=has_redirect,
        ))

    for part in parts:
        _visit_substitutions(part, out)


def _visit_pipeline(node: Any, out: list[ParsedCommand], piped: bool, in_subshell: bool) -> None:
    stages = [p for p in node.parts if p.kind != "pipe"]
    for index, stage in enumerate(stages):
        _visit(stage, out, piped=piped or index > 0, in_subshell=in_subshell)


def _visit_list(node: Any, out: list[ParsedCommand], piped: bool, in_subshell: bool) -> None:
    for part in node.parts:
        _visit(part, out, piped=piped, in_subshell=in_subshell)


def _visit_compound(node: Any, out: list[ParsedCommand], piped: bool, in_subshell: bool) -> None:
    body = list(node.list)
    opener = body[0] if body else None
    is_subshell = (
        opener is not None
        and opener.kind == "reservedword"
        and opener.word == "("
    )
    for item in body:
        _visit(item, out, piped=piped, in_subshell=in_subshell or is_subshell)
    for redirect in getattr(node, "redirects", None) or []:
        _visit_substitutions(redirect, out)


def _visit_word(node: Any, out: list[ParsedCommand], piped: bool, in_subshell: bool) -> None:
    _visit_substitutions(node, out)


def _visit_ignored(node: Any, out: list[ParsedCommand], piped: bool, in_subshell: bool) -> None:
    return None


def _visit_children(node: Any, out: list[ParsedCommand], piped: bool, in_subshell: bool) -> None:
    """if / for / while / until / function: walk statements in order."""
    children = getattr(node, "parts", None) or getattr(node, "list", None) or []
    for child in children:
        _visit(child, out, piped=piped, in_subshell=in_subshell)


_Visitor = Callable[[Any, list, bool, bool], None]

_VISITORS: dict[str, _Visitor] = {
    "command": _visit_command,
    "pipeline": _visit_pipeline,
    "list": _visit_list,
    "compound": _visit_compound,
    "word": _visit_word,
    "assignment": _visit_word,
    "redirect": _visit_word,
    "operator": _visit_ignored,
    "pipe": _visit_ignored,
    "reservedword": _visit_ignored,
    "parameter": _visit_ignored,
    "tilde": _visit_ignored,
    "heredoc": _visit_ignored,
    "if": _visit_children,
    "for": _visit_children,
    "while": _visit_children,
    "until": _visit_children,
    "function": _visit_children,
}


def _visit(node: Any, out: list[ParsedCommand], piped: bool = False, in_subshell: bool = False) -> None:
    if node is None:
        return
    visitor = _VISITORS.get(getattr(node, "kind", ""), _visit_children)
    visitor(node, out, piped, in_subshell)


# ── Public API ───────────────────────────────────────────────────────


def parse_shell_command(command_string: str) -> CommandParseResult:
    """Parse a shell command string into the commands it invokes.

    A failed parse is reported through ``success=False`` and ``error``;
    it says nothing about whether the command is safe.
    """
    result = CommandParseResult(success=False, raw_command=command_string if isinstance(command_string, str) else "")

    if not isinstance(command_string, str) or not command_string.strip():
        result.error = "Empty or invalid command string"
        return result

    try:
        trees = bashlex.parse(command_string)
    except Exception as exc:  # bashlex raises ParsingError, NotImplementedError and others
        result.error = str(exc) or type(exc).__name__
        logger.warning("AST parsing failed for command: %s...", command_string[:50])
        return result

    commands: list[ParsedCommand] = []
    for tree in trees:
        _visit(tree, commands)
    result.commands = commands
    result.success = True
    return result


def extract_command_names(command_string: str) -> list[str]:
    """Return just the invoked command names, in order."""
    return [cmd.command for cmd in parse_shell_command(command_string).commands]


def has_subshell_or_substitution(command_string: str) -> bool:
    if _SUBSTITUTION_RE.search(command_string):
        return True
    result = parse_shell_command(command_string)
    return any(cmd.has_subshell for cmd in result.commands)


def has_piping(command_string: str) -> bool:
    result = parse_shell_command(command_string)
    return any(cmd.is_piped for cmd in result.commands)
