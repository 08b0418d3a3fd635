"""Collect shell command strings from an arbitrary configuration document."""
from __future__ import annotations

from typing import Any

# `post_install` is the spelling used by package entries in config files.
COMMAND_KEYS = frozenset({"commands", "post-install", "post_install"})


def extract_shell_commands(document: Any) -> list[str]:
    """Return every string found under a command key, in document order.

    Walks every dict and list regardless of schema. Values of any other
    type are skipped. Duplicates are kept.
    """
    commands: list[str] = []
    _walk(document, commands)
    return commands


def _walk(node: Any, out: list[str]) -> None:
    if isinstance(node, dict):
        for key, value in node.items():
            if key in COMMAND_KEYS:
                _collect(value, out)
            else:
                _walk(value, out)
    elif isinstance(node, (list, tuple)):
        for item in node:
            _walk(item, out)


def _collect(value: Any, out: list[str]) -> None:
    if isinstance(value, str):
        out.append(value)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _collect(item, out)
    else:
        _walk(value, out)
