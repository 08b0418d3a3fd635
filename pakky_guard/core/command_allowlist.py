"""Command allowlist: command names organized by security category."""
from __future__ import annotations

from typing import Iterable

from .security_levels import COMMAND_CATEGORIES_ORDER, CommandCategory


COMMAND_CATEGORIES: dict[CommandCategory, frozenset[str]] = {
    # Read-only, no network, no destructive side effects
    "SAFE": frozenset([
        "echo", "printf", "cat", "head", "tail", "less", "more",
        "grep", "awk", "sed", "sort", "uniq", "wc", "cut", "tr",
        "ls", "pwd", "whoami", "date", "cal", "env", "printenv",
        "basename", "dirname", "realpath", "readlink",
        "test", "[", "[[", "true", "false",
        "seq", "yes", "sleep", "wait",
        "xargs", "tee", "diff", "comm", "join",
        "type", "which", "whereis", "whatis",
        "id", "groups", "hostname", "uname",
        "man", "info", "help",
        "clear", "reset", "tput",
    ]),
    # Can modify files, typically within user space
    "FILESYSTEM": frozenset([
        "mkdir", "touch", "cp", "mv", "ln",
        "chmod", "chown", "chgrp",
        "find", "locate", "stat", "file", "du", "df",
        "tar", "gzip", "gunzip", "zip", "unzip", "bzip2", "xz",
        "open", "xdg-open",
    ]),
    "NETWORK": frozenset([
        "curl", "wget", "git", "ssh", "scp", "rsync", "sftp",
        "ping", "traceroute", "dig", "nslookup", "host",
        "gh",
    ]),
    "PACKAGE_MANAGERS": frozenset([
        "brew", "npm", "npx", "yarn", "pnpm", "bun",
        "pip", "pip3", "pipx", "python", "python3",
        "gem", "bundle", "bundler",
        "cargo", "rustup",
        "go",
        "composer",
        "mas",   # Mac App Store CLI
        "code",  # VS Code CLI, for extensions
    ]),
    "SYSTEM": frozenset([
        "sudo", "doas",
        "apt", "apt-get", "dpkg",
        "yum", "dnf", "rpm",
        "pacman", "yay", "paru",
        "snap", "flatpak",
        "defaults", "launchctl", "pmset", "scutil",
        "systemctl", "service",
        "killall", "pkill",
    ]),
    # Never allowed by any security level
    "DANGEROUS": frozenset([
        "rm", "rmdir", "shred",
        "dd", "mkfs", "fdisk", "parted",
        "nc", "ncat", "netcat", "socat",
        "eval", "exec",
        "su", "passwd", "chpasswd",
        "crontab", "at",
        "kill",
        "reboot", "shutdown", "poweroff", "halt",
        "iptables", "nft", "ufw",
    ]),
}

_LOOKUP: dict[str, CommandCategory] = {
    name: category
    for category in COMMAND_CATEGORIES_ORDER
    for name in COMMAND_CATEGORIES[category]
}


def get_command_category(command: str) -> CommandCategory | None:
    """Return the category of *command*, or None if it is not in the table.

    Matching is exact after trimming and lowercasing; ``rm`` never matches
    ``rmx`` and ``mkfs`` never matches ``mkfs.ext4``.
    """
    if not isinstance(command, str):
        return None
    return _LOOKUP.get(command.strip().lower())


def is_command_allowed(
    command: str,
    allowed_categories: Iterable[CommandCategory],
    allow_unknown: bool = False,
) -> bool:
    """Check whether *command* belongs to one of *allowed_categories*.

    Unknown commands are rejected unless *allow_unknown* is set.
    """
    category = get_command_category(command)
    if category is None:
        return allow_unknown
    return category in set(allowed_categories)


def get_allowed_commands(allowed_categories: Iterable[CommandCategory]) -> list[str]:
    allowed = set(allowed_categories)
    return [
        name
        for category in COMMAND_CATEGORIES_ORDER if category in allowed
        for name in sorted(COMMAND_CATEGORIES[category])
    ]


def get_blocked_commands(allowed_categories: Iterable[CommandCategory]) -> list[str]:
    allowed = set(allowed_categories)
    return [
        name
        for category in COMMAND_CATEGORIES_ORDER if category not in allowed
        for name in sorted(COMMAND_CATEGORIES[category])
    ]
