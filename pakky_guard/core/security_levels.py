"""Security levels: tiered presets for script validation.

Each level names the command categories it allows and whether shell
grammar validation and obfuscation blocking are mandatory. Levels are
strictly nested: every category allowed by a stricter level is allowed
by every looser one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


CommandCategory = Literal[
    "SAFE",
    "FILESYSTEM",
    "NETWORK",
    "PACKAGE_MANAGERS",
    "SYSTEM",
    "DANGEROUS",
]

# Least to most privileged
COMMAND_CATEGORIES_ORDER: tuple[CommandCategory, ...] = (
    "SAFE",
    "FILESYSTEM",
    "NETWORK",
    "PACKAGE_MANAGERS",
    "SYSTEM",
    "DANGEROUS",
)

SecurityLevelKey = Literal["STRICT", "STANDARD", "PERMISSIVE"]


class UnknownSecurityLevelError(ValueError):
    """Raised when a security level key does not name a known level."""

    def __init__(self, key: object):
        self.key = key
        valid = ", ".join(SECURITY_LEVELS)
        super().__init__(f"Unknown security level {key!r} (expected one of: {valid})")


@dataclass(frozen=True)
class SecurityLevel:
    key: SecurityLevelKey
    name: str
    description: str
    allowed_categories: frozenset[CommandCategory]
    requires_ast_validation: bool
    block_obfuscation: bool
    warning: str | None = None

    def allows(self, category: CommandCategory | None) -> bool:
        return category is not None and category in self.allowed_categories


SECURITY_LEVELS: dict[SecurityLevelKey, SecurityLevel] = {
    "STRICT": SecurityLevel(
        key="STRICT",
        name="Strict",
        description="Only safe commands allowed. No network or package installations in scripts.",
        allowed_categories=frozenset({"SAFE", "FILESYSTEM"}),
        requires_ast_validation=True,
        block_obfuscation=True,
    ),
    "STANDARD": SecurityLevel(
        key="STANDARD",
        name="Standard",
        description="Allows package managers and git in scripts. Recommended for trusted configs.",
        allowed_categories=frozenset({"SAFE", "FILESYSTEM", "NETWORK", "PACKAGE_MANAGERS"}),
        requires_ast_validation=True,
        block_obfuscation=True,
    ),
    "PERMISSIVE": SecurityLevel(
        key="PERMISSIVE",
        name="Permissive",
        description="Allows most operations with warnings. Only for fully trusted configs.",
        allowed_categories=frozenset({"SAFE", "FILESYSTEM", "NETWORK", "PACKAGE_MANAGERS", "SYSTEM"}),
        requires_ast_validation=False,
        block_obfuscation=False,
        warning=(
            "PERMISSIVE mode allows dangerous system operations including sudo commands. "
            "Only use this with configurations you completely trust. "
            "Malicious configs could compromise your system."
        ),
    ),
}

# Strictest first
SECURITY_LEVELS_ORDER: tuple[SecurityLevelKey, ...] = ("STRICT", "STANDARD", "PERMISSIVE")

DEFAULT_SECURITY_LEVEL: SecurityLevelKey = "STRICT"


def is_valid_security_level(key: object) -> bool:
    return isinstance(key, str) and key.strip().upper() in SECURITY_LEVELS


def get_security_level(key: str | SecurityLevel) -> SecurityLevel:
    """Look up a security level by key (case-insensitive).

    Passing a :class:`SecurityLevel` returns it unchanged. Unknown keys
    raise :class:`UnknownSecurityLevelError`; there is no fallback.
    """
    if isinstance(key, SecurityLevel):
        return key
    if not is_valid_security_level(key):
        raise UnknownSecurityLevelError(key)
    return SECURITY_LEVELS[key.strip().upper()]


def looser_levels(key: str | SecurityLevel) -> list[SecurityLevel]:
    """Return the levels looser than *key*, nearest first."""
    level = get_security_level(key)
    idx = SECURITY_LEVELS_ORDER.index(level.key)
    return [SECURITY_LEVELS[k] for k in SECURITY_LEVELS_ORDER[idx + 1:]]
