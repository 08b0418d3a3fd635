"""Tests for the command category table."""
import pytest

from pakky_guard.core.command_allowlist import (
    COMMAND_CATEGORIES,
    get_allowed_commands,
    get_blocked_commands,
    get_command_category,
    is_command_allowed,
)
from pakky_guard.core.security_levels import SECURITY_LEVELS


@pytest.mark.parametrize(
    "name,category",
    [
        ("echo", "SAFE"),
        ("ls", "SAFE"),
        ("mkdir", "FILESYSTEM"),
        ("curl", "NETWORK"),
        ("git", "NETWORK"),
        ("brew", "PACKAGE_MANAGERS"),
        ("npm", "PACKAGE_MANAGERS"),
        ("sudo", "SYSTEM"),
        ("rm", "DANGEROUS"),
        ("eval", "DANGEROUS"),
    ],
)
def test_known_categories(name, category):
    assert get_command_category(name) == category


def test_lookup_is_case_insensitive_and_trimmed():
    assert get_command_category("  ECHO ") == "SAFE"
    assert get_command_category("Rm") == "DANGEROUS"


def test_lookup_is_exact():
    assert get_command_category("rmx") is None
    assert get_command_category("mkfs.ext4") is None
    assert get_command_category("/bin/rm") is None
    assert get_command_category("ec") is None


def test_unknown_and_invalid():
    assert get_command_category("frobnicate") is None
    assert get_command_category("") is None
    assert get_command_category(None) is None


def test_names_are_unique_across_categories():
    seen = set()
    for names in COMMAND_CATEGORIES.values():
        assert not (seen & names)
        seen |= names


class TestIsAllowed:
    def test_allowed(self):
        assert is_command_allowed("ls", {"SAFE"})

    def test_not_in_allowed_category(self):
        assert not is_command_allowed("curl", {"SAFE", "FILESYSTEM"})

    def test_unknown_rejected_by_default(self):
        assert not is_command_allowed("frobnicate", {"SAFE"})

    def test_unknown_opt_in(self):
        assert is_command_allowed("frobnicate", {"SAFE"}, allow_unknown=True)

    def test_dangerous_never_allowed_by_levels(self):
        for level in SECURITY_LEVELS.values():
            assert not is_command_allowed("rm", level.allowed_categories)


def test_allowed_and_blocked_partition_the_table():
    cats = SECURITY_LEVELS["STRICT"].allowed_categories
    allowed = get_allowed_commands(cats)
    blocked = get_blocked_commands(cats)
    assert "echo" in allowed and "mkdir" in allowed
    assert "curl" in blocked and "rm" in blocked
    assert not set(allowed) & set(blocked)
    total = sum(len(names) for names in COMMAND_CATEGORIES.values())
    assert len(allowed) + len(blocked) == total
