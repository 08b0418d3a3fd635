"""Centralized command risk rules.

Single source of truth for the dangerous and suspicious command
signatures, imported by the scanner and the CLI. Signatures are matched
against the raw command text so that shell the grammar parser cannot
handle is still caught. Lists are ordered; the first match wins.
"""
from __future__ import annotations

from .pattern_engine import Pattern, PatternEngine


def _p(name: str, regex: str, severity: str, description: str = "") -> Pattern:
    # Case-insensitive: macOS filesystems resolve `CURL` and `SH` too.
    return Pattern(name=name, regex="(?i)" + regex, severity=severity, description=description)


_ROOT_TARGET = r"[\"']?(?:/(?:[\w.-]+/?)?|/\*|~/?|\$HOME/?|\$\{HOME\}/?)[\"']?(?=\s|$|[;&|)])"
_SYSTEM_DIRS = r"(?:/etc/|/usr/(?:local/)?s?bin/|/s?bin/|/System/|/Library/Launch(?:Agents|Daemons)/)"
_USER_RC = r"[\"']?(?:~|\$HOME|\$\{HOME\})/\.(?:ssh/|bashrc|bash_profile|bash_login|zshrc|zprofile|zshenv|zlogin|profile)"
_SHELLS = r"(?:(?:ba|z|da|k|c|tc|fi)?sh|python[23]?|perl|ruby|node|php)\b"
_WRITE = r"(?:>>?|\btee\s+(?:-a\s+)?)\s*"

DANGEROUS_PATTERNS: tuple[Pattern, ...] = (
    # Destructive
    _p("Recursive root deletion",
       r"\brm\s+(?:-{1,2}[\w-]+\s+)*-[a-z]*[rf][a-z]*\s+(?:-{1,2}[\w-]+\s+)*" + _ROOT_TARGET,
       "critical", "Recursive or forced deletion of a root-level or home path"),
    _p("Root preservation disabled", r"--no-preserve-root\b", "critical"),
    _p("Raw disk write", r"\bdd\b[^|;&]*\bof=/dev/(?:r?disk|sd|hd|nvme|mmcblk|xvd|vd)", "critical"),
    _p("Device overwrite", r">\s*/dev/(?:r?disk|sd|hd|nvme|mmcblk|xvd|vd)\w*", "critical"),
    _p("Filesystem format", r"\bmkfs(?:\.\w+)?\b|\b(?:fdisk|parted|wipefs)\b", "critical"),
    _p("Disk erase", r"\bdiskutil\s+(?:erase\w*|partitionDisk|zeroDisk|secureErase|reformat)\b", "critical"),
    _p("Fork bomb", r"([\w:]+)\s*\(\)\s*\{\s*\1\s*\|\s*\1\s*&\s*\}", "critical"),
    # Remote code execution
    _p("Remote script execution", r"\b(?:curl|wget)\b.*\|\s*(?:sudo\s+(?:-\S+\s+)*)?" + _SHELLS,
       "critical", "Downloaded content piped straight into an interpreter"),
    _p("Remote script via process substitution", r"\b" + _SHELLS + r"\s*<\(\s*(?:curl|wget)\b", "critical"),
    _p("Command substitution", r"\$\(", "high", "Output of a nested command spliced into this one"),
    _p("Backtick substitution", r"`[^`]*`", "high"),
    _p("Inline interpreter", r"\bpython[23]?(?:\.\d+)?\s+(?:-[a-z]+\s+)*-c\b", "high"),
    _p("Inline interpreter", r"\b(?:perl|ruby|node|osascript)\s+(?:-[a-z]+\s+)*-e\b", "high"),
    _p("Inline interpreter", r"\bphp\s+(?:-[a-z]+\s+)*-r\b", "high"),
    _p("Eval/exec", r"(?:^|[\s;|&(])(?:eval|exec)(?:\s|$)", "high"),
    # Encoded payloads
    _p("Base64 decode", r"\bbase64\s+(?:-\w+\s+)*(?:-d|--decode)\b", "high"),
    _p("Hex decode", r"\bxxd\s+(?:-\w+\s+)*-r(?:evert)?\b", "high"),
    _p("OpenSSL decode", r"\bopenssl\s+(?:enc|base64)\b.*\s-d\b", "high"),
    _p("Encoded string", r"\b(?:printf|echo\s+-e)\s+.*\\(?:x[0-9a-f]{2}|[0-7]{3})", "high"),
    _p("Encoded string", r"\$'[^']*\\(?:x[0-9a-f]{2}|[0-7]{3}|u[0-9a-f]{4})", "high"),
    # Network listeners and relays
    _p("Network relay", r"(?:^|[\s;|&(])(?:nc|ncat|netcat|socat)(?:\s|$)", "high"),
    _p("Raw socket device", r"/dev/(?:tcp|udp)/", "high"),
    # Privilege changes
    _p("Setuid/setgid bit", r"\bchmod\s+(?:-\w+\s+)*(?:[ugoa]*\+[rwxt]*s|[2-7][0-7]{3})\b", "high"),
    _p("Root ownership", r"\bchown\s+(?:-\w+\s+)*(?:root|0)(?::\w*)?(?:\s|$)", "high"),
    _p("Privileged shell", r"\bsudo\s+(?:-\w+\s+)*(?:-i|-s|su)\b|(?:^|[\s;|&(])su(?:\s+-)?(?:\s+root)?\s*$", "high"),
    # Writes into system locations
    _p("System directory write", _WRITE + _SYSTEM_DIRS, "high"),
    _p("System directory write", r"\b(?:cp|mv|ln|install)\s+[^;&|]*\s" + _SYSTEM_DIRS, "high"),
    _p("Shell profile or SSH write", _WRITE + _USER_RC, "high"),
    _p("SSH key tampering", r"(?:" + _WRITE + r"|\b(?:cp|mv|ln|install)\s+[^;&|]*\s)[\"']?[^\s;&|]*authorized_keys", "high"),
    # Persistence
    _p("Scheduled task", r"\bcrontab\b|/etc/cron|/var/spool/cron", "high"),
    _p("Scheduled task", r"\blaunchctl\s+(?:load|bootstrap|submit)\b", "high"),
    _p("Scheduled task", r"(?:^|[;|&(]\s*)at\s+(?:now|midnight|noon|teatime|\d)", "high"),
)

SUSPICIOUS_PATTERNS: tuple[Pattern, ...] = (
    _p("Privilege escalation", r"(?:^|[\s;|&(])(?:sudo|doas)(?:\s|$)", "medium"),
    _p("Download", r"(?:^|[\s;|&(])(?:curl|wget)(?:\s|$)", "medium"),
    _p("Repository clone", r"\bgit\s+(?:-\S+\s+)*clone\b|\bgh\s+repo\s+clone\b", "medium"),
    _p("Package install",
       r"\b(?:brew|npm|pnpm|yarn|bun|pip[23]?|pipx|gem|cargo|go|composer|apt(?:-get)?|dnf|yum|pacman|snap|flatpak|mas)"
       r"\s+(?:-\S+\s+)*(?:install|add|get|i)\b",
       "medium"),
    _p("Package install", r"\bcode\s+--install-extension\b", "medium"),
    _p("Environment change", r"\bexport\s+\w+=|(?:^|[\s;&|])PATH=|\bunset\s+\w", "medium"),
    _p("Alias change", r"\b(?:alias|unalias)\s+\w", "medium"),
    _p("Script sourcing", r"(?:^|[\s;&|(])source\s+\S|(?:^|[;&|(]\s*)\.\s+[\w~/.$\"']", "medium"),
)

_DANGEROUS_ENGINE = PatternEngine(DANGEROUS_PATTERNS)
_SUSPICIOUS_ENGINE = PatternEngine(SUSPICIOUS_PATTERNS)


def find_dangerous_pattern(command: str) -> Pattern | None:
    """Return the first dangerous signature matching *command*, if any."""
    match = _DANGEROUS_ENGINE.first_match(command)
    return match.pattern if match else None


def find_suspicious_pattern(command: str) -> Pattern | None:
    match = _SUSPICIOUS_ENGINE.first_match(command)
    return match.pattern if match else None


def assess_command_risk(command: str) -> str:
    """Assess risk level of a single command string.

    critical/high come from the dangerous signature that matched, medium
    from any suspicious signature, low otherwise.
    """
    dangerous = find_dangerous_pattern(command)
    if dangerous:
        return dangerous.severity
    if find_suspicious_pattern(command):
        return "medium"
    return "low"
