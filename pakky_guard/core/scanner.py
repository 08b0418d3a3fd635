"""Pre-execution security scan for shell commands found in config files.

Nothing is executed. Each command is parsed and classified against the
active security level, checked for obfuscation, and matched against the
dangerous and suspicious signatures; the signals are folded into one
:class:`SecurityScanResult`.
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

from .command_allowlist import get_command_category, is_command_allowed
from .extractor import extract_shell_commands
from .obfuscation import detect_obfuscation
from .risk_rules import find_dangerous_pattern, find_suspicious_pattern
from .security_levels import (
    DEFAULT_SECURITY_LEVEL,
    SecurityLevel,
    SecurityLevelKey,
    get_security_level,
    looser_levels,
)
from .severity import Severity, calculate_severity, severity_at_least
from .shell_parser import ParsedCommand, parse_shell_command

logger = logging.getLogger(__name__)


@dataclass
class SecurityScanResult:
    has_dangerous_content: bool = False
    has_suspicious_content: bool = False
    has_obfuscation: bool = False
    dangerous_commands: list[str] = field(default_factory=list)
    suspicious_commands: list[str] = field(default_factory=list)
    obfuscated_commands: list[str] = field(default_factory=list)
    obfuscation_techniques: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    severity: Severity = "none"
    parsed_commands: list[ParsedCommand] = field(default_factory=list)
    blocked_commands: list[str] = field(default_factory=list)
    unknown_commands: list[str] = field(default_factory=list)
    security_level: SecurityLevelKey = DEFAULT_SECURITY_LEVEL
    ast_parsing_failed: bool = False
    recommendations: list[str] = field(default_factory=list)

    @property
    def should_warn(self) -> bool:
        return self.severity != "none"

    @property
    def requires_confirmation(self) -> bool:
        return severity_at_least(self.severity, "high")

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form with camelCase keys, as the UI layer expects."""
        return _camelize(asdict(self))


def _snake_to_camel(name: str) -> str:
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), name)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_snake_to_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def _add_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


def _first_token(command: str) -> str:
    parts = command.strip().split()
    return parts[0] if parts else ""


def _should_check_suspicious(command: str, level: SecurityLevel) -> bool:
    # The default level always checks; looser levels trust commands whose
    # first token they allow.
    if level.key == DEFAULT_SECURITY_LEVEL:
        return True
    return not is_command_allowed(_first_token(command), level.allowed_categories)


# ------------------------------------------------------------------
# Scan
# ------------------------------------------------------------------


def scan_shell_commands(
    commands: Iterable[str],
    level: str | SecurityLevel = DEFAULT_SECURITY_LEVEL,
) -> SecurityScanResult:
    """Scan a batch of shell commands under *level*.

    Raises :class:`UnknownSecurityLevelError` for an unknown level key.
    Findings, however severe, are reported in the result and never raised.
    """
    security_level = get_security_level(level)
    result = SecurityScanResult(security_level=security_level.key)

    for command in commands:
        if not isinstance(command, str) or not command.strip():
            continue
        _classify(command, security_level, result)

        if security_level.block_obfuscation:
            obfuscation = detect_obfuscation(command)
            if obfuscation.is_obfuscated:
                result.has_obfuscation = True
                _add_unique(result.obfuscated_commands, command)
                for technique in obfuscation.techniques:
                    _add_unique(result.obfuscation_techniques, technique)

        if find_dangerous_pattern(command):
            result.has_dangerous_content = True
            _add_unique(result.dangerous_commands, command)
        elif _should_check_suspicious(command, security_level) and find_suspicious_pattern(command):
            result.has_suspicious_content = True
            _add_unique(result.suspicious_commands, command)

    result.warnings = _build_warnings(result, security_level)
    result.recommendations = _build_recommendations(result, security_level)
    result.severity = calculate_severity(
        has_dangerous=result.has_dangerous_content,
        has_obfuscation=result.has_obfuscation,
        has_suspicious=result.has_suspicious_content,
        has_blocked=bool(result.blocked_commands),
        has_unknown=bool(result.unknown_commands),
    )

    logger.debug(
        "scan (%s): severity=%s dangerous=%d suspicious=%d obfuscated=%d blocked=%d unknown=%d",
        security_level.key,
        result.severity,
        len(result.dangerous_commands),
        len(result.suspicious_commands),
        len(result.obfuscated_commands),
        len(result.blocked_commands),
        len(result.unknown_commands),
    )
    return result


def scan_config(document: Any, level: str | SecurityLevel = DEFAULT_SECURITY_LEVEL) -> SecurityScanResult:
    """Extract every shell command from *document* and scan them."""
    security_level = get_security_level(level)
    return scan_shell_commands(extract_shell_commands(document), security_level)


def _classify(command: str, level: SecurityLevel, result: SecurityScanResult) -> None:
    if not level.requires_ast_validation:
        return

    parsed = parse_shell_command(command)
    if not parsed.success:
        # Pattern checks still run for this command.
        result.ast_parsing_failed = True
        return

    result.parsed_commands.extend(parsed.commands)
    for cmd in parsed.commands:
        name = cmd.command.strip()
        category = get_command_category(name)
        if category is None:
            _add_unique(result.unknown_commands, name)
            _add_unique(result.blocked_commands, name)
        elif not level.allows(category):
            _add_unique(result.blocked_commands, name)


# ------------------------------------------------------------------
# Messages
# ------------------------------------------------------------------


def _build_warnings(result: SecurityScanResult, level: SecurityLevel) -> list[str]:
    """Most severe first."""
    warnings: list[str] = []

    if result.has_obfuscation:
        warnings.append(
            f"Obfuscated commands detected ({', '.join(result.obfuscation_techniques)}). "
            "This is a common technique for hiding malicious code."
        )
    if result.has_dangerous_content:
        warnings.append(
            f"Found {len(result.dangerous_commands)} potentially dangerous command(s) "
            "that could harm your system."
        )
    if result.has_suspicious_content and not result.has_dangerous_content:
        warnings.append(
            f"Found {len(result.suspicious_commands)} command(s) that download software, "
            "require elevated privileges or change your environment."
        )
    if result.blocked_commands:
        warnings.append(
            f"{len(result.blocked_commands)} command(s) not allowed by the {level.name} "
            f"security level: {', '.join(result.blocked_commands)}"
        )
    if result.unknown_commands:
        warnings.append(
            f"{len(result.unknown_commands)} unrecognized command(s): "
            f"{', '.join(result.unknown_commands)}"
        )
    if result.ast_parsing_failed:
        warnings.append("Some commands could not be parsed and were checked by pattern matching only.")
    if level.warning:
        warnings.append(level.warning)

    return warnings


def _build_recommendations(result: SecurityScanResult, level: SecurityLevel) -> list[str]:
    recommendations: list[str] = []

    known_blocked = [c for c in result.blocked_commands if c not in result.unknown_commands]
    if known_blocked:
        categories = {get_command_category(c) for c in known_blocked}
        unlockable = [c for c in known_blocked if get_command_category(c) != "DANGEROUS"]
        if unlockable:
            needed = {get_command_category(c) for c in unlockable}
            target = next(
                (lv for lv in looser_levels(level) if needed <= lv.allowed_categories),
                None,
            )
            if target is not None:
                recommendations.append(
                    f"Switch to the {target.name} security level to allow: {', '.join(unlockable)}. "
                    "Only do this if you trust the source of this configuration."
                )
        if "DANGEROUS" in categories:
            recommendations.append(
                "Commands in the DANGEROUS category are never allowed by any security level. "
                "Review them manually before running this configuration."
            )

    if result.unknown_commands and level.key == DEFAULT_SECURITY_LEVEL:
        recommendations.append(
            "Unrecognized commands are blocked by default. "
            "Verify what they do before importing this configuration."
        )

    if result.ast_parsing_failed:
        recommendations.append("Review the commands that could not be parsed before running them.")

    return recommendations
