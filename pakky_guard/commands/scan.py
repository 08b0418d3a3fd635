"""Scan commands: scan, check, extract, levels.

pakky-guard scan SOURCE:      scan every shell command in a config file or URL
pakky-guard check COMMAND...: scan commands given on the command line
pakky-guard extract SOURCE:   print the shell commands found in a config
pakky-guard levels:           list the security levels
"""
from __future__ import annotations

import json
import os
import sys
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich import print as rprint

from ..core.config_manager import ConfigManager
from ..core.config_schema import FAIL_ON_CHOICES, LEVEL_ENV_VAR
from ..core.command_allowlist import COMMAND_CATEGORIES
from ..core.extractor import extract_shell_commands
from ..core.scanner import SecurityScanResult, scan_shell_commands
from ..core.security_levels import (
    COMMAND_CATEGORIES_ORDER,
    SECURITY_LEVELS,
    SECURITY_LEVELS_ORDER,
    SecurityLevel,
    UnknownSecurityLevelError,
    get_security_level,
)
from ..core.severity import severity_at_least
from ..utils.formatter import fmt, is_agent_mode
from ..utils.loader import DocumentLoadError, load_document


def _out(text: str) -> None:
    if is_agent_mode():
        typer.echo(text)
    else:
        rprint(text)


def _err(text: str) -> None:
    if is_agent_mode():
        typer.echo(text, err=True)
    else:
        rprint(text, file=sys.stderr)


def resolve_level(cli_opt: Optional[str], manager: ConfigManager | None = None) -> SecurityLevel:
    """--level wins, then PAKKY_SECURITY_LEVEL (.env honoured), then the saved preference."""
    if cli_opt:
        return get_security_level(cli_opt)
    load_dotenv()
    env_level = os.getenv(LEVEL_ENV_VAR)
    if env_level:
        return get_security_level(env_level)
    return get_security_level((manager or ConfigManager()).load().security.level)


def _resolve_level_or_exit(cli_opt: Optional[str]) -> SecurityLevel:
    try:
        return resolve_level(cli_opt)
    except UnknownSecurityLevelError as exc:
        _err(fmt.error(fmt.text(str(exc))))
        raise typer.Exit(code=2)


def _validate_fail_on_or_exit(fail_on: Optional[str]) -> None:
    if fail_on is not None and fail_on not in FAIL_ON_CHOICES:
        _err(fmt.error(f"Invalid --fail-on value: {fmt.text(fail_on)} (expected one of: {', '.join(FAIL_ON_CHOICES)})"))
        raise typer.Exit(code=2)


def _load_or_exit(source: str):
    try:
        return load_document(source)
    except DocumentLoadError as exc:
        _err(fmt.error(fmt.text(str(exc))))
        raise typer.Exit(code=2)


# ── report ───────────────────────────────────────────────────────────


def _is_clean(result: SecurityScanResult) -> bool:
    return result.severity == "none" and not result.ast_parsing_failed


def _effective_severity(result: SecurityScanResult) -> str:
    # A command that could not be parsed was never validated
    if result.ast_parsing_failed and result.severity == "none":
        return "low"
    return result.severity


def _print_list(title: str, items: list[str]) -> None:
    if not items:
        return
    _out(f"\n{title}:")
    for item in items:
        _out(fmt.command(item))


def _print_report(result: SecurityScanResult, level: SecurityLevel, total: int, source: str | None) -> None:
    _out(fmt.header(f"Security scan: {fmt.text(source)}" if source else "Security scan"))
    _out(fmt.field("Security level", level.name))
    _out(fmt.field("Commands scanned", total))
    _out(fmt.field("Severity", fmt.severity(result.severity)))

    if _is_clean(result):
        _out(fmt.success("No security issues found"))
        return

    _out("")
    for warning in result.warnings:
        _out(fmt.warning(fmt.text(warning)))

    _print_list("Dangerous commands", result.dangerous_commands)
    _print_list("Obfuscated commands", result.obfuscated_commands)
    _print_list("Suspicious commands", result.suspicious_commands)
    _print_list("Blocked commands", result.blocked_commands)

    if result.recommendations:
        _out("")
        for rec in result.recommendations:
            _out(fmt.info(fmt.text(rec)))
    _out(fmt.divider())


def _finish(
    result: SecurityScanResult,
    level: SecurityLevel,
    commands: list[str],
    source: str | None,
    json_output: bool,
    quiet: bool,
    fail_on: Optional[str],
    interactive: bool,
) -> None:
    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif not (quiet and _is_clean(result)):
        _print_report(result, level, len(commands), source)

    if interactive and result.requires_confirmation:
        if typer.confirm("This configuration contains high-risk commands. Proceed anyway?", default=False):
            return
        raise typer.Exit(code=1)

    threshold = fail_on or ConfigManager().load().security.fail_on
    severity = _effective_severity(result)
    if threshold != "never" and severity != "none" and severity_at_least(severity, threshold):
        raise typer.Exit(code=1)


# ── commands ─────────────────────────────────────────────────────────


def scan(
    source: str = typer.Argument(..., help="Config file (.json/.yaml) or http(s) URL"),
    level: Optional[str] = typer.Option(None, "--level", "-l", help="STRICT | STANDARD | PERMISSIVE"),
    json_output: bool = typer.Option(False, "--json", help="Output the scan result as JSON"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only output if issues are found"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="low | medium | high | critical | never"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Ask before accepting high-risk configs"),
):
    """Scan the shell commands embedded in a configuration document."""
    security_level = _resolve_level_or_exit(level)
    _validate_fail_on_or_exit(fail_on)
    document = _load_or_exit(source)
    commands = extract_shell_commands(document)
    result = scan_shell_commands(commands, security_level)
    _finish(result, security_level, commands, source, json_output, quiet, fail_on, interactive)


def check(
    commands: List[str] = typer.Argument(..., help="Shell commands to check"),
    level: Optional[str] = typer.Option(None, "--level", "-l", help="STRICT | STANDARD | PERMISSIVE"),
    json_output: bool = typer.Option(False, "--json", help="Output the scan result as JSON"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="low | medium | high | critical | never"),
):
    """Scan shell commands passed directly on the command line."""
    security_level = _resolve_level_or_exit(level)
    _validate_fail_on_or_exit(fail_on)
    result = scan_shell_commands(commands, security_level)
    _finish(result, security_level, list(commands), None, json_output, False, fail_on, False)


def extract(
    source: str = typer.Argument(..., help="Config file (.json/.yaml) or http(s) URL"),
):
    """Print the shell commands found in a configuration document as JSON."""
    document = _load_or_exit(source)
    typer.echo(json.dumps(extract_shell_commands(document), indent=2))


def levels():
    """List the security levels and the command categories they allow."""
    for key in SECURITY_LEVELS_ORDER:
        lvl = SECURITY_LEVELS[key]
        categories = [c for c in COMMAND_CATEGORIES_ORDER if c in lvl.allowed_categories]
        _out(fmt.header(f"{lvl.name} ({key})"))
        _out(lvl.description)
        _out(fmt.field("Allowed categories", ", ".join(categories)))
        _out(fmt.field("AST validation", fmt.toggle(lvl.requires_ast_validation)))
        _out(fmt.field("Obfuscation blocking", fmt.toggle(lvl.block_obfuscation)))
        if lvl.warning:
            _out(fmt.warning(lvl.warning))
    blocked_everywhere = sorted(COMMAND_CATEGORIES["DANGEROUS"])
    _out("")
    _out(fmt.field("Never allowed", ", ".join(blocked_everywhere)))
