"""Output formatter for scan reports.

Human mode renders Rich markup; agent mode (``--agent``) prints plain,
greppable tags. Anything that came from a scanned document goes through
:meth:`fmt.text` or :meth:`fmt.command` so that config content can never
inject Rich markup.
"""
from __future__ import annotations

from rich.markup import escape

_agent_mode: bool = False

SEVERITY_STYLES: dict[str, str] = {
    "critical": "bold white on red",
    "high": "bold black on yellow",
    "medium": "white on blue",
    "low": "white on green",
    "none": "dim",
}


def set_agent_mode(enabled: bool) -> None:
    global _agent_mode
    _agent_mode = enabled


def is_agent_mode() -> bool:
    return _agent_mode


class fmt:
    """Static formatting helpers."""

    @staticmethod
    def text(value: str) -> str:
        return value if _agent_mode else escape(value)

    @staticmethod
    def header(title: str) -> str:
        if _agent_mode:
            return f"=== {title} ==="
        return f"\n[bold][cyan]┌─[/cyan] {title} [cyan]─┐[/cyan][/bold]\n"

    @staticmethod
    def field(label: str, value: object) -> str:
        if _agent_mode:
            return f"{label}: {value}"
        return f"[bold]{label}:[/bold] {value}"

    @staticmethod
    def command(cmd: str) -> str:
        if _agent_mode:
            return f"  - {cmd}"
        return f"  [dim]-[/dim] [white]{escape(cmd)}[/white]"

    @staticmethod
    def success(msg: str) -> str:
        if _agent_mode:
            return f"[OK] {msg}"
        return f"[green]✓ {msg}[/green]"

    @staticmethod
    def warning(msg: str) -> str:
        if _agent_mode:
            return f"[WARN] {msg}"
        return f"[yellow]⚠  {msg}[/yellow]"

    @staticmethod
    def error(msg: str) -> str:
        if _agent_mode:
            return f"[ERROR] {msg}"
        return f"[red]✗ {msg}[/red]"

    @staticmethod
    def info(msg: str) -> str:
        if _agent_mode:
            return f"[INFO] {msg}"
        return f"[cyan]→ {msg}[/cyan]"

    @staticmethod
    def severity(level: str) -> str:
        tag = level.upper()
        if _agent_mode:
            return f"[{tag}]"
        style = SEVERITY_STYLES.get(level)
        return f"[{style}] {tag} [/{style}]" if style else escape(f"[{tag}]")

    @staticmethod
    def toggle(enabled: bool) -> str:
        if _agent_mode:
            return "on" if enabled else "off"
        return "[green]on[/green]" if enabled else "[dim]off[/dim]"

    @staticmethod
    def divider() -> str:
        if _agent_mode:
            return "---"
        return "[dim]" + "═" * 50 + "[/dim]"
