"""pakky-guard: scan package configuration shell commands before they run."""
try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("pakky-guard")
except Exception:
    __version__ = "0.1.0"

from .core.extractor import extract_shell_commands
from .core.scanner import SecurityScanResult, scan_config, scan_shell_commands
from .core.security_levels import UnknownSecurityLevelError

scan = scan_shell_commands
extract_commands = extract_shell_commands

__all__ = [
    "SecurityScanResult",
    "UnknownSecurityLevelError",
    "extract_commands",
    "extract_shell_commands",
    "scan",
    "scan_config",
    "scan_shell_commands",
]
