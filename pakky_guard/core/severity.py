"""Overall severity rating for a scan."""
from __future__ import annotations

from typing import Literal

Severity = Literal["none", "low", "medium", "high", "critical"]

SEVERITY_ORDER: dict[str, int] = {
    "none": 0,
    "low": 1,
    "medium": 2,
    "high": 3,
    "critical": 4,
}


def calculate_severity(
    *,
    has_dangerous: bool,
    has_obfuscation: bool,
    has_suspicious: bool,
    has_blocked: bool = False,
    has_unknown: bool = False,
) -> Severity:
    """Combine scan signals into one rating. The first matching rule wins."""
    if has_dangerous and has_obfuscation:
        return "critical"
    if has_dangerous:
        return "high"
    if has_obfuscation:
        return "high"
    if has_suspicious:
        return "medium"
    if has_blocked or has_unknown:
        return "low"
    return "none"


def severity_at_least(severity: str, threshold: str) -> bool:
    """True when *severity* is at or above *threshold*."""
    return SEVERITY_ORDER.get(severity, 0) >= SEVERITY_ORDER.get(threshold, 0)
