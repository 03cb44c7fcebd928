"""Scheduled audit report for the Azure integration files in a repository."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List

from ..git.patterns import detect_service_type
from .render import render

RECOMMENDATIONS = (
    "Ensure all integration files have corresponding documentation",
    "Review security configurations regularly",
    "Monitor cost implications of integrations",
    "Keep IaC templates updated with infrastructure changes",
    "Maintain integration dependency diagrams",
)


def group_by_service_type(paths: Iterable[str]) -> Dict[str, List[str]]:
    """Group paths by service type, keeping first-seen order for both levels."""
    groups: Dict[str, List[str]] = {}
    for path in paths:
        groups.setdefault(detect_service_type(path), []).append(path)
    return groups


def build_audit_report(paths: Iterable[str], *, generated: datetime) -> str:
    ordered = list(paths)
    return render(
        "audit_report.md.j2",
        generated=generated.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        total=len(ordered),
        groups=group_by_service_type(ordered),
        recommendations=RECOMMENDATIONS,
    )


__all__ = ["RECOMMENDATIONS", "build_audit_report", "group_by_service_type"]
