"""Dashboard projections over automations.

Pure read-only functions. Nothing computed here is ever stored.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from src.director.models import Automation


def health_score(automation: Automation) -> int:
    """0-100 score rewarding reach, engagement and unattended steps."""
    unattended = sum(1 for step in automation.steps if not step.requires_human_review)
    raw = (
        45
        + automation.performance.engagements / 50
        + automation.performance.views / 1000
        + unattended * 4
    )
    return min(100, math.floor(raw))


def automation_velocity(automation: Automation) -> int:
    raw = len(automation.steps) * 12 - automation.performance.conversion_rate * 3
    return max(10, math.floor(raw))


@dataclass(frozen=True)
class DashboardTotals:
    automation_count: int
    total_views: int
    total_watch_time_minutes: int
    total_engagements: int
    average_health: int


def dashboard_totals(automations: Sequence[Automation]) -> DashboardTotals:
    if not automations:
        return DashboardTotals(0, 0, 0, 0, 0)
    return DashboardTotals(
        automation_count=len(automations),
        total_views=sum(a.performance.views for a in automations),
        total_watch_time_minutes=sum(a.performance.watch_time_minutes for a in automations),
        total_engagements=sum(a.performance.engagements for a in automations),
        average_health=math.floor(sum(health_score(a) for a in automations) / len(automations)),
    )
