"""Cost aggregation for the dashboard.

Created: 2026-03-02

Daily summaries are computed from raw CostEntry records on every call.
The aggregation takes an explicit time window so callers (and tests)
decide where the day starts; today_window() gives the UTC default.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Iterable

from squadboard.mission_control.models import CostEntry, parse_iso


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("TimeWindow end must be after start")

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def today_window(now: datetime | None = None) -> TimeWindow:
    """Return the UTC calendar day containing *now*."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    start = now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    return TimeWindow(start=start, end=start + timedelta(days=1))


@dataclass
class AgentCostSummary:
    """Accumulated usage for one agent inside a window."""

    tokens_in: int = 0
    tokens_out: int = 0
    cost: float = 0.0
    turns: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokens_in": self.tokens_in,
            "tokens_out": self.tokens_out,
            "cost": self.cost,
            "turns": self.turns,
        }


@dataclass
class CostSummary:
    """Per-agent breakdown plus grand totals."""

    window: TimeWindow
    by_agent: dict[str, AgentCostSummary] = field(default_factory=dict)
    total_cost: float = 0.0
    total_tokens_in: int = 0
    total_tokens_out: int = 0
    turn_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "window": self.window.to_dict(),
            "by_agent": {name: s.to_dict() for name, s in self.by_agent.items()},
            "total_cost": self.total_cost,
            "total_tokens_in": self.total_tokens_in,
            "total_tokens_out": self.total_tokens_out,
            "turn_count": self.turn_count,
        }


def summarize_costs(
    entries: Iterable[CostEntry],
    window: TimeWindow,
    agent: str | None = None,
) -> CostSummary:
    """Group cost entries inside *window* by agent.

    Args:
        entries: Cost records to consider (any order)
        window: Only entries created in [start, end) are counted
        agent: Optional agent name to restrict the summary to

    Returns:
        CostSummary with per-agent sums and grand totals
    """
    summary = CostSummary(window=window)

    for entry in entries:
        if agent is not None and entry.agent != agent:
            continue
        if not window.contains(parse_iso(entry.created_at)):
            continue

        bucket = summary.by_agent.setdefault(entry.agent, AgentCostSummary())
        bucket.tokens_in += entry.tokens_in
        bucket.tokens_out += entry.tokens_out
        bucket.cost += entry.estimated_cost
        bucket.turns += 1

        summary.total_cost += entry.estimated_cost
        summary.total_tokens_in += entry.tokens_in
        summary.total_tokens_out += entry.tokens_out
        summary.turn_count += 1

    return summary
