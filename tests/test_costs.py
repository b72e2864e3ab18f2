# Tests for cost aggregation
# Created: 2026-03-02

from datetime import UTC, datetime, timedelta, timezone

import pytest

from squadboard.mission_control.costs import TimeWindow, summarize_costs, today_window
from squadboard.mission_control.models import CostEntry


def _entry(agent, cost, at, tokens_in=10, tokens_out=1):
    return CostEntry(
        agent=agent,
        model="m",
        tokens_in=tokens_in,
        tokens_out=tokens_out,
        estimated_cost=cost,
        created_at=at,
    )


class TestTimeWindow:
    def test_rejects_empty_window(self):
        moment = datetime(2026, 3, 1, tzinfo=UTC)
        with pytest.raises(ValueError):
            TimeWindow(start=moment, end=moment)

    def test_half_open(self):
        start = datetime(2026, 3, 1, tzinfo=UTC)
        window = TimeWindow(start=start, end=start + timedelta(hours=1))

        assert window.contains(start)
        assert not window.contains(start + timedelta(hours=1))

    def test_today_window(self):
        window = today_window(datetime(2026, 3, 1, 15, 30, tzinfo=UTC))
        assert window.start == datetime(2026, 3, 1, tzinfo=UTC)
        assert window.end == datetime(2026, 3, 2, tzinfo=UTC)

    def test_today_window_converts_to_utc(self):
        # 01:00 at UTC+2 is still the previous UTC day
        local = datetime(2026, 3, 2, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        window = today_window(local)
        assert window.start == datetime(2026, 3, 1, tzinfo=UTC)


class TestSummarizeCosts:
    def test_groups_by_agent(self):
        window = today_window(datetime(2026, 3, 1, tzinfo=UTC))
        entries = [
            _entry("dev", 1.0, "2026-03-01T01:00:00+00:00"),
            _entry("otto", 0.5, "2026-03-01T02:00:00+00:00", tokens_in=5),
            _entry("dev", 2.0, "2026-03-01T03:00:00+00:00"),
        ]

        summary = summarize_costs(entries, window)

        assert summary.turn_count == 3
        assert summary.total_cost == pytest.approx(3.5)
        assert summary.total_tokens_in == 25
        assert summary.by_agent["dev"].turns == 2
        assert summary.by_agent["dev"].cost == pytest.approx(3.0)
        assert summary.by_agent["otto"].tokens_in == 5

    def test_excludes_outside_window(self):
        window = today_window(datetime(2026, 3, 1, tzinfo=UTC))
        entries = [
            _entry("dev", 1.0, "2026-02-28T23:59:59+00:00"),
            _entry("dev", 1.0, "2026-03-02T00:00:00+00:00"),
            _entry("dev", 0.1, "2026-03-01T12:00:00"),  # naive is UTC
        ]

        summary = summarize_costs(entries, window)

        assert summary.turn_count == 1
        assert summary.total_cost == pytest.approx(0.1)

    def test_agent_filter(self):
        window = today_window(datetime(2026, 3, 1, tzinfo=UTC))
        entries = [
            _entry("dev", 1.0, "2026-03-01T01:00:00+00:00"),
            _entry("otto", 2.0, "2026-03-01T01:00:00+00:00"),
        ]

        summary = summarize_costs(entries, window, agent="otto")

        assert list(summary.by_agent) == ["otto"]
        assert summary.total_cost == pytest.approx(2.0)

    def test_empty_summary_to_dict(self):
        window = today_window(datetime(2026, 3, 1, tzinfo=UTC))
        data = summarize_costs([], window).to_dict()

        assert data["by_agent"] == {}
        assert data["turn_count"] == 0
        assert data["window"]["start"] == "2026-03-01T00:00:00+00:00"
