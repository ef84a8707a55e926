# tests/property/engine/test_interval_properties.py
"""Property-based tests for Interval tick sequences under consumer stalls.

Properties:
- Reported ticks are strictly increasing for every policy
- BURST never drops a grid point
- SKIP only reports grid points
- No tick is reported before its scheduled time
"""

from __future__ import annotations

from datetime import timedelta

from hypothesis import given
from hypothesis import strategies as st

from hosttime.contracts.enums import MissedTickBehavior
from hosttime.contracts.time import TimePoint
from hosttime.engine.interval import interval
from hosttime.testing import RecordingWaker, mock_clock
from tests.property.settings import STANDARD_SETTINGS

# =============================================================================
# Strategies
# =============================================================================

periods_ms = st.integers(min_value=1, max_value=1_000)

# Consumer work between ticks, in microseconds
stalls = st.lists(st.integers(min_value=0, max_value=3_000_000), min_size=1, max_size=15)


def _collect(behavior: MissedTickBehavior, period_ms: int, work_us: list[int]) -> tuple[TimePoint, list[TimePoint]]:
    """Run the interval, doing `work_us[i]` of work after tick i."""
    clock, host = mock_clock()
    waker = RecordingWaker()
    start = clock.now()
    ticks = interval(timedelta(milliseconds=period_ms), clock=clock, missed_tick_behavior=behavior)
    observed: list[TimePoint] = []

    for work in work_us:
        result = ticks.poll_tick(waker)
        while result.is_pending:
            host.advance_to(TimePoint(host.pending[0].due_us))
            result = ticks.poll_tick(waker)
        assert result.value is not None
        assert clock.now() >= result.value
        observed.append(result.value)
        host.advance_us(work)

    ticks.close()
    return start, observed


class TestIntervalSequenceProperties:
    @given(period_ms=periods_ms, work_us=stalls, behavior=st.sampled_from(MissedTickBehavior))
    @STANDARD_SETTINGS
    def test_ticks_strictly_increasing(self, period_ms: int, work_us: list[int], behavior: MissedTickBehavior) -> None:
        _, observed = _collect(behavior, period_ms, work_us)
        assert all(a < b for a, b in zip(observed, observed[1:], strict=False))

    @given(period_ms=periods_ms, work_us=stalls)
    @STANDARD_SETTINGS
    def test_burst_emits_every_grid_point(self, period_ms: int, work_us: list[int]) -> None:
        start, observed = _collect(MissedTickBehavior.BURST, period_ms, work_us)
        period = timedelta(milliseconds=period_ms)
        assert observed == [start + period * n for n in range(len(observed))]

    @given(period_ms=periods_ms, work_us=stalls)
    @STANDARD_SETTINGS
    def test_skip_stays_on_grid(self, period_ms: int, work_us: list[int]) -> None:
        start, observed = _collect(MissedTickBehavior.SKIP, period_ms, work_us)
        period_us = period_ms * 1_000
        assert all((tick.raw_us - start.raw_us) % period_us == 0 for tick in observed)
