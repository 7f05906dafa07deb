from __future__ import annotations

from typing import Sequence

from ...core.enums import AttendanceType, WriteAction
from ..model import AttendanceEvent
from .base import AttendanceStrategy, ScanDecision


class AlternatingOverwriteStrategy(AttendanceStrategy):
    """Alternate CHECK_IN / CHECK_OUT off the most recent event of the day.

    At most one event per type is kept per day: when the decided type already
    exists today, that event is overwritten in place instead of adding a row.
    """

    def decide(self, day_events: Sequence[AttendanceEvent]) -> ScanDecision:
        if not day_events:
            return ScanDecision(decided_type=AttendanceType.CHECK_IN, action=WriteAction.CREATE)

        last = day_events[0]
        if last.type == AttendanceType.CHECK_IN:
            decided = AttendanceType.CHECK_OUT
        else:
            decided = AttendanceType.CHECK_IN

        # newest first, so the most recent event of that type wins
        for event in day_events:
            if event.type == decided:
                return ScanDecision(decided_type=decided, action=WriteAction.UPDATE, target_event_id=event.attendance_id)

        return ScanDecision(decided_type=decided, action=WriteAction.CREATE)
