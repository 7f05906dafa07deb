from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from ...core.enums import AttendanceType, WriteAction
from ..model import AttendanceEvent


@dataclass(frozen=True)
class ScanDecision:
    decided_type: AttendanceType
    action: WriteAction
    target_event_id: Optional[int] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: decide what a new scan means given today's events."""

    @abstractmethod
    def decide(self, day_events: Sequence[AttendanceEvent]) -> ScanDecision:
        """`day_events` are the employee's events in today's window, newest first."""

        raise NotImplementedError
