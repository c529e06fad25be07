from dataclasses import dataclass
from typing import Protocol

from drivebook.scheduling.intervals import TimeInterval


@dataclass(frozen=True)
class StoredInterval:
    id: int
    interval: TimeInterval


class ConflictQueryPort(Protocol):
    """Read access to an instructor's interval-bearing records."""

    def find_availabilities(
        self,
        instructor_id: int,
        overlapping: TimeInterval,
        exclude_id: int | None = None,
    ) -> list[StoredInterval]:
        ...

    def find_unavailabilities(
        self,
        instructor_id: int,
        overlapping: TimeInterval,
        exclude_id: int | None = None,
    ) -> list[StoredInterval]:
        ...

    def find_confirmed_appointments(
        self,
        instructor_id: int,
        overlapping: TimeInterval,
        exclude_id: int | None = None,
    ) -> list[StoredInterval]:
        """Only appointments that are both accepted and valid."""
        ...
