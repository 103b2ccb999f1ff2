"""Progress reporting sinks for long-running reconciliation runs."""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import Protocol, runtime_checkable

log = getLogger(__name__)


class ProgressStatus(StrEnum):
    """Phase the engine is currently in."""

    LISTING = "listing"
    GROUPING = "grouping"
    VALIDATING = "validating"
    DIFFING = "diffing"
    FETCHING = "fetching"
    DELETING = "deleting"
    UPDATING = "updating"
    ADDING = "adding"


@runtime_checkable
class ProgressHandler(Protocol):
    def set_progress(self, percentage: int) -> None: ...

    def set_status(self, status: ProgressStatus) -> None: ...

    def send_error(self, message: str) -> None: ...

    def done(self) -> None: ...


class LoggingProgressHandler:
    def set_progress(self, percentage: int) -> None:
        log.debug("Progress %d%%", percentage)

    def set_status(self, status: ProgressStatus) -> None:
        log.info("Status: %s", status)

    def send_error(self, message: str) -> None:
        log.warning("Error: %s", message)

    def done(self) -> None:
        log.info("Done")


class NullProgressHandler:
    def set_progress(self, percentage: int) -> None:
        pass

    def set_status(self, status: ProgressStatus) -> None:
        pass

    def send_error(self, message: str) -> None:
        pass

    def done(self) -> None:
        pass


def percentage(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return min(100, done * 100 // total)
