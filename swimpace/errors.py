"""
Exception types raised by the detection and analysis pipeline
"""

from typing import List, Optional


class SwimPaceError(Exception):
    """Base class for pipeline failures surfaced to the caller"""


class InsufficientData(SwimPaceError):
    """Fewer split durations than the analyzer needs"""

    def __init__(self, count: int, required: int = 2):
        self.count = count
        self.required = required
        super().__init__(f"Add at least {required} splits for analysis (got {count})")


class InsufficientEvents(SwimPaceError):
    """The video scan found too few wall contacts to derive splits"""

    guidance = "Try higher sensitivity or a clearer video angle."

    def __init__(self, events: List[float], required: int = 3):
        self.events = list(events)
        self.required = required
        super().__init__(
            f"Could not detect enough wall events ({len(self.events)} of {required}). {self.guidance}"
        )


class SeekError(SwimPaceError):
    """The sample source could not produce a frame at the requested time"""

    def __init__(self, timestamp: float, reason: Optional[str] = None):
        self.timestamp = timestamp
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Could not read frame at {timestamp:.2f}s{detail}")


class MissingPrerequisite(SwimPaceError):
    """Analysis requested before the required setup was done"""


class ScanCancelled(SwimPaceError):
    """A video scan was cancelled between steps"""
