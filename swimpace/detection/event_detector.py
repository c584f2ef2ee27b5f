"""
Wall-contact event detection over a brightness trace
"""

from dataclasses import dataclass
from typing import List, Sequence, Protocol

import numpy as np
from scipy.signal import find_peaks

from ..config import DetectionConfig


@dataclass(frozen=True)
class BrightnessSample:
    timestamp: float    # seconds
    value: float        # mean zone luminance


class EventDetectionStrategy(Protocol):
    """Turns an ordered brightness trace into event timestamps"""

    def detect(self, samples: Sequence[BrightnessSample]) -> List[float]:
        ...


def _check_params(sensitivity: float, refractory_seconds: float) -> None:
    if sensitivity <= 0:
        raise ValueError(f"Sensitivity must be positive, got {sensitivity}")
    if refractory_seconds < 0:
        raise ValueError(f"Refractory period must be non-negative, got {refractory_seconds}")


class ThresholdStrategy:
    """
    Fires when the step-to-step brightness change exceeds the sensitivity,
    unless the previous event is within the refractory period.
    The first sample has no predecessor and never fires.
    """

    def __init__(self, sensitivity: float,
                 refractory_seconds: float = DetectionConfig.refractory_seconds):
        _check_params(sensitivity, refractory_seconds)
        self.sensitivity = sensitivity
        self.refractory_seconds = refractory_seconds

    def detect(self, samples: Sequence[BrightnessSample]) -> List[float]:
        events: List[float] = []
        previous = None

        for sample in samples:
            if previous is not None and abs(sample.value - previous) > self.sensitivity:
                if not events or sample.timestamp - events[-1] > self.refractory_seconds:
                    events.append(sample.timestamp)
            previous = sample.value

        return events


class PeakStrategy:
    """
    Picks local maxima of the absolute brightness change with scipy's
    find_peaks, keeping the tallest peak inside each refractory window.
    """

    def __init__(self, sensitivity: float,
                 refractory_seconds: float = DetectionConfig.refractory_seconds):
        _check_params(sensitivity, refractory_seconds)
        self.sensitivity = sensitivity
        self.refractory_seconds = refractory_seconds

    def detect(self, samples: Sequence[BrightnessSample]) -> List[float]:
        if len(samples) < 2:
            return []

        timestamps = np.array([s.timestamp for s in samples], dtype=np.float64)
        values = np.array([s.value for s in samples], dtype=np.float64)

        # delta k belongs to sample k + 1
        deltas = np.abs(np.diff(values))
        delta_times = timestamps[1:]

        step = float(np.median(np.diff(timestamps)))
        distance = int(self.refractory_seconds / step) + 1 if step > 0 else 1

        # Pad with zeros so changes at either end of the trace count as peaks
        padded = np.concatenate(([0.0], deltas, [0.0]))
        peaks, props = find_peaks(padded, height=self.sensitivity, distance=distance)
        peaks = peaks[props["peak_heights"] > self.sensitivity] - 1

        events: List[float] = []
        for t in delta_times[np.sort(peaks)]:
            if not events or t - events[-1] > self.refractory_seconds:
                events.append(float(t))
        return events


def build_strategy(name: str, sensitivity: float,
                   refractory_seconds: float = DetectionConfig.refractory_seconds) -> EventDetectionStrategy:
    strategies = {
        "threshold": ThresholdStrategy,
        "peaks": PeakStrategy,
    }
    if name not in strategies:
        raise ValueError(f"Unknown detection strategy '{name}' (expected one of {sorted(strategies)})")
    return strategies[name](sensitivity, refractory_seconds)


def derive_splits(events: Sequence[float]) -> List[float]:
    """Consecutive differences between event timestamps"""
    return [events[i] - events[i - 1] for i in range(1, len(events))]
