from typing import Callable, Iterable, List

import cv2
import numpy as np
import pytest

from swimpace.detection.event_detector import BrightnessSample
from swimpace.helpers.storage import storage


class TraceSource:
    """Async sample source backed by a brightness function of time"""

    def __init__(self, brightness: Callable[[float], float], duration: float):
        self.brightness = brightness
        self.duration = duration
        self.requested: List[float] = []

    async def seek_and_sample(self, t: float) -> BrightnessSample:
        self.requested.append(t)
        return BrightnessSample(timestamp=t, value=self.brightness(t))


def spike_trace(spikes: Iterable[float], base: float = 50.0, peak: float = 200.0) -> Callable[[float], float]:
    spikes = list(spikes)

    def brightness(t: float) -> float:
        return peak if any(abs(t - s) < 1e-9 for s in spikes) else base

    return brightness


def write_clip(path, fps: int = 10, seconds: int = 20, spikes=(2.0, 8.0, 14.0),
               size=(160, 90), dark: int = 30, bright: int = 220) -> str:
    """Uniform-grey MJPG clip with three-frame bright flashes centred on each spike"""
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), fps, size)
    if not writer.isOpened():
        pytest.skip("MJPG video writer unavailable")

    width, height = size
    for i in range(fps * seconds):
        t = i / fps
        lit = any(abs(t - s) <= 1.0 / fps + 1e-9 for s in spikes)
        value = bright if lit else dark
        writer.write(np.full((height, width, 3), value, dtype=np.uint8))
    writer.release()
    return str(path)


@pytest.fixture
def clip_path(tmp_path):
    return write_clip(tmp_path / "laps.avi")


@pytest.fixture(autouse=True)
def clean_storage():
    yield
    storage.clear()
