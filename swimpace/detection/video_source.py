"""
OpenCV-backed sample source for wall-contact detection
"""

import asyncio
import logging
import threading
from typing import Optional, Tuple

import cv2
import numpy as np

from ..config import DetectionConfig
from ..errors import MissingPrerequisite, SeekError
from .event_detector import BrightnessSample
from .zone import Zone, average_luminance, default_zone, to_surface

logger = logging.getLogger(__name__)


class VideoSampleSource:
    """
    Seeks a video file and measures mean luminance of the calibrated zone.
    Frames are resized onto a fixed scan surface before sampling.
    """

    def __init__(self, path: str, zone: Optional[Zone] = None,
                 config: Optional[DetectionConfig] = None):
        self.path = path
        self.config = config or DetectionConfig()
        self.surface_size: Tuple[int, int] = self.config.surface_size

        # sample_at and close hold this so a timed-out read never races release()
        self._lock = threading.Lock()
        self._cap = cv2.VideoCapture(path)
        if not self._cap.isOpened():
            self._cap.release()
            raise MissingPrerequisite(f"Could not open video '{path}'")

        self.fps = float(self._cap.get(cv2.CAP_PROP_FPS) or 0.0)
        self.frame_count = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        self.width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.duration = self.frame_count / self.fps if self.fps > 0 else 0.0

        if self.duration <= 0 or self.width <= 0:
            self._cap.release()
            raise MissingPrerequisite(f"Video '{path}' has no readable frames")

        self.zone: Optional[Zone] = None
        if zone is not None:
            self.set_zone(zone)

        logger.debug(
            f"Opened {path}: {self.width}x{self.height} @ {self.fps:.2f}fps, "
            f"{self.frame_count} frames ({self.duration:.2f}s)"
        )

    def set_zone(self, zone: Zone) -> None:
        width, height = self.surface_size
        if not zone.fits(width, height):
            raise ValueError(f"Zone {zone} does not fit the {width}x{height} scan surface")
        self.zone = zone

    def calibrate(self) -> Zone:
        """Apply the default heuristic zone for the scan surface"""
        width, height = self.surface_size
        self.zone = default_zone(width, height, self.config.zone_fractions)
        logger.info(f"📐 Calibrated zone {self.zone.to_dict()} on {width}x{height} surface")
        return self.zone

    def read_frame(self, t: float) -> np.ndarray:
        """Frame nearest t, clamped to [0, duration - epsilon], on the scan surface"""
        target = min(t, max(0.0, self.duration - self.config.seek_epsilon))
        target = max(0.0, target)

        if not self._cap.set(cv2.CAP_PROP_POS_MSEC, target * 1000.0):
            raise SeekError(t, "seek rejected by decoder")
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise SeekError(t, "no frame decoded")
        return to_surface(frame, self.surface_size)

    def sample_at(self, t: float) -> BrightnessSample:
        if self.zone is None:
            raise MissingPrerequisite("Scan zone is not calibrated")
        with self._lock:
            if self._cap is None:
                raise SeekError(t, "video source closed")
            frame = self.read_frame(t)
        return BrightnessSample(timestamp=t, value=average_luminance(frame, self.zone))

    async def seek_and_sample(self, t: float) -> BrightnessSample:
        return await asyncio.to_thread(self.sample_at, t)

    def close(self) -> None:
        with self._lock:
            if self._cap is not None:
                self._cap.release()
                self._cap = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
