"""
Scan zone geometry and brightness sampling
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple

import cv2
import numpy as np

from ..config import DEFAULT_ZONE_FRACTIONS

# ITU-R BT.601 luma weights, in OpenCV's BGR channel order
_LUMA_BGR = np.array([0.114, 0.587, 0.299], dtype=np.float64)


@dataclass(frozen=True)
class Zone:
    """Axis-aligned pixel rectangle on the scan surface"""
    x: int
    y: int
    w: int
    h: int

    def __post_init__(self):
        if self.w <= 0 or self.h <= 0:
            raise ValueError(f"Zone must have positive size, got {self.w}x{self.h}")
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Zone origin must be non-negative, got ({self.x}, {self.y})")

    def fits(self, width: int, height: int) -> bool:
        return self.x + self.w <= width and self.y + self.h <= height

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def default_zone(width: int, height: int, fractions: Optional[Dict[str, float]] = None) -> Zone:
    """
    Heuristic region assumed to hold the lane-wall cue.
    Fractions of the surface, rounded down to whole pixels.
    """
    fractions = fractions or DEFAULT_ZONE_FRACTIONS
    zone = Zone(
        x=int(width * fractions["x"]),
        y=int(height * fractions["y"]),
        w=int(width * fractions["w"]),
        h=int(height * fractions["h"]),
    )
    if not zone.fits(width, height):
        raise ValueError(f"Zone {zone} does not fit a {width}x{height} surface")
    return zone


def to_surface(frame: np.ndarray, surface_size: Tuple[int, int]) -> np.ndarray:
    """Resize a frame onto the fixed scan surface (width, height)"""
    width, height = surface_size
    h, w = frame.shape[:2]
    if (w, h) == (width, height):
        return frame
    return cv2.resize(frame, (width, height), interpolation=cv2.INTER_AREA)


def average_luminance(frame: np.ndarray, zone: Zone) -> float:
    """Mean of 0.299R + 0.587G + 0.114B over the zone of a BGR frame"""
    region = frame[zone.y:zone.y + zone.h, zone.x:zone.x + zone.w]
    if region.size == 0:
        return 0.0
    if region.ndim == 2:
        return float(region.mean())
    luma = region[..., :3].astype(np.float64) @ _LUMA_BGR
    return float(luma.mean())
