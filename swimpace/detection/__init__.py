"""
Wall-contact detection from video brightness
"""

from .zone import Zone, default_zone, average_luminance
from .event_detector import (
    BrightnessSample,
    ThresholdStrategy,
    PeakStrategy,
    build_strategy,
    derive_splits
)
from .scanner import (
    CancellationToken,
    DetectionResult,
    scan_brightness,
    detect_wall_contacts
)
from .video_source import VideoSampleSource

__all__ = [
    'Zone',
    'default_zone',
    'average_luminance',
    'BrightnessSample',
    'ThresholdStrategy',
    'PeakStrategy',
    'build_strategy',
    'derive_splits',
    'CancellationToken',
    'DetectionResult',
    'scan_brightness',
    'detect_wall_contacts',
    'VideoSampleSource'
]
