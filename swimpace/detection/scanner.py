"""
Sequential video scan: seek, sample, detect, derive splits
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from ..config import DetectionConfig
from ..errors import InsufficientEvents, SeekError, ScanCancelled
from .event_detector import (
    BrightnessSample,
    EventDetectionStrategy,
    ThresholdStrategy,
    derive_splits,
)
from .zone import Zone

logger = logging.getLogger(__name__)


class SampleSource(Protocol):
    """Anything that can seek to a time and report zone brightness there"""

    duration: float

    async def seek_and_sample(self, t: float) -> BrightnessSample:
        ...


class CancellationToken:
    """Checked by the scan loop between steps"""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise ScanCancelled("Video scan cancelled")


@dataclass
class DetectionResult:
    events: List[float]
    splits: List[float]
    samples_scanned: int
    zone: Optional[Zone] = None
    samples: List[BrightnessSample] = field(default_factory=list, repr=False)


async def scan_brightness(
    source: SampleSource,
    duration: float,
    sample_rate: float,
    cancel_token: Optional[CancellationToken] = None,
    seek_timeout: Optional[float] = DetectionConfig.seek_timeout,
) -> List[BrightnessSample]:
    """
    Sample the source at t = 0, 1/rate, 2/rate, ... < duration.
    Each seek completes before the next one starts.
    """
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")

    samples: List[BrightnessSample] = []
    step = 0
    while True:
        t = step / sample_rate
        if t >= duration:
            break
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        try:
            sample = await asyncio.wait_for(source.seek_and_sample(t), timeout=seek_timeout)
        except asyncio.TimeoutError:
            raise SeekError(t, f"timed out after {seek_timeout}s") from None

        samples.append(sample)
        step += 1

    logger.debug(f"Scanned {len(samples)} samples over {duration:.2f}s at {sample_rate}Hz")
    return samples


async def detect_wall_contacts(
    source: SampleSource,
    sensitivity: Optional[float] = None,
    sample_rate: Optional[float] = None,
    strategy: Optional[EventDetectionStrategy] = None,
    cancel_token: Optional[CancellationToken] = None,
    config: Optional[DetectionConfig] = None,
) -> DetectionResult:
    """
    Scan the whole source and return wall-contact events with derived splits.
    A given strategy carries its own sensitivity; `sensitivity` (or the
    config default) only builds the default ThresholdStrategy.
    Raises InsufficientEvents when fewer than config.min_events are found.
    """
    config = config or DetectionConfig()
    sample_rate = config.sample_rate if sample_rate is None else sample_rate
    if strategy is None:
        sensitivity = config.sensitivity if sensitivity is None else sensitivity
        strategy = ThresholdStrategy(sensitivity, config.refractory_seconds)

    effective = getattr(strategy, "sensitivity", None)
    logger.info(
        f"🎬 Scanning {source.duration:.1f}s at {sample_rate}Hz "
        f"(sensitivity={effective}, strategy={type(strategy).__name__})"
    )

    samples = await scan_brightness(
        source,
        source.duration,
        sample_rate,
        cancel_token=cancel_token,
        seek_timeout=config.seek_timeout,
    )
    events = strategy.detect(samples)

    if len(events) < config.min_events:
        logger.warning(f"⚠️  Only {len(events)} wall events found in {len(samples)} samples")
        raise InsufficientEvents(events, required=config.min_events)

    splits = derive_splits(events)
    logger.info(f"✅ Detected {len(events)} wall events -> {len(splits)} splits")

    return DetectionResult(
        events=events,
        splits=splits,
        samples_scanned=len(samples),
        zone=getattr(source, "zone", None),
        samples=samples,
    )
