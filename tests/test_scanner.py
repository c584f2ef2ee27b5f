import asyncio
import logging

import pytest

from swimpace.config import DetectionConfig
from swimpace.detection.event_detector import BrightnessSample, PeakStrategy
from swimpace.detection.scanner import CancellationToken, detect_wall_contacts, scan_brightness
from swimpace.errors import InsufficientEvents, ScanCancelled, SeekError

from .conftest import TraceSource, spike_trace


def test_scan_visits_every_step_in_order():
    source = TraceSource(lambda t: 0.0, duration=2.0)
    samples = asyncio.run(scan_brightness(source, source.duration, sample_rate=5))

    assert source.requested == pytest.approx([i / 5 for i in range(10)])
    assert [s.timestamp for s in samples] == source.requested


def test_scan_excludes_duration_endpoint():
    source = TraceSource(lambda t: 0.0, duration=3.0)
    samples = asyncio.run(scan_brightness(source, source.duration, sample_rate=1))

    assert [s.timestamp for s in samples] == [0.0, 1.0, 2.0]


def test_scan_rejects_bad_rate():
    source = TraceSource(lambda t: 0.0, duration=3.0)
    with pytest.raises(ValueError):
        asyncio.run(scan_brightness(source, source.duration, sample_rate=0))


def test_detects_three_spikes():
    source = TraceSource(spike_trace([10, 45, 80]), duration=100.0)
    result = asyncio.run(detect_wall_contacts(source, sensitivity=20, sample_rate=5))

    assert result.events == pytest.approx([10, 45, 80], abs=0.2)
    assert result.splits == pytest.approx([35, 35], abs=0.4)
    assert result.samples_scanned == 500


def test_alternate_strategy():
    source = TraceSource(spike_trace([10, 45, 80]), duration=100.0)
    result = asyncio.run(detect_wall_contacts(
        source, sensitivity=20, sample_rate=5, strategy=PeakStrategy(sensitivity=20)))

    assert result.events == pytest.approx([10, 45, 80], abs=0.2)


def test_strategy_sensitivity_wins_over_argument(caplog):
    caplog.set_level(logging.INFO, logger="swimpace.detection.scanner")
    source = TraceSource(spike_trace([10, 45, 80]), duration=100.0)
    result = asyncio.run(detect_wall_contacts(
        source, sensitivity=1000, sample_rate=5, strategy=PeakStrategy(sensitivity=20)))

    assert result.events == pytest.approx([10, 45, 80], abs=0.2)
    assert "sensitivity=20" in caplog.text
    assert "sensitivity=1000" not in caplog.text


@pytest.mark.parametrize("spikes", [[], [10], [10, 45]])
def test_too_few_events(spikes):
    source = TraceSource(spike_trace(spikes), duration=100.0)
    with pytest.raises(InsufficientEvents) as exc_info:
        asyncio.run(detect_wall_contacts(source, sensitivity=20, sample_rate=5))

    assert exc_info.value.events == pytest.approx(spikes, abs=0.2)
    assert "sensitivity" in str(exc_info.value)


def test_spikes_inside_refractory_collapse():
    # 12s and 13s fall inside the refractory period after 10s
    source = TraceSource(spike_trace([10, 12, 13, 45]), duration=60.0)
    with pytest.raises(InsufficientEvents):
        asyncio.run(detect_wall_contacts(source, sensitivity=20, sample_rate=5))


def test_seek_error_aborts_scan():
    class BrokenSource(TraceSource):
        async def seek_and_sample(self, t):
            if t >= 2:
                raise SeekError(t, "decoder gave up")
            return await super().seek_and_sample(t)

    source = BrokenSource(lambda t: 0.0, duration=10.0)
    with pytest.raises(SeekError):
        asyncio.run(detect_wall_contacts(source, sensitivity=5, sample_rate=1))
    assert source.requested == [0.0, 1.0]


def test_seek_timeout_is_seek_error():
    class SlowSource(TraceSource):
        async def seek_and_sample(self, t):
            await asyncio.sleep(1.0)
            return BrightnessSample(t, 0.0)

    source = SlowSource(lambda t: 0.0, duration=10.0)
    config = DetectionConfig(seek_timeout=0.01)
    with pytest.raises(SeekError) as exc_info:
        asyncio.run(detect_wall_contacts(source, sensitivity=5, sample_rate=1, config=config))

    assert exc_info.value.timestamp == 0.0


def test_cancellation_between_steps():
    token = CancellationToken()

    class CancellingSource(TraceSource):
        async def seek_and_sample(self, t):
            if len(self.requested) == 3:
                token.cancel()
            return await super().seek_and_sample(t)

    source = CancellingSource(lambda t: 0.0, duration=100.0)
    with pytest.raises(ScanCancelled):
        asyncio.run(detect_wall_contacts(source, sensitivity=5, sample_rate=1, cancel_token=token))

    assert len(source.requested) == 4


def test_cancel_before_start():
    token = CancellationToken()
    token.cancel()
    source = TraceSource(lambda t: 0.0, duration=100.0)

    with pytest.raises(ScanCancelled):
        asyncio.run(scan_brightness(source, source.duration, 5, cancel_token=token))
    assert source.requested == []
