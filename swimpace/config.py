"""
Tunable defaults for detection and pacing analysis
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

from dotenv import load_dotenv


DEFAULT_ZONE_FRACTIONS: Dict[str, float] = {"x": 0.78, "y": 0.20, "w": 0.18, "h": 0.58}


@dataclass(frozen=True)
class DetectionConfig:
    """Event detector defaults (video path)"""
    sample_rate: float = 5.0            # Hz
    sensitivity: float = 10.0           # brightness delta, luminance units
    refractory_seconds: float = 3.5     # minimum spacing between wall contacts
    min_events: int = 3
    seek_timeout: float = 5.0           # seconds per seek
    seek_epsilon: float = 0.05          # keep seeks this far before the end
    surface_size: Tuple[int, int] = (640, 360)  # scan surface (width, height)
    zone_fractions: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_ZONE_FRACTIONS))

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.sensitivity <= 0:
            raise ValueError(f"sensitivity must be positive, got {self.sensitivity}")
        if self.refractory_seconds < 0:
            raise ValueError(f"refractory_seconds must be non-negative, got {self.refractory_seconds}")
        if self.min_events < 2:
            raise ValueError(f"min_events must be at least 2, got {self.min_events}")
        if self.seek_timeout <= 0:
            raise ValueError(f"seek_timeout must be positive, got {self.seek_timeout}")
        if min(self.surface_size) <= 0:
            raise ValueError(f"surface_size must be positive, got {self.surface_size}")
        fr = self.zone_fractions
        if min(fr.values()) < 0 or fr["w"] <= 0 or fr["h"] <= 0 \
                or fr["x"] + fr["w"] > 1 or fr["y"] + fr["h"] > 1:
            raise ValueError(f"zone_fractions must describe a region inside the surface, got {fr}")


@dataclass(frozen=True)
class PacingConfig:
    """Pacing analyzer model parameters"""
    cv_weight: float = 6.0
    slope_weight: float = 30.0
    min_splits: int = 2
    focus_threshold: float = 0.12       # s/split, coaching text only

    def __post_init__(self):
        if self.cv_weight < 0 or self.slope_weight < 0:
            raise ValueError("Consistency weights must be non-negative")
        if self.min_splits < 1:
            raise ValueError(f"min_splits must be at least 1, got {self.min_splits}")


@dataclass(frozen=True)
class Settings:
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def load_settings() -> Settings:
    """Build settings from defaults overridden by SWIMPACE_* environment variables"""
    load_dotenv()

    base = DetectionConfig()
    width, height = base.surface_size
    detection = replace(
        base,
        sample_rate=_env_float("SWIMPACE_SAMPLE_RATE", base.sample_rate),
        sensitivity=_env_float("SWIMPACE_SENSITIVITY", base.sensitivity),
        refractory_seconds=_env_float("SWIMPACE_REFRACTORY_SECONDS", base.refractory_seconds),
        seek_timeout=_env_float("SWIMPACE_SEEK_TIMEOUT", base.seek_timeout),
        surface_size=(
            int(_env_float("SWIMPACE_SURFACE_WIDTH", width)),
            int(_env_float("SWIMPACE_SURFACE_HEIGHT", height)),
        ),
    )

    pacing_base = PacingConfig()
    pacing = replace(
        pacing_base,
        cv_weight=_env_float("SWIMPACE_CV_WEIGHT", pacing_base.cv_weight),
        slope_weight=_env_float("SWIMPACE_SLOPE_WEIGHT", pacing_base.slope_weight),
    )

    return Settings(detection=detection, pacing=pacing)
