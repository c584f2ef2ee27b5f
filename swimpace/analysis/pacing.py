"""
Pacing analytics over a sequence of split durations
"""

import math
import logging
from dataclasses import dataclass, asdict
from typing import List, Sequence, Dict, Any, Optional

from ..config import PacingConfig
from ..errors import InsufficientData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionModel:
    """Least-squares line of split duration against split index"""
    slope: float
    intercept: float

    def predict(self, index: float) -> float:
        return self.intercept + self.slope * index

    def fitted(self, n: int) -> List[float]:
        return [self.predict(i) for i in range(n)]


@dataclass(frozen=True)
class PacingReport:
    count: int
    best: float
    worst: float
    mean: float
    std_dev: float
    coefficient_of_variation: float
    drop_off_percent: float
    trend_per_split: float
    consistency_score: float
    source_label: str
    regression: RegressionModel

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def linear_regression(values: Sequence[float]) -> RegressionModel:
    """
    Ordinary least squares of value against index 0..n-1.
    Slope is 0 when every x sits on the mean (n == 1).
    """
    n = len(values)
    if n == 0:
        raise InsufficientData(0, required=1)

    x_mean = (n - 1) / 2
    y_mean = sum(values) / n

    numerator = 0.0
    denominator = 0.0
    for i, y in enumerate(values):
        numerator += (i - x_mean) * (y - y_mean)
        denominator += (i - x_mean) ** 2

    slope = 0.0 if denominator == 0 else numerator / denominator
    intercept = y_mean - slope * x_mean
    return RegressionModel(slope=slope, intercept=intercept)


def analyze_splits(
    splits: Sequence[float],
    source_label: str,
    config: Optional[PacingConfig] = None,
) -> PacingReport:
    """
    Summarize a split sequence: dispersion, best/worst, drop-off,
    trend and a composite consistency score.
    Raises InsufficientData when fewer than config.min_splits values are given.
    """
    config = config or PacingConfig()
    splits = [float(s) for s in splits]
    n = len(splits)
    if n < config.min_splits:
        raise InsufficientData(n, required=config.min_splits)
    if any(not math.isfinite(s) or s <= 0 for s in splits):
        raise ValueError("Split durations must be finite positive seconds")

    mean = sum(splits) / n
    variance = sum((s - mean) ** 2 for s in splits) / n
    std_dev = math.sqrt(variance)
    cv = std_dev / mean * 100

    best = min(splits)
    worst = max(splits)
    drop_off = (worst - best) / best * 100

    regression = linear_regression(splits)
    consistency = max(
        0.0,
        100 - cv * config.cv_weight - abs(regression.slope) * config.slope_weight,
    )

    logger.debug(
        f"Analyzed {n} splits from '{source_label}': mean={mean:.2f}s cv={cv:.2f}% "
        f"slope={regression.slope:.3f}s consistency={consistency:.1f}"
    )

    return PacingReport(
        count=n,
        best=best,
        worst=worst,
        mean=mean,
        std_dev=std_dev,
        coefficient_of_variation=cv,
        drop_off_percent=drop_off,
        trend_per_split=regression.slope,
        consistency_score=consistency,
        source_label=source_label,
        regression=regression,
    )


def practice_focus(trend_per_split: float, threshold: float = PacingConfig.focus_threshold) -> str:
    # Coaching wording only, not part of the model
    return "front-half endurance" if trend_per_split > threshold else "negative-split control"


def practice_prompt(report: PacingReport, config: Optional[PacingConfig] = None) -> str:
    config = config or PacingConfig()
    focus = practice_focus(report.trend_per_split, config.focus_threshold)
    return (
        "Practice idea: run 2 sets where lap 1 starts at race pace and later laps "
        f"stay within ±2% of your mean split. Focus on {focus} and compare "
        "consistency score across sessions."
    )
