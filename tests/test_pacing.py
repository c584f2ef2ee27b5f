import numpy as np
import pytest

from swimpace.analysis.pacing import (
    analyze_splits,
    linear_regression,
    practice_focus,
    practice_prompt,
)
from swimpace.config import PacingConfig
from swimpace.errors import InsufficientData


def test_manual_splits_example():
    report = analyze_splits([60.2, 58.9, 59.5, 61.0], "Manual splits")

    assert report.count == 4
    assert report.best == pytest.approx(58.9)
    assert report.worst == pytest.approx(61.0)
    assert report.mean == pytest.approx(59.9)
    assert report.drop_off_percent == pytest.approx(3.565, abs=0.01)
    assert report.trend_per_split == pytest.approx(0.3)
    assert abs(report.trend_per_split) < 1
    assert report.source_label == "Manual splits"


def test_statistics_use_population_variance():
    report = analyze_splits([50.0, 60.0], "x")

    assert report.std_dev == pytest.approx(5.0)
    assert report.coefficient_of_variation == pytest.approx(100 * 5.0 / 55.0)


def test_consistency_score_formula():
    report = analyze_splits([60.2, 58.9, 59.5, 61.0], "x")
    expected = 100 - 6 * report.coefficient_of_variation - 30 * abs(report.trend_per_split)

    assert report.consistency_score == pytest.approx(expected)


def test_consistency_score_clamped_at_zero():
    report = analyze_splits([10.0, 100.0], "x")

    assert report.consistency_score == 0.0


def test_custom_weights():
    splits = [30.0, 31.0, 32.0]
    config = PacingConfig(cv_weight=0.0, slope_weight=10.0)
    report = analyze_splits(splits, "x", config)

    assert report.consistency_score == pytest.approx(100 - 10 * 1.0)


@pytest.mark.parametrize("a,b,n", [(30.0, 0.5, 6), (62.4, -0.75, 10), (45.0, 0.0, 2), (-3.0, 2.0, 5)])
def test_regression_recovers_perfect_line(a, b, n):
    model = linear_regression([a + b * i for i in range(n)])

    assert model.slope == pytest.approx(b, abs=1e-9)
    assert model.intercept == pytest.approx(a, abs=1e-9)


def test_regression_single_value_is_flat():
    model = linear_regression([42.0])

    assert model.slope == 0.0
    assert model.intercept == 42.0


def test_fitted_line_matches_predictions():
    report = analyze_splits([30.0, 31.0, 33.0], "x")
    fitted = report.regression.fitted(report.count)

    assert len(fitted) == 3
    assert fitted[0] == pytest.approx(report.regression.intercept)
    assert fitted[2] == pytest.approx(report.regression.predict(2))


def test_invariants_over_random_sequences():
    rng = np.random.default_rng(7)
    for _ in range(300):
        n = int(rng.integers(2, 40))
        splits = list(rng.uniform(15.0, 150.0, size=n))
        report = analyze_splits(splits, "random")

        assert report.drop_off_percent >= 0
        assert all(report.best <= s <= report.worst for s in splits)
        assert 0.0 <= report.consistency_score <= 100.0


@pytest.mark.parametrize("splits", [[], [58.9]])
def test_insufficient_data(splits):
    with pytest.raises(InsufficientData):
        analyze_splits(splits, "Manual splits")


def test_non_positive_splits_rejected():
    with pytest.raises(ValueError):
        analyze_splits([60.0, 0.0, 59.0], "x")


def test_report_to_dict():
    data = analyze_splits([60.0, 61.0], "Image OCR").to_dict()

    assert data["source_label"] == "Image OCR"
    assert set(data["regression"]) == {"slope", "intercept"}


def test_practice_focus_branches():
    assert practice_focus(0.5) == "front-half endurance"
    assert practice_focus(0.12) == "negative-split control"
    assert practice_focus(-0.4) == "negative-split control"


def test_practice_prompt_mentions_focus():
    report = analyze_splits([58.0, 59.0, 60.0], "x")

    assert "front-half endurance" in practice_prompt(report)
