"""
Pacing analysis for split sequences
"""

from .pacing import (
    RegressionModel,
    PacingReport,
    linear_regression,
    analyze_splits,
    practice_focus,
    practice_prompt
)

__all__ = [
    'RegressionModel',
    'PacingReport',
    'linear_regression',
    'analyze_splits',
    'practice_focus',
    'practice_prompt'
]
