"""
Swim split extraction and pacing analytics
"""

__version__ = "1.0.0"
