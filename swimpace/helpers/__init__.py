"""
Helper utilities for the swim pacing application
"""

from .utils import seconds_to_mmss, validate_image_file, validate_video_file
from .storage import StorageManager, VideoSession

__all__ = ['seconds_to_mmss', 'validate_image_file', 'validate_video_file',
           'StorageManager', 'VideoSession']
