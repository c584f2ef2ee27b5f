"""
In-memory session state for uploaded videos
"""

import os
import uuid
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..detection.zone import Zone
from ..errors import MissingPrerequisite

logger = logging.getLogger(__name__)


@dataclass
class VideoSession:
    video_id: str
    path: str
    duration: float
    width: int
    height: int
    zone: Optional[Zone] = None


class StorageManager:
    """Tracks uploaded videos (temp files) and their calibrated zones"""

    def __init__(self):
        self.videos: Dict[str, VideoSession] = {}

    def store_video(self, path: str, duration: float, width: int, height: int) -> VideoSession:
        """Register an uploaded video and return its session"""
        video_id = str(uuid.uuid4())
        session = VideoSession(video_id=video_id, path=path, duration=duration,
                               width=width, height=height)
        self.videos[video_id] = session
        return session

    def get_video(self, video_id: str) -> VideoSession:
        """Get video session by ID"""
        if video_id not in self.videos:
            raise MissingPrerequisite(f"No video loaded with id {video_id}")
        return self.videos[video_id]

    def set_zone(self, video_id: str, zone: Zone) -> VideoSession:
        session = self.get_video(video_id)
        session.zone = zone
        return session

    def discard_video(self, video_id: str) -> None:
        """Forget a video and delete its temp file"""
        session = self.videos.pop(video_id, None)
        if session is None:
            raise MissingPrerequisite(f"No video loaded with id {video_id}")
        try:
            os.remove(session.path)
        except FileNotFoundError:
            logger.debug(f"Temp file already gone: {session.path}")

    def clear(self) -> None:
        for video_id in list(self.videos):
            self.discard_video(video_id)


# Global storage instance
storage = StorageManager()
