"""
Utility functions used across the application
"""

from fastapi import HTTPException, UploadFile


ALLOWED_IMAGE_TYPES = ["image/png", "image/jpeg", "image/jpg", "image/webp", "image/bmp"]
ALLOWED_VIDEO_TYPES = ["video/mp4", "video/quicktime", "video/x-msvideo", "video/webm",
                       "video/x-matroska", "video/avi"]


def seconds_to_mmss(seconds: float) -> str:
    """Convert seconds to M:SS.ss format"""
    if seconds <= 0:
        return "0:00.00"
    minutes = int(seconds // 60)
    secs = seconds - minutes * 60
    return f"{minutes}:{secs:05.2f}"


def validate_image_file(file: UploadFile) -> None:
    """Validate uploaded image file"""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type")


def validate_video_file(file: UploadFile) -> None:
    """Validate uploaded video file"""
    if file.content_type not in ALLOWED_VIDEO_TYPES:
        raise HTTPException(status_code=400, detail="Invalid video type")
