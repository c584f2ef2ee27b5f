"""
API route handlers for the swim pacing application
"""

import os
import asyncio
import tempfile
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import cv2
import numpy as np

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from pydantic import BaseModel

from ..analysis.pacing import PacingReport, analyze_splits, practice_prompt
from ..config import Settings, load_settings
from ..detection.event_detector import build_strategy
from ..detection.scanner import CancellationToken, detect_wall_contacts
from ..detection.video_source import VideoSampleSource
from ..errors import (
    InsufficientData,
    InsufficientEvents,
    MissingPrerequisite,
    ScanCancelled,
    SeekError,
)
from ..helpers.storage import storage
from ..helpers.utils import seconds_to_mmss, validate_image_file, validate_video_file
from ..ocr.text_extractor import TesseractRecognizer, TextRecognizer, extract_split_times, parse_splits

router = APIRouter()
logger = logging.getLogger(__name__)

OCR_UNAVAILABLE = "OCR unavailable on this server. Use manual split entry instead."


class SplitsRequest(BaseModel):
    text: str
    source_label: str = "Manual splits"


@lru_cache()
def get_settings() -> Settings:
    return load_settings()


@lru_cache()
def get_recognizer() -> TextRecognizer:
    return TesseractRecognizer()


def _pacing_payload(report: PacingReport, settings: Settings) -> Dict[str, Any]:
    payload = report.to_dict()
    payload["fitted"] = report.regression.fitted(report.count)
    payload["display"] = {
        "best": seconds_to_mmss(report.best),
        "mean": seconds_to_mmss(report.mean),
        "worst": seconds_to_mmss(report.worst),
    }
    payload["practice_prompt"] = practice_prompt(report, settings.pacing)
    return payload


def _analyze_or_422(splits, source_label: str, settings: Settings) -> Dict[str, Any]:
    try:
        report = analyze_splits(splits, source_label, settings.pacing)
    except (InsufficientData, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _pacing_payload(report, settings)


async def _cancel_on_disconnect(request: Request, token: CancellationToken, poll: float = 0.5) -> None:
    while not token.cancelled:
        if await request.is_disconnected():
            logger.warning("⚠️  Client disconnected, cancelling video scan")
            token.cancel()
            return
        await asyncio.sleep(poll)


@router.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"ok": True}


@router.post("/api/splits")
async def analyze_manual_splits(body: SplitsRequest, settings: Settings = Depends(get_settings)):
    """Analyze free-form split text"""
    splits = parse_splits(body.text)
    logger.info(f"📥 API: {len(splits)} manual splits")
    return {
        "splits": splits,
        "pacing": _analyze_or_422(splits, body.source_label, settings),
    }


@router.post("/api/ocr")
async def analyze_image_splits(
    file: UploadFile = File(...),
    recognizer: TextRecognizer = Depends(get_recognizer),
    settings: Settings = Depends(get_settings),
):
    """OCR an image of split times and analyze them when at least two are found"""
    validate_image_file(file)

    if not recognizer.available:
        raise HTTPException(status_code=503, detail=OCR_UNAVAILABLE)

    contents = await file.read()
    nparr = np.frombuffer(contents, np.uint8)
    image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

    if image is None:
        raise HTTPException(status_code=400, detail="Could not decode image")

    try:
        text, splits = extract_split_times(image, recognizer)
    except Exception as e:
        logger.error(f"❌ API: OCR failed: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")

    logger.info(f"📤 API: OCR produced {len(splits)} candidate splits")
    result: Dict[str, Any] = {"text": text, "splits": splits, "pacing": None}
    if len(splits) >= settings.pacing.min_splits:
        result["pacing"] = _analyze_or_422(splits, "Image OCR", settings)
    return result


@router.post("/api/videos")
async def upload_video(file: UploadFile = File(...), settings: Settings = Depends(get_settings)):
    """Store an uploaded video for calibration and analysis"""
    validate_video_file(file)

    suffix = os.path.splitext(file.filename or "")[1] or ".mp4"
    contents = await file.read()
    temp_file = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
    temp_file.write(contents)
    temp_file.close()

    try:
        with VideoSampleSource(temp_file.name, config=settings.detection) as source:
            session = storage.store_video(temp_file.name, source.duration,
                                          source.width, source.height)
    except MissingPrerequisite as e:
        os.remove(temp_file.name)
        raise HTTPException(status_code=400, detail=f"Could not decode video: {e}")
    except Exception as e:
        os.remove(temp_file.name)
        logger.error(f"❌ API: Exception reading upload: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")

    logger.info(f"📥 API: Stored video {session.video_id} ({session.duration:.1f}s)")
    return {
        "video_id": session.video_id,
        "duration": session.duration,
        "width": session.width,
        "height": session.height,
    }


@router.post("/api/videos/{video_id}/calibrate")
async def calibrate_video(video_id: str, settings: Settings = Depends(get_settings)):
    """Apply the default scan zone to a stored video"""
    try:
        session = storage.get_video(video_id)
        with VideoSampleSource(session.path, config=settings.detection) as source:
            zone = source.calibrate()
        storage.set_zone(video_id, zone)
    except MissingPrerequisite as e:
        raise HTTPException(status_code=404, detail=str(e))

    width, height = settings.detection.surface_size
    return {"video_id": video_id, "zone": zone.to_dict(),
            "surface": {"width": width, "height": height}}


@router.post("/api/videos/{video_id}/analyze")
async def analyze_video(
    video_id: str,
    request: Request,
    sample_rate: Optional[float] = Query(None, gt=0, le=30),
    sensitivity: Optional[float] = Query(None, gt=0),
    strategy: str = Query("threshold", pattern="^(threshold|peaks)$"),
    settings: Settings = Depends(get_settings),
):
    """Scan a stored video for wall contacts and analyze the derived splits"""
    detection = settings.detection
    sample_rate = detection.sample_rate if sample_rate is None else sample_rate
    sensitivity = detection.sensitivity if sensitivity is None else sensitivity

    try:
        session = storage.get_video(video_id)
    except MissingPrerequisite as e:
        raise HTTPException(status_code=404, detail=str(e))

    token = CancellationToken()
    watcher = asyncio.create_task(_cancel_on_disconnect(request, token))
    try:
        with VideoSampleSource(session.path, zone=session.zone, config=detection) as source:
            if source.zone is None:
                storage.set_zone(video_id, source.calibrate())
            result = await detect_wall_contacts(
                source,
                sample_rate=sample_rate,
                strategy=build_strategy(strategy, sensitivity, detection.refractory_seconds),
                cancel_token=token,
                config=detection,
            )
    except InsufficientEvents as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "events": e.events})
    except SeekError as e:
        logger.error(f"❌ API: Seek failed for video {video_id}: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except MissingPrerequisite as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ScanCancelled:
        logger.info(f"🛑 API: Scan of video {video_id} cancelled")
        raise HTTPException(status_code=499, detail="Scan cancelled")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ API: Exception analyzing video {video_id}: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")
    finally:
        watcher.cancel()

    return {
        "video_id": video_id,
        "zone": result.zone.to_dict() if result.zone else None,
        "samples_scanned": result.samples_scanned,
        "events": result.events,
        "splits": result.splits,
        "pacing": _analyze_or_422(result.splits, "Video event detector", settings),
    }


@router.delete("/api/videos/{video_id}")
async def delete_video(video_id: str):
    """Discard a stored video"""
    try:
        storage.discard_video(video_id)
    except MissingPrerequisite as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"video_id": video_id, "deleted": True}
