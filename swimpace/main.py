"""
Swim Pace App - FastAPI Backend
Split extraction (manual, OCR, video) and pacing analytics
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from .api.routes import router

# Initialize FastAPI app
app = FastAPI(
    title="Swim Pace API",
    description="Extract swim splits from text, screenshots or video and analyze pacing",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
