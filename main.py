"""
Swim Pace App - FastAPI Backend
Entry point for the swim pacing application
"""

import logging
import sys

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format='[%(levelname)s] %(name)s: %(message)s',
        stream=sys.stdout
    )
    uvicorn.run("swimpace.main:app", host="127.0.0.1", port=8000, reload=True)
