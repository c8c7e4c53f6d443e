"""
FastAPI application entry point.

Builds the app from environment settings for uvicorn:
    uvicorn spacerag.main:app

Dependencies: fastapi, uvicorn, spacerag.api
System role: Application initialization
"""

import uvicorn

from spacerag.api.main import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "spacerag.main:app",
        host="0.0.0.0",
        port=8000,
    )
