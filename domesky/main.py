"""FastAPI application for the dome sky simulator."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from domesky.api.routes import sky, websocket


logging.basicConfig(level=logging.INFO)

app = FastAPI(
    title="Dome Sky Simulator",
    description="Sun/moon orbit, dome projection and eclipse model for a domed flat world",
    version="0.1.0",
)

# CORS configuration for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],  # Vite dev server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(sky.router)
app.include_router(websocket.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Dome Sky Simulator",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
