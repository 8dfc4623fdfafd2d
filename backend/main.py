"""
Sprint Coach Backend API

FastAPI application for sprint form analysis from pose keypoints.

Run with:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000

API docs available at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router as api_router
from api.websocket import websocket_endpoint
from core.config import settings
from core.services import create_pose_detector

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan (startup/shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Picks the pose detector implementation before the app starts
    accepting requests, and releases it on shutdown. This detector
    serves single-image requests; WebSocket sessions build their own.
    """
    # Startup
    logger.info(f"{settings.APP_NAME} starting up...")

    app.state.pose_detector = None
    try:
        app.state.pose_detector = create_pose_detector(settings.DETECTOR_BACKEND)
        logger.info(f"Pose detector '{settings.DETECTOR_BACKEND}' initialized")
    except Exception as e:
        logger.warning(f"Pose detector initialization warning: {e}")

    yield  # App runs here

    # Shutdown
    if app.state.pose_detector is not None:
        app.state.pose_detector.close()
    logger.info(f"{settings.APP_NAME} shutting down...")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    **Sprint Form Analyzer**

    Objective sprint-form metrics from body pose keypoints.

    ## Metrics

    - **Knee angle** - hip-knee-ankle angle, optimal 118-122 degrees
    - **Hip velocity** - speed of the hip midpoint between frames
    - **Arm symmetry** - difference between left and right elbow angles
    - **Overall score** - weighted 0-100 score

    ## Endpoints

    - `GET /api/health` - Health check
    - `POST /api/pose/detect` - Single image pose detection
    - `POST /api/analysis/frame` - Analyze one pose frame
    - `POST /api/analysis/sequence` - Analyze and summarize a recording
    - `WS /ws/sprint` - Real-time analysis stream
    """,
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Routes
# =============================================================================

# Include REST API routes
app.include_router(api_router, prefix="/api")

# WebSocket endpoint
app.websocket("/ws/sprint")(websocket_endpoint)


# =============================================================================
# Root endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "description": "Sprint Form Analyzer",
        "docs": "/docs",
        "health": "/api/health",
        "websocket": "ws://localhost:8000/ws/sprint"
    }


# =============================================================================
# Run directly (for development)
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
