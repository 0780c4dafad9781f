"""
API Gateway for Feedback Hub.

This module provides the main FastAPI application, wiring the component
routers together with CORS, request logging, error mapping and a health
endpoint.
"""

import logging
import time
from datetime import datetime
from typing import Any, Dict, Optional

import psutil
from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware

from feedbackhub import __version__
from feedbackhub.config import settings
from feedbackhub.analysis import AnalysisClient
from feedbackhub.dependencies import close_dependencies, get_analysis_client, get_datastore
from feedbackhub.feedback.api import router as feedback_router
from feedbackhub.insights.api import router as insights_router
from feedbackhub.projects.api import router as projects_router
from feedbackhub.storage import Datastore
from feedbackhub.utils.error_handling import FeedbackHubError, catch_and_log


# Set up logging
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Feedback Hub API",
    description="Collect product feedback and turn it into AI-written insights",
    version=__version__
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Gateway start time (for uptime calculation)
START_TIME = datetime.now()


class SystemHealth(BaseModel):
    """System health status model."""
    status: str  # "healthy", "degraded", "unhealthy"
    uptime_seconds: float
    components: Dict[str, Dict[str, Any]]
    resource_utilization: Dict[str, float]
    timestamp: datetime = Field(default_factory=datetime.now)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """
        Handle a request, logging details.

        Args:
            request: The incoming request
            call_next: The next middleware/route handler

        Returns:
            The response
        """
        start_time = time.time()

        logger.info(f"Request: {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            logger.info(f"Response: {request.method} {request.url.path} {response.status_code} - {duration_ms:.2f}ms")

            response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"

            return response
        except Exception as e:
            logger.error(f"Error processing request {request.method} {request.url.path}: {e}")

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "error": "Internal server error"}
            )


# Add logging middleware
app.add_middleware(LoggingMiddleware)


@app.exception_handler(FeedbackHubError)
async def feedbackhub_error_handler(request: Request, exc: FeedbackHubError):
    """Map project errors to their status code and JSON body."""
    if exc.status_code >= 500:
        logger.error(f"{exc.component} error on {request.url.path}: {exc.message} (code: {exc.code})")
    else:
        logger.warning(f"{exc.component} rejected {request.url.path}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 instead of 422."""
    logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": "Invalid request",
            "details": jsonable_encoder(exc.errors())
        }
    )


@app.get("/")
async def root():
    """Service banner."""
    return {
        "service": "Feedback Hub",
        "version": __version__,
        "status": "running"
    }


@catch_and_log(component="api_gateway", default_return={"status": "unhealthy"})
async def check_datastore(datastore: Datastore) -> Dict[str, Any]:
    """Ping both tables; any failure marks the datastore unhealthy."""
    tables = await datastore.ping()
    healthy = all(state == "connected" for state in tables.values())
    return {"status": "healthy" if healthy else "unhealthy", "tables": tables}


# System health endpoints
@app.get("/health", response_model=SystemHealth)
async def get_system_health(
    datastore: Datastore = Depends(get_datastore),
    analysis_client: AnalysisClient = Depends(get_analysis_client)
):
    """
    Get system health status.

    Returns:
        System health status
    """
    uptime = (datetime.now() - START_TIME).total_seconds()

    components = {
        "api_gateway": {"status": "healthy", "uptime_seconds": uptime},
        "datastore": await check_datastore(datastore),
        "analysis": {
            "status": "healthy" if analysis_client.available else "fallback",
            "model": analysis_client.model
        }
    }

    # Get resource utilization
    cpu_percent = psutil.cpu_percent(interval=0.1)
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')

    resource_utilization = {
        "cpu_percent": cpu_percent,
        "memory_percent": memory.percent,
        "memory_used_mb": memory.used / (1024 * 1024),
        "disk_percent": disk.percent,
        "disk_free_gb": disk.free / (1024 * 1024 * 1024)
    }

    # Determine overall status
    health_status = "healthy"
    if components["datastore"]["status"] != "healthy":
        health_status = "unhealthy"
    elif cpu_percent > 90 or memory.percent > 90 or disk.percent > 95:
        health_status = "degraded"

    return SystemHealth(
        status=health_status,
        uptime_seconds=uptime,
        components=components,
        resource_utilization=resource_utilization
    )


app.include_router(feedback_router, prefix=settings.api_prefix)
app.include_router(insights_router, prefix=settings.api_prefix)
app.include_router(projects_router, prefix=settings.api_prefix)


@app.on_event("startup")
async def startup_event():
    """Run when the API gateway starts."""
    logger.info(f"Feedback Hub {__version__} starting up (datastore: {settings.datastore_backend})")


@app.on_event("shutdown")
async def shutdown_event():
    """Run when the API gateway shuts down."""
    logger.info("Feedback Hub shutting down")
    await close_dependencies()


def run_gateway(host: Optional[str] = None, port: Optional[int] = None, reload: Optional[bool] = None):
    """Run the API gateway with Uvicorn."""
    import uvicorn
    uvicorn.run(
        "feedbackhub.api_gateway.gateway:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.debug if reload is None else reload
    )


if __name__ == "__main__":
    run_gateway()
