"""
Main FastAPI application entry point.
"""

from fastapi import FastAPI

from tvmcalc.api import router as api_router
from tvmcalc.config import get_settings
from tvmcalc.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Time value of money and cash flow calculations",
    version="0.1.0",
    debug=settings.debug,
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": "0.1.0"}


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "tvmcalc.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
