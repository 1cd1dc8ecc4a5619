"""
Patient Records API - Main Application Entry Point
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from prometheus_client import make_asgi_app

from patient_records.api.errors import register_exception_handlers
from patient_records.api.router import api_router
from patient_records.core.config import settings
from patient_records.core.database import init_db
from patient_records.core.logging import RequestContextMiddleware, setup_logging
from patient_records.core.metrics import MetricsMiddleware
from patient_records.core.rate_limiter import RateLimitMiddleware, limiter
from patient_records.core.security import PasswordHasher, TokenService, TokenSettings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown."""
    # Startup
    setup_logging()
    await init_db()
    yield
    # Shutdown
    pass


app = FastAPI(
    title="Patient Records API",
    description="User accounts with token authentication and patient record management",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Credential services, built once per process from settings
app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
app.state.token_service = TokenService(TokenSettings.from_settings(settings))
app.state.limiter = limiter

# Middleware
app.add_middleware(RateLimitMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

# Mount Prometheus metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# Include API routes
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "patient-records-api"}


@app.get("/")
async def root():
    """Root endpoint with system information."""
    return {
        "service": "Patient Records API",
        "version": "1.0.0",
        "docs": "/api/docs",
        "health": "/health",
        "metrics": "/metrics",
    }


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "patient_records.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
