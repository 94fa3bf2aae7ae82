"""Main FastAPI application with all middleware"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
import logging

from app.core.config import settings
from app.core.database import init_db, close_db
from app.core.exceptions import register_exception_handlers
from app.core.middleware import setup_middleware
from app.middleware.rate_limit import limiter, custom_rate_limit_handler
from app.api import api_router
from app.api.health import router as health_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Starting up {settings.APP_NAME} API ({settings.ENVIRONMENT})...")
    await init_db()

    if settings.ORDER_PRICE_POLICY == "trust_client":
        logger.warning("ORDER_PRICE_POLICY=trust_client: order prices are accepted as submitted by the client")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME} API...")
    await close_db()

# Create FastAPI app
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Bakery storefront: catalog, cart, checkout, reviews and back-office",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)

register_exception_handlers(app)
setup_middleware(app)

# Include routers
app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(health_router)

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "docs": "/docs",
        "health": "/health"
    }
