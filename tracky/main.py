from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tracky.config import settings
from tracky.database import Base, get_engine, get_pool_status
from tracky.logging_config import configure_logging
from tracky.middleware.rate_limit import limiter
from tracky.middleware.request_id import RequestIDMiddleware
from tracky.routers import habits, fitness, learning, discipline, streaks, challenge, rewards
from tracky.utils.logger import get_logger
import tracky.models  # noqa: F401  registers tables on Base.metadata

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Initialize database tables
Base.metadata.create_all(bind=get_engine())

# Conditional docs configuration
if settings.DEBUG:
    docs_config = {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}
    logger.info("DEBUG mode: Swagger docs enabled at /docs")
else:
    docs_config = {"docs_url": None, "redoc_url": None, "openapi_url": None}

app = FastAPI(
    title="Tracky API",
    description="Discipline scoring, streaks and 75 day challenges for Tracky",
    version="1.0.0",
    **docs_config
)

# Set up rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add Request ID middleware first for proper request tracing
app.add_middleware(RequestIDMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(habits.router)
app.include_router(fitness.router)
app.include_router(learning.router)
app.include_router(discipline.router)
app.include_router(streaks.router)
app.include_router(challenge.router)
app.include_router(rewards.router)


@app.get("/")
async def root():
    return {"message": "Tracky API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "tracky-api", "database_pool": get_pool_status()}
