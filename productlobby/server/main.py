"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from productlobby.core.cache import close_cache
from productlobby.core.database import init_db
from productlobby.core.logging_config import get_logger, setup_logging
from productlobby.core.monitoring import initialize_logfire

from .api.v1 import (
    analytics,
    brands,
    campaigns,
    comments,
    events,
    health,
    lobbies,
    milestones,
    polls,
    scores,
    surveys,
    team,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestTimingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the database tables on startup and releases the cache connection
    on shutdown.
    """
    # Startup
    try:
        logger.info("Starting up ProductLobby Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down ProductLobby Server...")
    await close_cache()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ProductLobby Server API

    Consumers lobby for products they want, pledge support or purchase intent,
    and brands read a credibility-weighted demand signal for every campaign.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestTimingMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, prefix=constant.API_V1_STR, tags=["health"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users", tags=["users"])
app.include_router(brands.router, prefix=f"{constant.API_V1_STR}/brands", tags=["brands"])
app.include_router(campaigns.router, prefix=f"{constant.API_V1_STR}/campaigns", tags=["campaigns"])
app.include_router(lobbies.router, prefix=f"{constant.API_V1_STR}/campaigns", tags=["lobbies"])
app.include_router(events.router, prefix=f"{constant.API_V1_STR}/campaigns", tags=["events"])
app.include_router(team.router, prefix=f"{constant.API_V1_STR}/campaigns", tags=["team"])
app.include_router(milestones.router, prefix=f"{constant.API_V1_STR}/campaigns", tags=["milestones"])
app.include_router(analytics.router, prefix=f"{constant.API_V1_STR}/campaigns", tags=["analytics"])
app.include_router(comments.router, prefix=constant.API_V1_STR, tags=["comments"])
app.include_router(polls.router, prefix=constant.API_V1_STR, tags=["polls"])
app.include_router(surveys.router, prefix=constant.API_V1_STR, tags=["surveys"])
app.include_router(scores.router, prefix=constant.API_V1_STR, tags=["scores"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
