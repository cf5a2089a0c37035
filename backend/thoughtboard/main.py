from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from thoughtboard.config import settings
from thoughtboard.database import init_db, dispose_engine
from thoughtboard.routers import auth_router, boards_router, thoughts_router, connections_router
from thoughtboard.utils.logging_config import setup_logging, fastapi_logger
from thoughtboard.utils.rate_limit import close_rate_limiter
from thoughtboard.error_handlers import register_exception_handlers
from thoughtboard.middleware import RateLimitHeaderMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    fastapi_logger.info(f"Starting {settings.APP_NAME}")
    await init_db()
    fastapi_logger.info("Database initialized")
    yield
    # Shutdown
    fastapi_logger.info("Shutting down application")
    await close_rate_limiter()
    fastapi_logger.info("Rate limiter connections closed")
    await dispose_engine()


app = FastAPI(
    title=settings.APP_NAME,
    description="Visual note-taking boards: thoughts, connections and an infinite canvas",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate Limit Headers Middleware (must be added after CORS)
if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(RateLimitHeaderMiddleware)

# Global Exception Handlers
register_exception_handlers(app)

# API Routers
app.include_router(auth_router)
app.include_router(boards_router)
app.include_router(thoughts_router)
app.include_router(connections_router)


# Health Check
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "database": "sqlite" if settings.is_sqlite else "postgresql",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("thoughtboard.main:app", host="0.0.0.0", port=3001, reload=True)
