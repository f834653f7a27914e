from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .core.logging import get_logger
from .database import get_db, init_db
from .core.middleware import ExceptionHandlingMiddleware, register_exception_handlers
from .schemas.result import Result, Error, ErrorCategory

# Import routes
from .api.routes import auth, user, grocery_lists, grocery_items, master_list, tags

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    description="Grocery lists with a personal master list, tags and list sharing",
    lifespan=lifespan,
)

# Add exception handling middleware FIRST
app.add_middleware(ExceptionHandlingMiddleware, log_internal_errors=True)
register_exception_handlers(app, log_internal_errors=True)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(
    auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["authentication"]
)
app.include_router(user.router, prefix=f"{settings.API_PREFIX}/users", tags=["users"])
app.include_router(
    grocery_lists.router,
    prefix=f"{settings.API_PREFIX}/grocery-lists",
    tags=["grocery-lists"]
)
app.include_router(
    grocery_items.router,
    prefix=f"{settings.API_PREFIX}/grocery-lists",
    tags=["grocery-items"]
)
app.include_router(
    master_list.router,
    prefix=f"{settings.API_PREFIX}/master-list",
    tags=["master-list"]
)
app.include_router(tags.router, prefix=f"{settings.API_PREFIX}/tags", tags=["tags"])


@app.get("/", response_model=Result[dict])
async def root():
    """Root endpoint with API information"""
    return Result.successful(
        data={
            "message": f"Welcome to {settings.PROJECT_NAME} API",
            "version": settings.VERSION,
            "docs": f"{settings.API_PREFIX}/docs",
            "status": "online",
        }
    )


@app.get("/health", response_model=Result[dict])
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint for load balancers and monitoring"""
    try:
        db.execute(text("SELECT 1"))
        return Result.successful(data={"status": "healthy", "database": "connected"})
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        error = Error(
            error="Service unavailable",
            message="Database connection failed",
            status_code=503,
            category=ErrorCategory.INTERNAL,
        )
        return JSONResponse(status_code=503, content=Result.failure(error).model_dump())
