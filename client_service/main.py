"""
Main FastAPI application entry point.
Configures the application, middleware, collaborators and routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from .clients.router import router as clients_router
from .database import engine
from .config import settings
from .clients.models import Base  # Import all models here for creating tables
from .core.cloudinary import CloudinaryBlobStore
from .notifications.service import NotificationService
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares

API_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and build the outbound collaborators once per process."""
    logger.info("🚀 Starting Client Service API...")
    Base.metadata.create_all(bind=engine)
    app.state.notification_service = NotificationService.from_settings(settings)
    app.state.blob_store = CloudinaryBlobStore.from_settings(settings)
    yield
    logger.info("Client Service API stopped")

# Create FastAPI application
app = FastAPI(
    title="Client Service API",
    description="Client registration, verification and authentication",
    version=API_VERSION,
    lifespan=lifespan
)

# Register exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(clients_router, prefix="/api/v1/clients", tags=["Clients"])

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Welcome message and API version
    """
    return {"message": "Welcome to Client Service API", "version": API_VERSION}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "database": "connected"}
