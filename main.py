"""FastAPI application untuk workflow kompensasi kelas."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.database import init_db
from src.api.router import api_router, get_tags_metadata
from src.middleware.error_handler import add_error_handlers
from src.utils.logging import setup_logging

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("🚀 Starting Kompensasi API...")

    try:
        await init_db()
        logger.info("✅ Database initialized successfully")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise

    logger.info("📊 Configuration loaded:")
    logger.info(f"   - Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"   - Database: {'SQLite' if settings.is_sqlite else 'PostgreSQL'}")
    logger.info(f"   - History stream batch size: {settings.HISTORY_STREAM_BATCH_SIZE}")

    yield

    # Shutdown
    logger.info("🛑 Shutting down Kompensasi API...")


def create_application() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="""
        **Kompensasi API**

        Alur pengajuan kompensasi kelas:

        * **Sesi kompensasi** dibuka / ditutup oleh admin
        * **Dosen PA** ditugaskan per kelas
        * **Sekretaris kelas** mengajukan kompensasi saat sesi aktif
        * **Admin** memverifikasi atau menolak pengajuan

        ## Authentication

        Token JWT diterbitkan oleh layanan login. Sertakan
        `Authorization: Bearer <token>` di setiap request.

        ## Roles

        * `ADMIN` - Admin jurusan
        * `SEKRETARIS` - Sekretaris kelas
        * `DOSEN` - Dosen PA
        * `MAHASISWA` - Mahasiswa (hanya melihat sesi)
        """,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_tags=get_tags_metadata(),
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS_LIST,
        allow_credentials=True,
        allow_methods=settings.CORS_METHODS_LIST,
        allow_headers=settings.CORS_HEADERS_LIST,
    )

    # Add error handlers
    add_error_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.PROJECT_NAME}",
            "version": settings.VERSION,
            "status": "operational",
            "documentation": "/docs" if settings.DEBUG else "Documentation disabled in production",
            "environment": "development" if settings.DEBUG else "production"
        }

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": "development" if settings.DEBUG else "production"
        }

    @app.get(f"{settings.API_V1_STR}/info", tags=["System"])
    async def api_info():
        """API information and available endpoints."""
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "description": "Kompensasi API",
            "endpoints": {
                "sesi": f"{settings.API_V1_STR}/kompensasi/sesi/",
                "dosen_pa": f"{settings.API_V1_STR}/kompensasi/dosen-pa/",
                "pengajuan": f"{settings.API_V1_STR}/kompensasi/pengajuan/"
            },
            "documentation": "/docs" if settings.DEBUG else None
        }

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info" if not settings.DEBUG else "debug",
        access_log=True
    )
