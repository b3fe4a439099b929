from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

# Import database components
from app.database.database import engine, Base

# Import middleware
from app.common.middleware import TenantMiddleware, SecurityHeadersMiddleware

# Import routers
from app.modules.categories.router import categories_router
from app.modules.products.router import product_router
from app.modules.sales.router import sales_router
from app.modules.reports.routers import (
    sales_router as sales_reports_router,
    inventory_router as inventory_reports_router,
    summary_router as summary_reports_router
)

# Import models for table creation
import app.modules.categories.models
import app.modules.products.models
import app.modules.sales.models

from app.core.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="Papelería API",
    description="API multi-tenant de ventas e inventario para papelerías",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(TenantMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(categories_router, prefix="/categories", tags=["Categories"])
app.include_router(product_router, tags=["Products"])
app.include_router(sales_router, tags=["Sales"])
app.include_router(summary_reports_router)
app.include_router(sales_reports_router)
app.include_router(inventory_reports_router)


@app.get("/")
async def read_root():
    return {
        "message": "Papelería API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

@app.on_event("startup")
async def startup_event():
    logger.info("Papelería API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Stock adjust mode: {settings.STOCK_ADJUST_MODE}")
    logger.info(f"Verify stock on create: {settings.VERIFY_STOCK_ON_CREATE}")

    # Create database tables (only for development - no migrations yet)
    if settings.ENVIRONMENT == "development":
        Base.metadata.create_all(bind=engine)

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Papelería API shutting down...")
