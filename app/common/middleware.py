"""
Middleware for handling multi-tenancy
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from uuid import UUID
import logging

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Tenant-ID"


class TenantMiddleware(BaseHTTPMiddleware):
    """
    Middleware that extracts tenant_id from the X-Tenant-ID header
    and sets it on request.state for use in endpoint handlers.

    A missing header leaves request.state.tenant_id as None; the services
    reject the operation with NoActiveTenant. A malformed header is
    rejected here.
    """

    # Paths that don't require tenant context
    EXEMPT_PATHS = [
        "/docs",
        "/redoc",
        "/openapi.json",
        "/health",
    ]

    async def dispatch(self, request: Request, call_next):
        request.state.tenant_id = None

        if request.url.path == "/" or any(request.url.path.startswith(path) for path in self.EXEMPT_PATHS):
            return await call_next(request)

        # Skip for OPTIONS requests (CORS preflight)
        if request.method == "OPTIONS":
            return await call_next(request)

        tenant_header = request.headers.get(TENANT_HEADER)

        if tenant_header:
            try:
                request.state.tenant_id = UUID(tenant_header)
            except ValueError:
                return JSONResponse(
                    content={"detail": f"Invalid {TENANT_HEADER} format. Must be a valid UUID"},
                    status_code=status.HTTP_400_BAD_REQUEST,
                )
            logger.debug(f"Request to {request.url.path} with tenant_id: {request.state.tenant_id}")

        response = await call_next(request)

        if request.state.tenant_id is not None:
            response.headers[TENANT_HEADER] = str(request.state.tenant_id)

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers for production
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
