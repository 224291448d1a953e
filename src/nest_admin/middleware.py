import logging
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from asgi_correlation_id.middleware import CorrelationIdMiddleware

from nest_admin.config import app_cfg

logger = logging.getLogger(__name__)


class ClientIPLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log client IP, user agent, and request path."""

    async def dispatch(self, request: Request, call_next):
        """Process request and log client information."""
        client_ip = self._get_real_client_ip(request)
        user_agent = request.headers.get("user-agent", "unknown")
        path = request.url.path
        method = request.method

        response = await call_next(request)
        logger.info(
            f"client_ip={client_ip} "
            f"user_agent={user_agent} "
            f"method={method} "
            f"path={path} "
            f"status={response.status_code}"
        )
        return response

    def _get_real_client_ip(self, request: Request) -> str:
        """Extract the real client IP from forwarded headers."""
        true_client_ip = request.headers.get("true-client-ip")
        if true_client_ip:
            return true_client_ip.strip()

        # First IP is the original client
        forwarded_for_ips = request.headers.get("x-forwarded-for")
        if forwarded_for_ips:
            return forwarded_for_ips.split(",")[0].strip()

        for header in ["x-real-ip", "x-client-ip"]:
            client_ip = request.headers.get(header)
            if client_ip:
                return client_ip.strip()

        return request.client.host if request.client else "unknown"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds conservative security headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response


def configure_middleware(api: FastAPI) -> FastAPI:
    api.add_middleware(SecurityHeadersMiddleware)
    api.add_middleware(ClientIPLoggingMiddleware)
    # Session cookies are sent cross-origin, so the origin must be explicit
    api.add_middleware(
        CORSMiddleware,
        allow_origins=[app_cfg.CLIENT_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    api.add_middleware(CorrelationIdMiddleware)

    logger.info("Middleware configured successfully")

    return api
