"""Middleware package for the pairgate API."""

from pairgate.middleware.correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from pairgate.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from pairgate.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "CORRELATION_ID_HEADER",
    "CorrelationIdMiddleware",
    "SecurityHeadersMiddleware",
    "limiter",
    "rate_limit_exceeded_handler",
]
