"""Typed failures raised by the stores, the cart service and the routers.

Every subclass carries the HTTP status and a stable ``code`` so the
exception handlers in ``storefront.main`` can render them as
``{"error": ..., "code": ...}`` without inspecting the type.
"""


class StorefrontError(Exception):
    status_code = 500
    code = "server_error"
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(StorefrontError):
    status_code = 400
    code = "invalid_input"
    default_message = "Invalid input"


class Unauthenticated(StorefrontError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Authentication required"


class NotFound(StorefrontError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class ConflictError(StorefrontError):
    status_code = 409
    code = "conflict"
    default_message = "Already exists"


class InsufficientStock(StorefrontError):
    status_code = 400
    code = "insufficient_stock"
    default_message = "Insufficient stock"


class RateLimited(StorefrontError):
    status_code = 429
    code = "rate_limited"
    default_message = "Too many requests, please try again later"


class ServiceUnavailable(StorefrontError):
    status_code = 503
    code = "service_unavailable"
    default_message = "Service temporarily unavailable"
