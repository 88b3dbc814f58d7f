from tenantcms.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging

__all__ = ["StructuredLoggingMiddleware", "setup_structured_logging"]
