"""
API v1 package.

Contains versioned account routes (signup, verify, signin).
"""

from emailgate.api.v1.routes import request_validation_failure, router

__all__ = ["request_validation_failure", "router"]
