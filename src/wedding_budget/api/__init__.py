"""
FastAPI application serving budget allocations.

Every endpoint is a pure computation over the request payload.
"""

from wedding_budget.api.app import create_app, run_server

__all__ = ["create_app", "run_server"]
