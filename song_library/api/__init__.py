"""
API - FastAPI application.

- app.py    - create_app() factory and lifespan wiring
- errors.py - Domain error to HTTP status mapping
- health.py - /ping, /health, /health/ready, /metrics
"""

from .app import create_app

__all__ = ["create_app"]
