"""
Song Library - song catalogue service

Structure:
- core/      - Domain, repository, config, connectors
- common/    - Shared utilities (logging)
- modules/   - Business modules (songs)
- api/       - FastAPI application, health and metrics
"""

__version__ = "1.0.0"
