"""
Songs module - song library business logic and HTTP routes.

- services/ - SongService
- schemas/  - Pydantic request/response bodies
- routers/  - FastAPI routes
"""
