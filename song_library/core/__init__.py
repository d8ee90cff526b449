"""
Core - Domain and infrastructure.

- models.py     - Song and SongInfo
- errors.py     - Error hierarchy
- repository.py - Cache-coherent repository
- config/       - Settings and factory functions
- interfaces/   - Protocols for DI
- connectors/   - Store, cache and metadata client implementations
- monitoring/   - Prometheus metrics
"""
