"""
Interfaces - Protocols for dependency injection.

- store_protocol.py: durable song store
- cache_protocol.py: song cache
- metadata_protocol.py: external metadata lookup
"""

from .store_protocol import SongStoreProtocol
from .cache_protocol import SongCacheProtocol
from .metadata_protocol import MetadataLookupProtocol

__all__ = [
    "SongStoreProtocol",
    "SongCacheProtocol",
    "MetadataLookupProtocol",
]
