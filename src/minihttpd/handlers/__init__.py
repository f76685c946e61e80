"""
Request handlers: deciding which file answers a request, and sending it.
"""

from .static import ResourceResolver, ResolvedResource, RootPolicy
from .transmit import BodyTransmitter, DEFAULT_CHUNK_SIZE

__all__ = [
    "ResourceResolver",
    "ResolvedResource",
    "RootPolicy",
    "BodyTransmitter",
    "DEFAULT_CHUNK_SIZE",
]
