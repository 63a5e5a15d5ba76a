"""
Vinylla API modules - External service and storage integrations.
"""
from .discogs import DiscogsClient
from .collection import CollectionStore

__all__ = ['DiscogsClient', 'CollectionStore']
