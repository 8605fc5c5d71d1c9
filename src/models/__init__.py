"""ORM models."""

from models.base import Base
from models.cache_entry import CacheEntry

__all__ = [
    "Base",
    "CacheEntry",
]
