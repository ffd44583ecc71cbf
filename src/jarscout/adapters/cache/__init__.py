"""Unpack cache adapters."""

from jarscout.adapters.cache.collection_cache import CollectionCache


__all__ = ["CollectionCache"]
