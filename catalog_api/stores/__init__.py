"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: engine/session handle and the catalog repository
- MongoDB: review documents
- Redis: metadata cache, view counters, trending sorted set

No aggregation logic in stores - that belongs in services.
"""
