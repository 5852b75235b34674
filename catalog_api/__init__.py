"""Streaming Catalog API."""
