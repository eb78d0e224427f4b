"""
Service layer for business logic.

This package contains service classes that orchestrate the
conversion pipeline: extraction, deduplication, and chunked export.
"""
