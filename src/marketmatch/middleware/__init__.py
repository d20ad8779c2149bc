# src/marketmatch/middleware/__init__.py

"""Middleware components for the Market Match API."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
