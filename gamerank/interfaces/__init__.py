"""
Interfaces - User-facing entry points.

- api: FastAPI JSON API
- cli: Command-line interface
"""

__all__ = ["api", "cli"]
