"""HTTP service mode for docmap."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
