"""HTTP service mode for stubgen."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
