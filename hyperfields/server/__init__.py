"""
HyperFields admin server - FastAPI application factory.
"""

from .app import create_app, main

__all__ = ["create_app", "main"]
