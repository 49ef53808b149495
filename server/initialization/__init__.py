"""
Server Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- app: Application factory, routes and middlewares
"""

__all__ = []
