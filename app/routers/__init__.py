"""
API Routers
Separate router modules for each domain.
"""

from app.routers import patch_map

__all__ = ["patch_map"]
