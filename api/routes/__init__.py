"""
API routes package for lockdiff.
"""
from api.routes import comparison

__all__ = ["comparison"]
