"""
Services
Page helpers shared by the routers.
"""

from . import feeds, links, structured_data

__all__ = ["feeds", "links", "structured_data"]
