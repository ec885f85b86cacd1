"""
Content Package
File-backed content store and hub/spoke maintenance.
"""

from .store import ContentError, ContentStore, write_json
from .sync import count_report, find_missing_hub_entries, sync_hub_spokes, sync_store

__all__ = [
    "ContentError",
    "ContentStore",
    "write_json",
    "count_report",
    "find_missing_hub_entries",
    "sync_hub_spokes",
    "sync_store",
]
