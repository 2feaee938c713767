"""Services package"""

from .storage import StorageService, get_storage

__all__ = [
    "StorageService",
    "get_storage",
]
