"""
CrisisAI Responder - Service Layer

I/O helpers used by the API routes:
- uploads: image upload validation and optional storage
"""

from .uploads import ImageUploadHandler, StoredUpload

__all__ = [
    "ImageUploadHandler",
    "StoredUpload",
]
