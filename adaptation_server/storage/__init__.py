"""Image blob storage."""

from .blob_store import BlobContent, BlobStore, generate_filename

__all__ = ["BlobContent", "BlobStore", "generate_filename"]
