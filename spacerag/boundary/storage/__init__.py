"""
Blob storage boundary.

One BlobStorage interface with S3-compatible and local filesystem
implementations, chosen by configuration.

Exports: BlobStorage, StoredObject, S3BlobStorage, LocalBlobStorage, create_blob_storage
"""

from spacerag.boundary.storage.base import BlobStorage, StoredObject
from spacerag.boundary.storage.factory import create_blob_storage
from spacerag.boundary.storage.local_storage import LocalBlobStorage
from spacerag.boundary.storage.s3_storage import S3BlobStorage

__all__ = [
    "BlobStorage",
    "StoredObject",
    "S3BlobStorage",
    "LocalBlobStorage",
    "create_blob_storage",
]
