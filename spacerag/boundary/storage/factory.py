"""
Blob storage factory.

Dependencies: spacerag.configs
System role: Selects the storage implementation from configuration
"""

import logging

from spacerag.boundary.storage.base import BlobStorage
from spacerag.boundary.storage.local_storage import LocalBlobStorage
from spacerag.boundary.storage.s3_storage import S3BlobStorage
from spacerag.configs.storage import BlobStorageSettings

logger = logging.getLogger(__name__)


def create_blob_storage(settings: BlobStorageSettings) -> BlobStorage:
    """
    Build the configured blob storage.

    Raises:
        ValueError: Unknown provider
    """
    provider = settings.provider.lower()
    logger.info(f"{__name__}:create_blob_storage - Using provider={provider}")
    if provider == "s3":
        return S3BlobStorage(settings)
    if provider == "local":
        return LocalBlobStorage(settings.local_root)
    raise ValueError(f"Unknown blob storage provider: {settings.provider}")
