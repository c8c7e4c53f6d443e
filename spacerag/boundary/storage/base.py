"""
Blob storage interface.

Dependencies: abc, pydantic
System role: Capability contract for raw document bytes
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class StoredObject(BaseModel):
    """Reference to an object written to blob storage."""

    key: str
    url: str
    size: int
    content_type: str


class BlobStorage(ABC):
    """get / put / presign over raw document bytes."""

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """
        Read an object.

        Raises:
            MissingInputError: The key does not exist
            StorageError: The store could not be reached
        """

    @abstractmethod
    async def put(self, data: bytes, key: str, content_type: str) -> StoredObject:
        """Write an object and return its reference."""

    @abstractmethod
    async def presign(self, key: str, ttl_seconds: int) -> str:
        """Time-limited download URL for an object."""
