"""Object storage protocol for profile images."""

from typing import Protocol


class IObjectStorage(Protocol):
    """Storage for binary objects addressed by key."""

    async def presign_upload(self, key: str, content_type: str, expires_in: int) -> str:
        """
        Create a URL the client can PUT the object to.

        Raises:
            ObjectStorageError: If the URL cannot be generated
        """
        ...

    async def delete(self, key: str) -> None:
        """
        Delete the object stored under ``key``.

        Raises:
            ObjectStorageError: If the storage call fails
        """
        ...
