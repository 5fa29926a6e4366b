"""Media storage port (abstract interface).

Product photos and videos live in an object store. Adapters return a public
URL on store and accept that same URL on delete.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """The object store rejected an upload or delete."""


class MediaStorage(ABC):
    @abstractmethod
    def store(self, data: bytes, filename: str, folder: str) -> str:
        """Upload ``data`` and return its public URL."""
        ...

    @abstractmethod
    def delete(self, url: str) -> None:
        """Remove a previously stored object. Unknown URLs are ignored."""
        ...
