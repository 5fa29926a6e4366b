"""Media storage factory.

Provides get_storage() / set_storage() to swap implementations. The default
is an in-memory store rooted at ``MEDIA_BASE_URL``.
"""

from catalogue.storage.fake_adapter import InMemoryMediaStorage
from catalogue.storage.port import MediaStorage
from shared.settings import get_settings

_current_storage: MediaStorage | None = None


def get_storage() -> MediaStorage:
    global _current_storage
    if _current_storage is None:
        _current_storage = InMemoryMediaStorage(base_url=get_settings().media_base_url)
    return _current_storage


def set_storage(storage: MediaStorage) -> None:
    """Override the active media storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    global _current_storage
    _current_storage = None
