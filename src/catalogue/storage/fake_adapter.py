"""In-memory media storage for development and testing."""

from uuid import uuid4

from catalogue.storage.port import MediaStorage, StorageError


class InMemoryMediaStorage(MediaStorage):
    def __init__(self, base_url: str = "memory://media") -> None:
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, bytes] = {}
        self.calls: list[dict] = []
        self.fail_uploads = False

    def store(self, data: bytes, filename: str, folder: str) -> str:
        self.calls.append({"method": "store", "filename": filename, "folder": folder, "size": len(data)})
        if self.fail_uploads:
            raise StorageError(f"Upload of {filename} rejected")

        extension = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
        url = f"{self.base_url}/{folder}/{uuid4().hex}.{extension}"
        self.objects[url] = data
        return url

    def delete(self, url: str) -> None:
        self.calls.append({"method": "delete", "url": url})
        self.objects.pop(url, None)
