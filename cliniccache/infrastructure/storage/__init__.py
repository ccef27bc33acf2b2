from cliniccache.infrastructure.storage.disk_storage import DiskStorage, InMemoryStorage, open_storage

__all__ = ["DiskStorage", "InMemoryStorage", "open_storage"]
