from .paths import StoragePaths, build_storage_paths

__all__ = [
    "StoragePaths",
    "build_storage_paths",
]
