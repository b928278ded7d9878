"""
Cross-platform storage abstraction.

This package provides:
- Abstract file/folder contracts shared by every storage provider
- A local disk implementation of those contracts
- Provider-agnostic copy, move and recursive creation algorithms
- Provider and service layers for app-data, temp and user-picked roots
"""

# Contracts
from .base import AsyncByteStream, FileContent, StorageFile, StorageFolder, StorageItem

# Errors
from .errors import (
    StorageAccessError,
    StorageConflictError,
    StorageError,
    StoragePermissionError,
)

# Local disk implementation
from .local import LocalFile, LocalFileContent, LocalFolder, as_file, as_folder

# Algorithms
from .operations import (
    contains_item,
    copy_file_contents,
    copy_file_to,
    copy_folder_contents,
    copy_folder_to,
    copy_to,
    create_file_recursive,
    create_folder_recursive,
    get_name_without_extension,
    get_relative_path,
    move_file_to,
    move_folder_to,
    move_to,
)

# Providers and services
from .providers import (
    LocalStorageProvider,
    LocalStorageService,
    PickerPrompt,
    StorageProvider,
    StorageService,
)
from .types import CollisionOption, DialogSettings, FileOpenMode, PickerKind

__all__ = [
    # Types
    "CollisionOption",
    "DialogSettings",
    "FileOpenMode",
    "PickerKind",
    # Contracts
    "AsyncByteStream",
    "FileContent",
    "StorageFile",
    "StorageFolder",
    "StorageItem",
    # Errors
    "StorageAccessError",
    "StorageConflictError",
    "StorageError",
    "StoragePermissionError",
    # Local disk implementation
    "LocalFile",
    "LocalFileContent",
    "LocalFolder",
    "as_file",
    "as_folder",
    # Algorithms
    "contains_item",
    "copy_file_contents",
    "copy_file_to",
    "copy_folder_contents",
    "copy_folder_to",
    "copy_to",
    "create_file_recursive",
    "create_folder_recursive",
    "get_name_without_extension",
    "get_relative_path",
    "move_file_to",
    "move_folder_to",
    "move_to",
    # Providers and services
    "LocalStorageProvider",
    "LocalStorageService",
    "PickerPrompt",
    "StorageProvider",
    "StorageService",
]
