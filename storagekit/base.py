"""
Abstract storage contracts.

Every provider (local disk or otherwise) implements StorageFile and
StorageFolder; the algorithms in storagekit.operations only ever talk to
these interfaces.
"""

from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import List, Protocol

from .types import CollisionOption, FileOpenMode


class AsyncByteStream(Protocol):
    """Binary stream handed out by FileContent"""

    async def read(self, size: int = -1) -> bytes: ...

    async def write(self, data: bytes) -> int: ...

    async def flush(self) -> None: ...

    async def close(self) -> None: ...


class FileContent(ABC):
    """
    The opened content of a single file, for a single consumer.

    Use as an async context manager: every stream obtained from it is closed
    when the block exits, whichever way it exits.

        async with await file.open(FileOpenMode.READ) as content:
            stream = await content.read_stream()
            data = await stream.read()
    """

    @property
    @abstractmethod
    def open_mode(self) -> FileOpenMode: ...

    @abstractmethod
    async def read_stream(self) -> AsyncByteStream:
        """
        Open a stream positioned at the start of the file for reading.

        Raises:
            StoragePermissionError: The content was not opened for reading
            StorageAccessError: The backing data could not be opened
        """

    @abstractmethod
    async def write_stream(self) -> AsyncByteStream:
        """
        Open a stream that replaces the file content.

        Raises:
            StoragePermissionError: The content was opened with FileOpenMode.READ
            StorageAccessError: The backing data could not be opened
        """

    @abstractmethod
    async def aclose(self) -> None:
        """Release every stream handed out so far."""

    async def __aenter__(self) -> "FileContent":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class StorageItem(ABC):
    """A file or folder on some filesystem."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the item, including any file extension."""

    @property
    @abstractmethod
    def has_path(self) -> bool:
        """Whether get_path() can locate the item by a filesystem path."""

    @abstractmethod
    def get_path(self) -> str:
        """
        Absolute path of the item.

        Raises:
            StorageAccessError: The item lives somewhere without file paths
        """

    @abstractmethod
    async def remove(self) -> None:
        """Delete the item. Folders are removed with everything inside them."""

    @abstractmethod
    async def rename(self, desired_name: str) -> None:
        """
        Rename the item within its parent folder.

        Raises:
            StorageConflictError: desired_name is already used in the parent
            StorageAccessError: The parent folder cannot be determined
        """


class StorageFile(StorageItem):
    @property
    def file_type(self) -> str:
        """Extension of the file without the leading dot, e.g. 'txt'."""
        return PurePath(self.name).suffix.lstrip(".")

    @abstractmethod
    async def open(self, mode: FileOpenMode = FileOpenMode.READ) -> FileContent:
        """
        Open the file content.

        Raises:
            StorageAccessError: The file does not exist or cannot be opened
        """

    @abstractmethod
    async def read_text(self) -> str: ...

    @abstractmethod
    async def write_text(self, text: str) -> None:
        """Replace the whole file content with text."""

    @abstractmethod
    async def read_bytes(self) -> bytes: ...

    @abstractmethod
    async def write_bytes(self, data: bytes) -> None:
        """Replace the whole file content with data."""


class StorageFolder(StorageItem):
    @abstractmethod
    async def get_items(self) -> List[StorageItem]:
        """
        Snapshot of every direct child. Order is not guaranteed.

        Raises:
            StorageAccessError: The folder could not be enumerated
        """

    @abstractmethod
    async def get_file(self, relative_path: str) -> StorageFile:
        """
        Existing file at relative_path below this folder.

        Raises:
            StorageAccessError: No such file, or it could not be accessed
        """

    @abstractmethod
    async def get_folder(self, relative_path: str) -> "StorageFolder":
        """
        Existing folder at relative_path below this folder.

        Raises:
            StorageAccessError: No such folder, or it could not be accessed
        """

    @abstractmethod
    async def create_file(
        self, name: str, options: CollisionOption = CollisionOption.OPEN_EXISTING
    ) -> StorageFile:
        """
        Create a file directly inside this folder.

        Raises:
            StorageConflictError: name exists and options is FAIL_IF_EXISTS
            StorageAccessError: The file could not be created
        """

    @abstractmethod
    async def create_folder(
        self, name: str, options: CollisionOption = CollisionOption.OPEN_EXISTING
    ) -> "StorageFolder":
        """
        Create a folder directly inside this folder.

        Raises:
            StorageConflictError: name exists and options is FAIL_IF_EXISTS
            StorageAccessError: The folder could not be created
        """
