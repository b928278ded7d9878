"""
Local disk implementation of the storage contracts.

References wrap the absolute, unresolved ``pathlib.Path`` they were given, so
a symlinked entry keeps its own name. Constructing a reference to a path that
does not exist yet creates the empty file or directory right away, so holding
a reference always means the backing entry exists. Equality compares resolved
paths.
"""

import os
from contextlib import AsyncExitStack
from pathlib import Path
from typing import List

import aiofiles
from aiofiles import os as aioos

from .base import AsyncByteStream, FileContent, StorageFile, StorageFolder, StorageItem
from .collision import resolve_collision
from .config import settings
from .errors import StorageAccessError, StoragePermissionError, wrap_os_errors
from .logger import logger
from .operations import move_file_to, move_folder_to
from .types import CollisionOption, FileOpenMode
from .utils import rmtree_async, scandir_async

_ACCESS_FLAGS = {
    FileOpenMode.READ: os.R_OK,
    FileOpenMode.READ_WRITE: os.R_OK | os.W_OK,
}


class LocalFileContent(FileContent):
    def __init__(self, path: Path, mode: FileOpenMode) -> None:
        self._path = path
        self._mode = mode
        self._streams = AsyncExitStack()

    @property
    def open_mode(self) -> FileOpenMode:
        return self._mode

    @wrap_os_errors("Could not open a read stream for {self._path}")
    async def read_stream(self) -> AsyncByteStream:
        if self._mode not in (FileOpenMode.READ, FileOpenMode.READ_WRITE):
            raise StoragePermissionError(
                f"Creating a readable stream requires read permission on the file. Permission: {self._mode.value}"
            )
        stream = await aiofiles.open(self._path, "rb")
        self._streams.push_async_callback(stream.close)
        return stream

    @wrap_os_errors("Could not open a write stream for {self._path}")
    async def write_stream(self) -> AsyncByteStream:
        if self._mode != FileOpenMode.READ_WRITE:
            raise StoragePermissionError(
                f"Creating a writable stream requires write permission on the file. Permission: {self._mode.value}"
            )
        stream = await aiofiles.open(self._path, "wb")
        self._streams.push_async_callback(stream.close)
        return stream

    async def aclose(self) -> None:
        await self._streams.aclose()


class LocalFile(StorageFile):
    @wrap_os_errors("Could not create the file {path}")
    def __init__(self, path: str | Path) -> None:
        self._path = Path(os.path.abspath(path))
        if self._path.is_dir():
            raise StorageAccessError(f"{self._path} is a directory, not a file")
        # lexists: a dangling symlink is an existing entry, never touch its target
        if not os.path.lexists(self._path):
            self._path.touch()
            logger.debug(f"Created file {self._path}")

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def has_path(self) -> bool:
        return True

    def get_path(self) -> str:
        return str(self._path)

    @wrap_os_errors("Could not open {self._path}")
    async def open(self, mode: FileOpenMode = FileOpenMode.READ) -> LocalFileContent:
        mode = FileOpenMode(mode)
        if not await aioos.path.isfile(self._path):
            raise StorageAccessError(f"The file {self._path} does not exist")
        if not await aioos.access(self._path, _ACCESS_FLAGS[mode]):
            raise StorageAccessError(
                f"The file {self._path} cannot be opened in {mode.value} mode"
            )
        return LocalFileContent(self._path, mode)

    @wrap_os_errors("Could not read {self._path}")
    async def read_text(self) -> str:
        async with aiofiles.open(
            self._path, "r", encoding=settings.text_encoding, newline=""
        ) as f:
            return await f.read()

    @wrap_os_errors("Could not write {self._path}")
    async def write_text(self, text: str) -> None:
        async with aiofiles.open(
            self._path, "w", encoding=settings.text_encoding, newline=""
        ) as f:
            await f.write(text)

    @wrap_os_errors("Could not read {self._path}")
    async def read_bytes(self) -> bytes:
        async with aiofiles.open(self._path, "rb") as f:
            return await f.read()

    @wrap_os_errors("Could not write {self._path}")
    async def write_bytes(self, data: bytes) -> None:
        async with aiofiles.open(self._path, "wb") as f:
            await f.write(data)

    @wrap_os_errors("Could not remove the file {self._path}")
    async def remove(self) -> None:
        await aioos.remove(self._path)
        logger.debug(f"Removed file {self._path}")

    async def rename(self, desired_name: str) -> None:
        parent = self._path.parent
        if parent == self._path:
            raise StorageAccessError(f"Could not find the parent folder of {self._path}")

        renamed = await move_file_to(
            self, LocalFolder(parent), CollisionOption.FAIL_IF_EXISTS, desired_name
        )
        self._path = Path(renamed.get_path())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalFile):
            return NotImplemented
        return self._path.resolve() == other._path.resolve()

    def __hash__(self) -> int:
        return hash((LocalFile, self._path.resolve()))

    def __repr__(self) -> str:
        return f"LocalFile({str(self._path)!r})"


class LocalFolder(StorageFolder):
    @wrap_os_errors("Could not create the folder {path}")
    def __init__(self, path: str | Path) -> None:
        self._path = Path(os.path.abspath(path))
        if not os.path.lexists(self._path):
            self._path.mkdir(parents=True)
            logger.debug(f"Created folder {self._path}")
        elif not self._path.is_dir():
            raise StorageAccessError(f"{self._path} is not a directory")

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def has_path(self) -> bool:
        return True

    def get_path(self) -> str:
        return str(self._path)

    @wrap_os_errors("Could not list the items of {self._path}")
    async def get_items(self) -> List[StorageItem]:
        items: List[StorageItem] = []
        for entry_name, is_directory in await scandir_async(self._path):
            entry_path = self._path / entry_name
            items.append(LocalFolder(entry_path) if is_directory else LocalFile(entry_path))
        return items

    @wrap_os_errors("Could not access the file {relative_path} in {self._path}")
    async def get_file(self, relative_path: str) -> LocalFile:
        target = self._path / relative_path
        if not await aioos.path.isfile(target):
            raise StorageAccessError(f"The given file {target} does not exist")
        return LocalFile(target)

    @wrap_os_errors("Could not access the folder {relative_path} in {self._path}")
    async def get_folder(self, relative_path: str) -> "LocalFolder":
        target = self._path / relative_path
        if not await aioos.path.isdir(target):
            raise StorageAccessError(f"The given folder {target} does not exist")
        return LocalFolder(target)

    async def _child_exists(self, name: str) -> bool:
        return await aioos.path.exists(self._path / name)

    async def _remove_child(self, name: str) -> None:
        target = self._path / name
        if await aioos.path.isdir(target) and not await aioos.path.islink(target):
            await rmtree_async(target)
        else:
            await aioos.remove(target)

    async def _create_child_file(self, name: str) -> LocalFile:
        # "x" fails instead of truncating if another creator got there first
        async with aiofiles.open(self._path / name, "xb"):
            pass
        return LocalFile(self._path / name)

    async def _open_child_file(self, name: str) -> LocalFile:
        if not await aioos.path.isfile(self._path / name):
            raise StorageAccessError(f"The existing item {name} is not a file")
        return LocalFile(self._path / name)

    async def _create_child_folder(self, name: str) -> "LocalFolder":
        await aioos.mkdir(self._path / name)
        return LocalFolder(self._path / name)

    async def _open_child_folder(self, name: str) -> "LocalFolder":
        if not await aioos.path.isdir(self._path / name):
            raise StorageAccessError(f"The existing item {name} is not a folder")
        return LocalFolder(self._path / name)

    @wrap_os_errors("Could not create the file {name} in {self._path}")
    async def create_file(
        self, name: str, options: CollisionOption = CollisionOption.OPEN_EXISTING
    ) -> LocalFile:
        return await resolve_collision(
            name,
            options,
            exists=self._child_exists,
            create=self._create_child_file,
            open_existing=self._open_child_file,
            remove=self._remove_child,
        )

    @wrap_os_errors("Could not create the folder {name} in {self._path}")
    async def create_folder(
        self, name: str, options: CollisionOption = CollisionOption.OPEN_EXISTING
    ) -> "LocalFolder":
        return await resolve_collision(
            name,
            options,
            exists=self._child_exists,
            create=self._create_child_folder,
            open_existing=self._open_child_folder,
            remove=self._remove_child,
        )

    @wrap_os_errors("Could not remove the folder {self._path}")
    async def remove(self) -> None:
        if await aioos.path.islink(self._path):
            await aioos.remove(self._path)
        else:
            await rmtree_async(self._path)
        logger.debug(f"Removed folder {self._path}")

    async def rename(self, desired_name: str) -> None:
        parent = self._path.parent
        if parent == self._path:
            raise StorageAccessError(f"Could not find the parent folder of {self._path}")

        renamed = await move_folder_to(
            self, LocalFolder(parent), CollisionOption.FAIL_IF_EXISTS, desired_name
        )
        self._path = Path(renamed.get_path())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalFolder):
            return NotImplemented
        return self._path.resolve() == other._path.resolve()

    def __hash__(self) -> int:
        return hash((LocalFolder, self._path.resolve()))

    def __repr__(self) -> str:
        return f"LocalFolder({str(self._path)!r})"


def as_file(path: str | Path) -> LocalFile:
    """Reference the file at path, creating it if it does not exist."""
    return LocalFile(path)


def as_folder(path: str | Path) -> LocalFolder:
    """Reference the folder at path, creating it (and its parents) if it does not exist."""
    return LocalFolder(path)
