"""
Provider-agnostic storage algorithms.

Everything here works only through the StorageFile / StorageFolder
contracts, so source and destination may come from different providers.
None of the composite operations are transactional: a failure part-way
leaves whatever was already copied or created in place. Moves copy first
and remove the source last, so a failure between the two leaves a
duplicate rather than losing data.
"""

import os
from pathlib import PurePath
from typing import List, Optional

from .base import StorageFile, StorageFolder, StorageItem
from .config import settings
from .errors import StorageAccessError, StorageError
from .logger import logger
from .types import CollisionOption, FileOpenMode

_SEPARATORS = {"/", os.sep} | ({os.altsep} if os.altsep else set())


# Paths and names
def get_name_without_extension(file: StorageFile) -> str:
    return PurePath(file.name).stem


def get_relative_path(item: StorageItem, relative_to: StorageItem) -> str:
    """
    Path of ``item`` relative to ``relative_to`` on the same filesystem.

    Raises:
        StorageAccessError: Either item has no filesystem path
    """
    return os.path.relpath(item.get_path(), relative_to.get_path())


def split_path(path: str) -> List[str]:
    """Split a relative path on every supported separator, dropping empty segments."""
    segments = [path]
    for separator in _SEPARATORS:
        segments = [part for segment in segments for part in segment.split(separator)]
    return [segment for segment in segments if segment]


# Queries
async def contains_item(folder: StorageFolder, name: str) -> bool:
    """Check whether ``folder`` has a direct child called ``name``."""
    return any(item.name == name for item in await folder.get_items())


# Copy and move
async def copy_file_contents(file: StorageFile, destination: StorageFile) -> None:
    """
    Stream every byte of ``file`` into ``destination``, replacing its content.

    Both contents are released before returning, also when copying fails.
    """
    async with await file.open(FileOpenMode.READ) as source_content:
        source = await source_content.read_stream()
        async with await destination.open(FileOpenMode.READ_WRITE) as target_content:
            target = await target_content.write_stream()
            while chunk := await source.read(settings.copy_chunk_size):
                await target.write(chunk)
            await target.flush()


async def copy_file_to(
    file: StorageFile,
    destination: StorageFolder,
    options: CollisionOption = CollisionOption.RENAME_IF_EXISTS,
    name: Optional[str] = None,
) -> StorageFile:
    """
    Copy ``file`` into ``destination``.

    Args:
        options: How to create the new file when its name is taken
        name: Name of the new file, defaults to the name of ``file``

    Returns:
        The new file, or ``file`` itself when the target already is ``file``
    """
    target_name = name if name is not None else file.name
    if CollisionOption(options) == CollisionOption.OVERWRITE and any(
        item == file for item in await destination.get_items() if item.name == target_name
    ):
        # overwriting would remove the source before it is read
        return file

    destination_file = await destination.create_file(target_name, options)
    if destination_file == file:
        # opening the write stream would truncate the only copy
        return destination_file
    await copy_file_contents(file, destination_file)
    logger.debug(f"Copied file '{file.name}' to '{destination_file.name}'")
    return destination_file


async def move_file_to(
    file: StorageFile,
    destination: StorageFolder,
    options: CollisionOption = CollisionOption.RENAME_IF_EXISTS,
    name: Optional[str] = None,
) -> StorageFile:
    """Copy ``file`` into ``destination``, then remove the source."""
    destination_file = await copy_file_to(file, destination, options, name)
    if destination_file == file:
        return destination_file
    try:
        await file.remove()
    except StorageError:
        logger.warning(
            f"Copied '{file.name}' to '{destination_file.name}' but could not remove the source"
        )
        raise
    return destination_file


async def copy_folder_contents(folder: StorageFolder, destination: StorageFolder) -> None:
    """
    Recursively copy every child of ``folder`` into ``destination``.

    Children are created with FAIL_IF_EXISTS: a name clash aborts the copy.

    Raises:
        StorageAccessError: A child is neither a file nor a folder
    """
    for item in await folder.get_items():
        if isinstance(item, StorageFile):
            await copy_file_to(item, destination, CollisionOption.FAIL_IF_EXISTS)
        elif isinstance(item, StorageFolder):
            await copy_folder_to(item, destination, CollisionOption.FAIL_IF_EXISTS)
        else:
            raise StorageAccessError(
                f'Attempted to copy an item that was neither a file or folder. Type "{type(item).__name__}"'
            )


async def copy_folder_to(
    folder: StorageFolder,
    destination: StorageFolder,
    options: CollisionOption = CollisionOption.RENAME_IF_EXISTS,
    name: Optional[str] = None,
) -> StorageFolder:
    """
    Copy ``folder`` and everything below it into ``destination``.

    ``options`` applies to the new top-level folder only.
    """
    destination_folder = await destination.create_folder(
        name if name is not None else folder.name, options
    )
    await copy_folder_contents(folder, destination_folder)
    logger.debug(f"Copied folder '{folder.name}' to '{destination_folder.name}'")
    return destination_folder


async def move_folder_to(
    folder: StorageFolder,
    destination: StorageFolder,
    options: CollisionOption = CollisionOption.RENAME_IF_EXISTS,
    name: Optional[str] = None,
) -> StorageFolder:
    """Copy ``folder`` into ``destination``, then remove the source tree."""
    destination_folder = await copy_folder_to(folder, destination, options, name)
    try:
        await folder.remove()
    except StorageError:
        logger.warning(
            f"Copied '{folder.name}' to '{destination_folder.name}' but could not remove the source"
        )
        raise
    return destination_folder


async def copy_to(
    item: StorageItem,
    destination: StorageFolder,
    options: CollisionOption = CollisionOption.RENAME_IF_EXISTS,
    name: Optional[str] = None,
) -> StorageItem:
    """Copy a file or folder, whichever ``item`` is."""
    if isinstance(item, StorageFile):
        return await copy_file_to(item, destination, options, name)
    if isinstance(item, StorageFolder):
        return await copy_folder_to(item, destination, options, name)
    raise StorageAccessError(
        f'Attempted to copy an item that was neither a file or folder. Type "{type(item).__name__}"'
    )


async def move_to(
    item: StorageItem,
    destination: StorageFolder,
    options: CollisionOption = CollisionOption.RENAME_IF_EXISTS,
    name: Optional[str] = None,
) -> StorageItem:
    """Move a file or folder, whichever ``item`` is."""
    if isinstance(item, StorageFile):
        return await move_file_to(item, destination, options, name)
    if isinstance(item, StorageFolder):
        return await move_folder_to(item, destination, options, name)
    raise StorageAccessError(
        f'Attempted to move an item that was neither a file or folder. Type "{type(item).__name__}"'
    )


# Recursive creation
async def create_folder_recursive(
    root: StorageFolder,
    path: str,
    options: CollisionOption = CollisionOption.OPEN_EXISTING,
) -> StorageFolder:
    """
    Create every folder along ``path`` below ``root`` and return the deepest.

    ``options`` is applied at every level: with RENAME_IF_EXISTS a clashing
    intermediate folder gets a numbered sibling too, not just the last one.
    """
    folder = root
    for segment in split_path(path):
        folder = await folder.create_folder(segment, options)
    return folder


async def create_file_recursive(
    root: StorageFolder,
    path: str,
    options: CollisionOption = CollisionOption.OPEN_EXISTING,
) -> StorageFile:
    """
    Create the file at ``path`` below ``root``, creating its folders first.

    Both the folders and the file are created with ``options``.

    Raises:
        StorageAccessError: path does not name a file
    """
    segments = split_path(path)
    if not segments or path[-1] in _SEPARATORS:
        raise StorageAccessError(f"The path '{path}' does not contain a file name")

    *folder_segments, file_name = segments
    folder = await create_folder_recursive(root, "/".join(folder_segments), options)
    return await folder.create_file(file_name, options)
