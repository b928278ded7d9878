"""
Name collision handling shared by file and folder creation.
"""

from typing import Awaitable, Callable, TypeVar

from .errors import StorageConflictError
from .logger import logger
from .types import CollisionOption

T = TypeVar("T")


def numbered_name(name: str, number: int) -> str:
    """Candidate name probed by RENAME_IF_EXISTS, e.g. 'notes.txt_2'."""
    return f"{name}_{number}"


async def resolve_collision(
    name: str,
    options: CollisionOption | str,
    *,
    exists: Callable[[str], Awaitable[bool]],
    create: Callable[[str], Awaitable[T]],
    open_existing: Callable[[str], Awaitable[T]],
    remove: Callable[[str], Awaitable[None]],
) -> T:
    """
    Create the child ``name`` of some folder according to ``options``.

    The callables work on child names of that folder:
        exists: whether anything is stored under the name
        create: create a fresh, empty item under a free name
        open_existing: reference the item already stored under the name
        remove: destroy whatever is stored under the name

    RENAME_IF_EXISTS probes name_1, name_2, ... with ``exists`` and then
    creates; the probe and the create are separate steps, so a concurrent
    creator may take the same name in between.

    Raises:
        StorageConflictError: The name is taken and options is FAIL_IF_EXISTS
        ValueError: options is not a CollisionOption
    """
    options = CollisionOption(options)

    if not await exists(name):
        return await create(name)

    if options == CollisionOption.OVERWRITE:
        logger.debug(f"Overwriting existing item '{name}'")
        await remove(name)
        return await create(name)

    if options == CollisionOption.FAIL_IF_EXISTS:
        raise StorageConflictError(f"The requested item '{name}' already exists")

    if options == CollisionOption.OPEN_EXISTING:
        return await open_existing(name)

    if options == CollisionOption.RENAME_IF_EXISTS:
        number = 1
        while await exists(numbered_name(name, number)):
            number += 1
        candidate = numbered_name(name, number)
        logger.debug(f"'{name}' already exists, creating '{candidate}' instead")
        return await create(candidate)

    raise ValueError(f"Unsupported collision option: {options!r}")
