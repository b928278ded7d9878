"""
Storage error kinds and the decorator that maps OS failures onto them.
"""

import functools
import inspect
from typing import Callable, ParamSpec, TypeVar

from .logger import logger

P = ParamSpec("P")
R = TypeVar("R")


class StorageError(Exception):
    """Base class for every error raised by storagekit."""


class StorageAccessError(StorageError):
    """
    An item cannot be found, created, enumerated, opened or deleted.

    "Does not exist", backend I/O failures and malformed paths all share this
    kind; inspect the message (or ``__cause__``) to tell them apart.
    """


class StoragePermissionError(StorageError):
    """The operation is not allowed by the mode a file content was opened with."""


class StorageConflictError(StorageError):
    """A creation or rename target already exists and the collision option offers no way out."""


def wrap_os_errors(
    message: str = "",
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator that re-raises ``OSError`` from the wrapped call as ``StorageAccessError``.

    Supports both sync and async functions while preserving type signatures.
    ``StorageError`` subclasses pass through untouched.

    Args:
        message: Error message. Braces are substituted with the bound call
            arguments, e.g. ``"Failed to remove {self.name}"``.

    Usage:
        @wrap_os_errors("Failed to read {self.name}")
        async def read_text(self) -> str:
            ...
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        sig = inspect.signature(func)
        func_name = func.__qualname__

        def bind_arguments(args: tuple, kwargs: dict) -> dict:
            try:
                bound = sig.bind(*args, **kwargs)
                bound.apply_defaults()
                return dict(bound.arguments)
            except TypeError as e:
                logger.warning(
                    f"Failed to bind arguments for function {func_name}: {e}",
                    stacklevel=3,  # bind_arguments -> wrapper -> user code
                )
                return {}

        def format_message(bound_args: dict) -> str:
            if not message:
                return f"{func_name} failed"

            if "{" in message and "}" in message:
                try:
                    return message.format_map(bound_args)
                except (AttributeError, IndexError, KeyError, ValueError) as e:
                    logger.warning(
                        f"Failed to format message '{message}' with arguments: {e}",
                        stacklevel=3,  # format_message -> wrapper -> user code
                    )
            return message

        def translate(args: tuple, kwargs: dict, error: OSError) -> StorageAccessError:
            text = f"{format_message(bind_arguments(args, kwargs))}: {error}"
            logger.debug(f"{type(error).__name__} in {func_name}: {text}", stacklevel=3)
            return StorageAccessError(text)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                try:
                    return await func(*args, **kwargs)
                except OSError as e:
                    raise translate(args, kwargs, e) from e

            return async_wrapper  # type: ignore[return-value]

        else:

            @functools.wraps(func)
            def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                try:
                    return func(*args, **kwargs)
                except OSError as e:
                    raise translate(args, kwargs, e) from e

            return sync_wrapper

    return decorator
