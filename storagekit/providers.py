"""
Provider and service layers that hand out storage roots.

StorageProvider and StorageService are the contracts platform integrations
implement. The local variants here cover plain directories on disk and
delegate the interactive pickers to an injected prompt callable, so a UI
toolkit (or a test) decides how the user is actually asked.
"""

import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Awaitable, Callable, Optional

import platformdirs
from aiofiles import os as aioos

from .base import StorageFile, StorageFolder
from .config import settings
from .errors import StorageAccessError, StorageError
from .local import LocalFile, LocalFolder
from .logger import logger
from .types import DialogSettings, PickerKind

# Returns the chosen path, or None when the user cancelled
PickerPrompt = Callable[[PickerKind, DialogSettings], Awaitable[Optional[str | Path]]]


class StorageProvider(ABC):
    """An external filesystem exposed through a single root folder."""

    @property
    @abstractmethod
    def initialized(self) -> bool: ...

    @abstractmethod
    async def initialize(self) -> bool:
        """
        Prepare the provider for use. Call once before get_root().

        Returns:
            Whether initialization succeeded
        """

    @abstractmethod
    async def get_root(self) -> StorageFolder:
        """Root folder holding everything the provider exposes."""


class StorageService(ABC):
    """Platform roots plus user-driven file and folder pickers."""

    @property
    @abstractmethod
    def app_data_folder(self) -> StorageFolder:
        """Folder where the application keeps its data files."""

    @property
    @abstractmethod
    def temp_folder(self) -> StorageFolder:
        """Folder for temporary files; the platform may clean it at any time."""

    @abstractmethod
    async def request_file_open(
        self, dialog_settings: DialogSettings
    ) -> Optional[StorageFile]:
        """
        Ask the user for an existing file to open.

        Returns:
            The chosen file, or None if the user cancelled

        Raises:
            StorageAccessError: The prompt failed or the file cannot be accessed
        """

    @abstractmethod
    async def request_file_save(
        self, dialog_settings: DialogSettings
    ) -> Optional[StorageFile]:
        """
        Ask the user where to save a file.

        Returns:
            The chosen file, or None if the user cancelled

        Raises:
            StorageAccessError: The prompt failed or the file cannot be accessed
        """

    @abstractmethod
    async def request_folder(
        self, dialog_settings: DialogSettings
    ) -> Optional[StorageFolder]:
        """
        Ask the user to pick a folder.

        Returns:
            The chosen folder, or None if the user cancelled

        Raises:
            StorageAccessError: The prompt failed or the folder cannot be accessed
        """


class LocalStorageProvider(StorageProvider):
    """Provider rooted at a directory on the local disk."""

    def __init__(self, root_path: str | Path) -> None:
        self._root_path = Path(root_path)
        self._root: Optional[LocalFolder] = None

    @property
    def initialized(self) -> bool:
        return self._root is not None

    async def initialize(self) -> bool:
        if self._root is not None:
            return True

        try:
            self._root = LocalFolder(self._root_path)
        except StorageAccessError as e:
            logger.error(f"Failed to initialize storage root {self._root_path}: {e}")
            return False

        logger.info(f"Storage provider initialized at {self._root.get_path()}")
        return True

    async def get_root(self) -> LocalFolder:
        if self._root is None:
            raise StorageAccessError(
                f"The storage provider for {self._root_path} has not been initialized"
            )
        return self._root


class LocalStorageService(StorageService):
    """
    Storage service backed by local directories.

    The app-data folder is ``settings.app_data_path`` or the platform's user
    data directory for the app; the temp folder is ``settings.temp_path`` or
    a per-app directory under the system temp directory. Both are created on
    construction.
    """

    def __init__(self, prompt: PickerPrompt, app_name: Optional[str] = None) -> None:
        self._prompt = prompt
        self._app_name = app_name or settings.app_name
        self._app_data_folder = LocalFolder(
            settings.app_data_path or platformdirs.user_data_path(self._app_name)
        )
        self._temp_folder = LocalFolder(
            settings.temp_path or Path(tempfile.gettempdir()) / self._app_name
        )

    @property
    def app_data_folder(self) -> LocalFolder:
        return self._app_data_folder

    @property
    def temp_folder(self) -> LocalFolder:
        return self._temp_folder

    async def _ask(
        self, kind: PickerKind, dialog_settings: DialogSettings
    ) -> Optional[Path]:
        try:
            chosen = await self._prompt(kind, dialog_settings)
        except StorageError:
            raise
        except Exception as e:
            raise StorageAccessError(
                f"The {kind.value} prompt failed: {type(e).__name__}: {e}"
            ) from e

        if chosen is None:
            logger.debug(f"The {kind.value} prompt was cancelled")
            return None
        return Path(chosen)

    def _check_file_type(self, path: Path, dialog_settings: DialogSettings) -> None:
        if not dialog_settings.accepts(path.suffix):
            raise StorageAccessError(
                f"The file {path.name} is not one of the shown file types: "
                f"{', '.join(dialog_settings.shown_file_types)}"
            )

    async def request_file_open(
        self, dialog_settings: DialogSettings
    ) -> Optional[LocalFile]:
        path = await self._ask(PickerKind.OPEN_FILE, dialog_settings)
        if path is None:
            return None

        if not await aioos.path.isfile(path):
            raise StorageAccessError(f"The selected file {path} does not exist")
        self._check_file_type(path, dialog_settings)
        return LocalFile(path)

    async def request_file_save(
        self, dialog_settings: DialogSettings
    ) -> Optional[LocalFile]:
        path = await self._ask(PickerKind.SAVE_FILE, dialog_settings)
        if path is None:
            return None

        self._check_file_type(path, dialog_settings)
        return LocalFile(path)

    async def request_folder(
        self, dialog_settings: DialogSettings
    ) -> Optional[LocalFolder]:
        path = await self._ask(PickerKind.FOLDER, dialog_settings)
        if path is None:
            return None
        return LocalFolder(path)
