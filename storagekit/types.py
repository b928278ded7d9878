"""
Enumerations and value models shared by every storage implementation.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class CollisionOption(str, Enum):
    """What a create operation does when the requested name is already taken"""

    FAIL_IF_EXISTS = "fail_if_exists"  # Raise StorageConflictError
    RENAME_IF_EXISTS = "rename_if_exists"  # Use the first free "name_N"
    OVERWRITE = "overwrite"  # Destroy the existing item, then create
    OPEN_EXISTING = "open_existing"  # Return the existing item unchanged


class FileOpenMode(str, Enum):
    """Access granted by an opened FileContent"""

    READ = "read"
    READ_WRITE = "read_write"


class PickerKind(str, Enum):
    """Which user prompt a StorageService is asked to show"""

    OPEN_FILE = "open_file"
    SAVE_FILE = "save_file"
    FOLDER = "folder"


class DialogSettings(BaseModel):
    """Appearance and filters of a file or folder picker"""

    model_config = ConfigDict(frozen=True)

    override_select_text: Optional[str] = None  # None keeps the platform default
    shown_file_types: Tuple[str, ...] = ()  # Extensions without the dot, empty shows all

    @field_validator("shown_file_types")
    @classmethod
    def _strip_dots(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(file_type.lstrip(".") for file_type in value)

    def accepts(self, file_type: str) -> bool:
        """Check whether a file extension passes the filter."""
        if not self.shown_file_types:
            return True
        return file_type.lstrip(".").lower() in {
            shown.lower() for shown in self.shown_file_types
        }
