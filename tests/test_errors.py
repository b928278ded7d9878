"""
Tests for the wrap_os_errors decorator.

Tests cover:
- OSError translation for sync and async functions
- Message formatting with parameter substitution
- Pass-through of storage errors and unrelated exceptions
- Debug logging of translated failures
"""

import asyncio
import logging
import re

import pytest

from storagekit.errors import (
    StorageAccessError,
    StorageConflictError,
    StorageError,
    StoragePermissionError,
    wrap_os_errors,
)


class TestErrorKinds:
    """Test the error hierarchy."""

    def test_all_kinds_share_base(self):
        for kind in (StorageAccessError, StoragePermissionError, StorageConflictError):
            assert issubclass(kind, StorageError)

    def test_permission_error_is_not_builtin(self):
        """Mode violations must not be confused with OS permission failures."""
        assert not issubclass(StoragePermissionError, PermissionError)


class TestOSErrorTranslation:
    """Test OSError is re-raised as StorageAccessError."""

    def test_sync_function(self):
        @wrap_os_errors("Reading config")
        def read_config():
            raise FileNotFoundError("no such file")

        with pytest.raises(StorageAccessError) as exc_info:
            read_config()

        assert str(exc_info.value) == "Reading config: no such file"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_async_function(self):
        @wrap_os_errors("Listing folder")
        async def list_folder():
            await asyncio.sleep(0.01)
            raise PermissionError("denied")

        with pytest.raises(StorageAccessError) as exc_info:
            await list_folder()

        assert "Listing folder: denied" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, PermissionError)

    @pytest.mark.asyncio
    async def test_successful_execution_passes_result(self):
        @wrap_os_errors("Never fails")
        async def compute():
            return "Success!"

        assert await compute() == "Success!"

    def test_without_message_uses_function_name(self):
        @wrap_os_errors()
        def broken():
            raise OSError("disk gone")

        with pytest.raises(StorageAccessError) as exc_info:
            broken()

        assert "broken failed: disk gone" in str(exc_info.value)


class TestPassThrough:
    """Test exceptions other than OSError are not touched."""

    @pytest.mark.asyncio
    async def test_storage_errors_pass_through(self):
        @wrap_os_errors("Creating item")
        async def create():
            raise StorageConflictError("already exists")

        with pytest.raises(StorageConflictError, match="already exists"):
            await create()

    def test_value_error_passes_through(self):
        @wrap_os_errors("Parsing")
        def parse():
            raise ValueError("bad value")

        with pytest.raises(ValueError, match="bad value"):
            parse()


class TestMessageFormatting:
    """Test message formatting with parameter substitution."""

    def test_single_parameter(self):
        @wrap_os_errors("Could not open {name}")
        def open_item(name: str, mode: str = "r"):
            raise OSError("boom")

        with pytest.raises(StorageAccessError, match="Could not open notes.txt: boom"):
            open_item("notes.txt")

    def test_attribute_of_self(self):
        class Item:
            def __init__(self, name: str):
                self.name = name

            @wrap_os_errors("Could not remove {self.name}")
            def remove(self):
                raise OSError("busy")

        with pytest.raises(StorageAccessError, match="Could not remove report: busy"):
            Item("report").remove()

    def test_default_values_available(self):
        @wrap_os_errors("Opening {path} with {mode}")
        async def open_path(path: str, mode: str = "rb"):
            raise OSError("x")

        with pytest.raises(StorageAccessError, match="Opening a.bin with rb"):
            asyncio.run(open_path("a.bin"))

    def test_missing_parameter_falls_back_to_raw_message(self, caplog):
        @wrap_os_errors("Failed for {unknown}")
        def func(value: int):
            raise OSError("x")

        with pytest.raises(StorageAccessError, match=re.escape("Failed for {unknown}: x")):
            func(1)

        assert "Failed to format message" in caplog.text


class TestLogging:
    """Test translated failures are logged."""

    def test_translation_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="storagekit")

        @wrap_os_errors("Touching {name}")
        def touch(name: str):
            raise IsADirectoryError("is a directory")

        with pytest.raises(StorageAccessError):
            touch("folder")

        assert "IsADirectoryError" in caplog.text
        assert "Touching folder" in caplog.text
        assert "DEBUG" in caplog.text
