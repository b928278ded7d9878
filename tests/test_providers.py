"""
Tests for the local storage provider and service.
"""

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from storagekit import (
    DialogSettings,
    LocalFile,
    LocalFolder,
    LocalStorageProvider,
    LocalStorageService,
    PickerKind,
    StorageAccessError,
)
from storagekit.config import settings


class RecordingPrompt:
    """Prompt stand-in returning a fixed answer and recording every request."""

    def __init__(self, answer=None, error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.requests: list[tuple[PickerKind, DialogSettings]] = []

    async def __call__(self, kind: PickerKind, dialog_settings: DialogSettings):
        self.requests.append((kind, dialog_settings))
        if self.error is not None:
            raise self.error
        return self.answer


class TestDialogSettings:
    """Test the dialog settings value model."""

    def test_defaults(self):
        dialog_settings = DialogSettings()

        assert dialog_settings.override_select_text is None
        assert dialog_settings.shown_file_types == ()
        assert dialog_settings.accepts("anything")

    def test_leading_dots_stripped(self):
        dialog_settings = DialogSettings(shown_file_types=[".txt", "md"])

        assert dialog_settings.shown_file_types == ("txt", "md")
        assert dialog_settings.accepts(".TXT")
        assert dialog_settings.accepts("md")
        assert not dialog_settings.accepts("pdf")

    def test_frozen(self):
        dialog_settings = DialogSettings(override_select_text="Pick")

        with pytest.raises(ValidationError):
            dialog_settings.override_select_text = "Other"


class TestLocalStorageProvider:
    """Test provider initialization and root access."""

    @pytest.fixture
    def temp_dir(self):
        """Create temporary directory for tests."""
        with tempfile.TemporaryDirectory(prefix="storagekit_provider_test_") as temp_dir:
            yield Path(temp_dir)

    @pytest.mark.asyncio
    async def test_get_root_before_initialize_fails(self, temp_dir):
        provider = LocalStorageProvider(temp_dir / "root")

        assert provider.initialized is False
        with pytest.raises(StorageAccessError):
            await provider.get_root()

    @pytest.mark.asyncio
    async def test_initialize_creates_root(self, temp_dir):
        provider = LocalStorageProvider(temp_dir / "root")

        assert await provider.initialize() is True
        assert await provider.initialize() is True
        assert provider.initialized is True

        root = await provider.get_root()
        assert root == LocalFolder(temp_dir / "root")
        assert (temp_dir / "root").is_dir()

    @pytest.mark.asyncio
    async def test_initialize_failure_returns_false(self, temp_dir, caplog):
        (temp_dir / "occupied").write_text("not a folder")
        provider = LocalStorageProvider(temp_dir / "occupied")

        assert await provider.initialize() is False
        assert provider.initialized is False
        assert "Failed to initialize storage root" in caplog.text


class TestLocalStorageService:
    """Test platform folders and picker delegation."""

    @pytest.fixture
    def temp_dir(self):
        """Create temporary directory for tests."""
        with tempfile.TemporaryDirectory(prefix="storagekit_service_test_") as temp_dir:
            yield Path(temp_dir)

    @pytest.fixture(autouse=True)
    def configured_paths(self, temp_dir, monkeypatch):
        monkeypatch.setattr(settings, "app_data_path", temp_dir / "app_data")
        monkeypatch.setattr(settings, "temp_path", temp_dir / "tmp")

    def test_platform_folders_from_settings(self, temp_dir):
        service = LocalStorageService(RecordingPrompt())

        assert service.app_data_folder == LocalFolder(temp_dir / "app_data")
        assert service.temp_folder == LocalFolder(temp_dir / "tmp")

    def test_platform_folders_default_locations(self, temp_dir, monkeypatch):
        monkeypatch.setattr(settings, "app_data_path", None)
        monkeypatch.setattr(settings, "temp_path", None)
        monkeypatch.setattr(
            "storagekit.providers.platformdirs.user_data_path",
            lambda app_name: temp_dir / "platform" / app_name,
        )
        monkeypatch.setattr(
            "storagekit.providers.tempfile.gettempdir", lambda: str(temp_dir / "system_tmp")
        )

        service = LocalStorageService(RecordingPrompt(), app_name="demo")

        assert service.app_data_folder.get_path() == str(temp_dir / "platform" / "demo")
        assert service.temp_folder.get_path() == str(temp_dir / "system_tmp" / "demo")

    @pytest.mark.asyncio
    async def test_request_file_open(self, temp_dir):
        (temp_dir / "doc.txt").write_text("document")
        prompt = RecordingPrompt(answer=str(temp_dir / "doc.txt"))
        service = LocalStorageService(prompt)
        dialog_settings = DialogSettings(override_select_text="Open", shown_file_types=["txt"])

        file = await service.request_file_open(dialog_settings)

        assert file == LocalFile(temp_dir / "doc.txt")
        assert await file.read_text() == "document"
        assert prompt.requests == [(PickerKind.OPEN_FILE, dialog_settings)]

    @pytest.mark.asyncio
    async def test_request_file_open_missing_file_fails(self, temp_dir):
        service = LocalStorageService(RecordingPrompt(answer=temp_dir / "nope.txt"))

        with pytest.raises(StorageAccessError):
            await service.request_file_open(DialogSettings())

        assert not (temp_dir / "nope.txt").exists()

    @pytest.mark.asyncio
    async def test_request_file_open_filtered_type_fails(self, temp_dir):
        (temp_dir / "image.png").write_bytes(b"png")
        service = LocalStorageService(RecordingPrompt(answer=temp_dir / "image.png"))

        with pytest.raises(StorageAccessError, match="shown file types"):
            await service.request_file_open(DialogSettings(shown_file_types=["txt"]))

    @pytest.mark.asyncio
    async def test_request_file_save_creates_file(self, temp_dir):
        prompt = RecordingPrompt(answer=temp_dir / "out.csv")
        service = LocalStorageService(prompt)

        file = await service.request_file_save(DialogSettings())

        assert file.name == "out.csv"
        assert (temp_dir / "out.csv").is_file()
        assert prompt.requests[0][0] == PickerKind.SAVE_FILE

    @pytest.mark.asyncio
    async def test_request_folder(self, temp_dir):
        prompt = RecordingPrompt(answer=temp_dir / "picked")
        service = LocalStorageService(prompt)

        folder = await service.request_folder(DialogSettings())

        assert folder == LocalFolder(temp_dir / "picked")
        assert prompt.requests[0][0] == PickerKind.FOLDER

    @pytest.mark.asyncio
    async def test_cancellation_returns_none(self):
        service = LocalStorageService(RecordingPrompt(answer=None))

        assert await service.request_file_open(DialogSettings()) is None
        assert await service.request_file_save(DialogSettings()) is None
        assert await service.request_folder(DialogSettings()) is None

    @pytest.mark.asyncio
    async def test_prompt_failure_becomes_access_error(self):
        error = RuntimeError("dialog crashed")
        service = LocalStorageService(RecordingPrompt(error=error))

        with pytest.raises(StorageAccessError, match="dialog crashed") as exc_info:
            await service.request_folder(DialogSettings())

        assert exc_info.value.__cause__ is error
