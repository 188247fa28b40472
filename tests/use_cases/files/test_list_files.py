"""
Tests for the ListFilesUseCase.
"""

import pytest

from privfs.exceptions import FileSystemError, SessionUnavailableError
from privfs.use_cases.files.list_files import ListFilesUseCase
from privfs.use_cases.files.root_file_system import RootFileSystem


@pytest.fixture
def use_case(fake_channel, mock_logger):
    return ListFilesUseCase(RootFileSystem(fake_channel), mock_logger)


class TestListFilesUseCase:
    """Test cases for the ListFilesUseCase."""

    def test_execute_success(self, use_case, fake_channel, mock_logger):
        fake_channel.respond(
            "ls -lAd /data/app", ["drwxr-xr-x 2 root root 4096 Jan 1 00:00 /data/app"]
        )
        fake_channel.respond(
            "ls -lA /data/app",
            [
                "total 8",
                "drwxr-xr-x 2 root root 4096 Jan 1 00:00 sub",
                "-rw-r--r-- 1 root root 123 Jan 1 00:00 file.txt",
            ],
        )

        files = use_case.execute("/data/app")

        assert [f.get_name() for f in files] == ["sub", "file.txt"]
        mock_logger.info.assert_any_call("Found 2 files")

    def test_execute_missing_directory(self, use_case):
        with pytest.raises(FileSystemError, match="Directory does not exist"):
            use_case.execute("/nonexistent")

    def test_execute_on_file(self, use_case, fake_channel):
        fake_channel.respond(
            "ls -lAd /data/a.txt", ["-rw-r--r-- 1 root root 1 Jan 1 00:00 /data/a.txt"]
        )
        with pytest.raises(FileSystemError, match="Path is not a directory"):
            use_case.execute("/data/a.txt")

    def test_session_failure_propagates(self, use_case, fake_channel):
        fake_channel.unavailable = True
        with pytest.raises(SessionUnavailableError):
            use_case.execute("/data")
