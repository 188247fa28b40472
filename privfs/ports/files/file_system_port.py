"""
Filesystem provider port interface consumed by file-serving front ends.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class FileSystemPort(ABC, Generic[T]):
    """Port interface for a filesystem view producing file handles of type T."""

    @abstractmethod
    def get_file(self, path: str) -> T:
        """
        Stat a path and return a handle for it.

        Args:
            path: Absolute path, or a path relative to the working directory

        Returns:
            A handle; it reports does_exist() False when the path was not found

        Raises:
            SessionUnavailableError: If the privileged session is unusable
        """
        pass

    @abstractmethod
    def get_home_directory(self) -> T:
        """Return a handle for the home directory."""
        pass

    @abstractmethod
    def get_working_directory(self) -> T:
        """Return a handle for the current working directory."""
        pass

    @abstractmethod
    def change_working_directory(self, path: str) -> bool:
        """
        Change the working directory.

        Args:
            path: Absolute path, or a path relative to the working directory

        Returns:
            True if the path is an existing directory and became the working directory
        """
        pass

    def is_random_accessible(self) -> bool:
        """Whether stream offsets are honored."""
        return False
