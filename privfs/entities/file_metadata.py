"""
File metadata domain entity.
"""

from dataclasses import dataclass
from datetime import datetime

from privfs.exceptions import FileSystemError

EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class FileMetadata:
    """
    Point-in-time description of one filesystem entry, usually parsed from a listing line.
    """

    name: str
    is_directory: bool
    is_file: bool
    exists: bool
    size: int
    modified_at: datetime

    def __post_init__(self) -> None:
        """
        Validate the entry type flags and size.

        Raises:
            FileSystemError: If the flags contradict each other or size is negative
        """
        if self.size < 0:
            raise FileSystemError(f"Size must not be negative: {self.size}")

        if self.exists and self.is_directory == self.is_file:
            raise FileSystemError(
                f"Existing entry '{self.name}' must be either a directory or a file"
            )

        if not self.exists and (self.is_directory or self.is_file):
            raise FileSystemError(
                f"Missing entry '{self.name}' cannot be a directory or a file"
            )

    @classmethod
    def missing(cls, name: str) -> "FileMetadata":
        """Metadata for a path that was queried but not found."""
        return cls(
            name=name,
            is_directory=False,
            is_file=False,
            exists=False,
            size=0,
            modified_at=EPOCH,
        )
