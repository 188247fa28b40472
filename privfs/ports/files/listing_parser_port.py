"""
Listing parser port interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from privfs.entities.file_metadata import FileMetadata


class ListingParserPort(ABC):
    """Port interface for turning one directory-listing line into metadata."""

    @abstractmethod
    def parse_line(self, line: str) -> Optional[FileMetadata]:
        """
        Parse one line of long-format listing output.

        Args:
            line: A single output line

        Returns:
            FileMetadata for entry lines, None for anything else
            (headers, blank lines, "total N")
        """
        pass
