"""
Use case for moving file content in and out through permission-preserving streams.
"""

import logging
from typing import Any, Iterable, Iterator, Optional

from privfs.exceptions import BaseAppError, FileSystemError
from privfs.use_cases.files.root_file_system import RootFileSystem

DEFAULT_CHUNK_SIZE = 64 * 1024


class FileTransferUseCase:
    """Use case for downloading and uploading file content."""

    def __init__(
        self,
        file_system: RootFileSystem[Any],
        logger: Optional[logging.Logger] = None,
    ):
        self._file_system = file_system
        self._logger = logger or logging.getLogger(__name__)

    def read_chunks(
        self, path: str, chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> Iterator[bytes]:
        """
        Open a file and return an iterator over its content.

        The file is checked and opened before this returns; the stream is
        closed, and its permissions restored, when the iterator is exhausted
        or discarded.

        Raises:
            FileSystemError: If the path is not an existing file or cannot be opened
        """
        handle = self._file_system.get_file(path)
        if not handle.does_exist():
            raise FileSystemError(f"File does not exist: {path}")
        if handle.is_directory():
            raise FileSystemError(f"Path is a directory: {path}")
        try:
            stream = handle.create_input_stream(0)
        except OSError as e:
            self._logger.error(f"Cannot open {path} for reading: {e}")
            raise FileSystemError(f"Failed to read {path}: {str(e)}")
        self._logger.info(f"Reading {path}")
        return self._iterate(path, stream, chunk_size)

    def _iterate(self, path: str, stream: Any, chunk_size: int) -> Iterator[bytes]:
        try:
            while True:
                try:
                    chunk = stream.read(chunk_size)
                except OSError as e:
                    self._logger.error(f"Error reading {path}: {e}")
                    raise FileSystemError(f"Failed to read {path}: {str(e)}")
                if not chunk:
                    break
                yield chunk
        finally:
            stream.close()

    def write(self, path: str, chunks: Iterable[bytes]) -> int:
        """
        Write content to a file, replacing what was there.

        Returns:
            Number of bytes written

        Raises:
            FileSystemError: If the path is a directory or writing failed
        """
        handle = self._file_system.get_file(path)
        if handle.is_directory():
            raise FileSystemError(f"Path is a directory: {path}")
        written = 0
        try:
            with handle.create_output_stream(0) as stream:
                for chunk in chunks:
                    # raw streams may write less than asked
                    view = memoryview(chunk)
                    while view:
                        count = stream.write(view)
                        view = view[count:]
                        written += count
        except BaseAppError:
            raise
        except Exception as e:
            self._logger.error(f"Error writing {path}: {e}")
            raise FileSystemError(f"Failed to write {path}: {str(e)}")
        self._logger.info(f"Wrote {written} bytes to {path}")
        return written
