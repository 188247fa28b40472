"""
FastAPI dependency functions for retrieving use cases from the container.
"""

from typing import Any

from privfs.container import container
from privfs.use_cases.files.list_files import ListFilesUseCase
from privfs.use_cases.files.root_file_system import RootFileSystem
from privfs.use_cases.files.transfer_files import FileTransferUseCase


def get_list_files_uc() -> ListFilesUseCase:
    """
    Get the list files use case from the container.

    Returns:
        ListFilesUseCase: The list files use case instance
    """
    return container.get_list_files_use_case()


def get_file_transfer_uc() -> FileTransferUseCase:
    """
    Get the file transfer use case from the container.

    Returns:
        FileTransferUseCase: The file transfer use case instance
    """
    return container.get_file_transfer_use_case()


def get_file_system() -> RootFileSystem[Any]:
    return container.get_file_system()
