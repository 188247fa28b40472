"""
Pydantic models for API requests and responses.
"""

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field


class FileInfo(BaseModel):
    """Schema for file information."""

    name: str = Field(..., description="Entry name")
    path: str = Field(..., description="Absolute path")
    size: int = Field(..., description="Size in bytes (meaningless for directories)")
    type: str = Field(..., description="'file', 'directory' or 'missing'")
    exists: bool = Field(..., description="Whether the path was found")
    modified_at: datetime = Field(..., description="Last modification time")

    @classmethod
    def from_entity(cls, file_entity: Any) -> "FileInfo":
        """Create a FileInfo schema from a file handle."""
        details = file_entity.get_details()
        return cls(
            name=details["name"],
            path=details["path"],
            size=details["size"],
            type=details["type"],
            exists=details["exists"],
            modified_at=details["modified_at"],
        )


class FileListResponse(BaseModel):
    """Schema for file list response."""

    path: str = Field(..., description="Listed directory")
    files: List[FileInfo] = Field(..., description="Entries in listing order")


class PathRequest(BaseModel):
    """Schema for requests acting on a single path."""

    path: str = Field(..., description="Absolute path, or relative to the home directory")


class MoveRequest(BaseModel):
    """Schema for move request."""

    source: str = Field(..., description="Path to move")
    destination: str = Field(..., description="Target path")


class OperationResponse(BaseModel):
    """Schema for the outcome of a mutating operation."""

    path: str = Field(..., description="Path the operation acted on")
    success: bool = Field(..., description="Whether the command exited with status 0")
    bytes_written: int | None = Field(None, description="Bytes written by an upload")


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str = Field(..., description="Error message")
