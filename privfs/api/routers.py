"""
FastAPI router definitions for the API endpoints.
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from privfs.api.dependencies import (
    get_file_system,
    get_file_transfer_uc,
    get_list_files_uc,
)
from privfs.api.schemas import (
    ErrorResponse,
    FileInfo,
    FileListResponse,
    MoveRequest,
    OperationResponse,
    PathRequest,
)
from privfs.exceptions import (
    BaseAppError,
    SessionTimeoutError,
    SessionUnavailableError,
)

router = APIRouter()
logger = logging.getLogger(__name__)

_ERRORS = {400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}


def _raise_http(e: BaseAppError) -> NoReturn:
    """Map application errors to HTTP errors."""
    if isinstance(e, (SessionUnavailableError, SessionTimeoutError)):
        logger.error(f"Privileged session failure: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))


@router.get("/files", response_model=FileListResponse, responses=_ERRORS)
def list_files(
    path: str = Query(..., description="Directory path to list"),
):
    """
    List the entries of a directory.

    Args:
        path: Path to the directory to list

    Returns:
        FileListResponse: Entries in the order the listing produced them

    Raises:
        HTTPException: 400 if the path is not a directory, 503 if the session is down
    """
    try:
        files = get_list_files_uc().execute(path)
        return FileListResponse(
            path=path, files=[FileInfo.from_entity(f) for f in files]
        )
    except BaseAppError as e:
        _raise_http(e)


@router.get("/files/stat", response_model=FileInfo, responses=_ERRORS)
def stat_file(
    path: str = Query(..., description="Path to describe"),
):
    """Describe one path; missing paths are reported with exists=false."""
    try:
        return FileInfo.from_entity(get_file_system().get_file(path))
    except BaseAppError as e:
        _raise_http(e)


@router.post("/files/mkdir", response_model=OperationResponse, responses=_ERRORS)
def make_directory(body: PathRequest):
    try:
        handle = get_file_system().get_file(body.path)
        return OperationResponse(
            path=handle.get_absolute_path(), success=handle.mkdir()
        )
    except BaseAppError as e:
        _raise_http(e)


@router.delete("/files", response_model=OperationResponse, responses=_ERRORS)
def delete_file(
    path: str = Query(..., description="Path to remove recursively"),
):
    """Remove a file or a whole directory tree."""
    try:
        handle = get_file_system().get_file(path)
        return OperationResponse(
            path=handle.get_absolute_path(), success=handle.delete()
        )
    except BaseAppError as e:
        _raise_http(e)


@router.post("/files/move", response_model=OperationResponse, responses=_ERRORS)
def move_file(body: MoveRequest):
    try:
        file_system = get_file_system()
        source = file_system.get_file(body.source)
        destination = file_system.get_file(body.destination)
        return OperationResponse(
            path=destination.get_absolute_path(), success=source.move(destination)
        )
    except BaseAppError as e:
        _raise_http(e)


@router.get("/files/content", responses=_ERRORS)
def download_file(
    path: str = Query(..., description="File to download"),
):
    """Stream a file's content."""
    try:
        chunks = get_file_transfer_uc().read_chunks(path)
    except BaseAppError as e:
        _raise_http(e)
    return StreamingResponse(chunks, media_type="application/octet-stream")


@router.put("/files/content", response_model=OperationResponse, responses=_ERRORS)
async def upload_file(
    request: Request,
    path: str = Query(..., description="File to create or replace"),
):
    """Replace a file's content with the request body."""
    data = await request.body()
    try:
        written = await run_in_threadpool(get_file_transfer_uc().write, path, [data])
    except BaseAppError as e:
        _raise_http(e)
    return OperationResponse(path=path, success=True, bytes_written=written)
